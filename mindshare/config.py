"""設定モジュール — 環境変数・定数定義."""

import os
from pathlib import Path

from dotenv import load_dotenv

from mindshare.models import Timeframe

# .env はプロジェクトルートに配置
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJECT_ROOT / ".env")

# --- リーダーボード API ---
LEADERBOARD_API_URL: str = os.environ.get(
    "LEADERBOARD_API_URL", "https://leaderboard-bice-mu.vercel.app/api/zama"
)
SORT_BY = "mindshare"

TIMEFRAMES = [
    Timeframe(key="24h", label="Last 24 hours"),
    Timeframe(key="7d", label="Last 7 days"),
    Timeframe(key="month", label="Last 30 days"),
]

# --- ページング ---
MAX_PAGES = int(os.environ.get("MAX_PAGES", "20"))
PAGE_SIZE_HINT = int(os.environ.get("PAGE_SIZE_HINT", "100"))  # rank 欠落時の採番用

# --- キャッシュ ---
CACHE_TTL_SECONDS = int(os.environ.get("CACHE_TTL_SECONDS", "300"))

# --- リクエスト設定 ---
REQUEST_TIMEOUT = float(os.environ.get("REQUEST_TIMEOUT", "15"))  # 秒
USER_AGENT = "mindshare-rank-checker/0.1 (+https://github.com/)"

# --- サーバー ---
HOST = os.environ.get("HOST", "0.0.0.0")
PORT = int(os.environ.get("PORT", "8000"))

# --- ログ ---
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
LOG_DIR = Path(os.environ.get("LOG_DIR", _PROJECT_ROOT / "logs"))
