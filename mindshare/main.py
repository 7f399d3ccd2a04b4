"""マインドシェア順位チェック — サーバー起動エントリーポイント."""

from __future__ import annotations

import logging
import sys
from datetime import datetime

from mindshare.app import app
from mindshare.config import HOST, LOG_DIR, LOG_LEVEL, PORT


def setup_logging() -> None:
    """ロギングの初期設定."""
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    log_file = LOG_DIR / f"checker_{datetime.now().strftime('%Y%m%d')}.log"
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout),
            logging.FileHandler(log_file, encoding="utf-8"),
        ],
    )


def run() -> None:
    """メイン処理."""
    setup_logging()
    logger = logging.getLogger(__name__)
    logger.info("=== マインドシェア順位チェック 起動: %s:%d ===", HOST, PORT)
    app.run(host=HOST, port=PORT)


if __name__ == "__main__":
    run()
