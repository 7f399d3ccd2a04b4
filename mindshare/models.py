"""データモデル定義."""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class Timeframe:
    """集計期間."""

    key: str  # API の timeframe パラメータ (例: 24h)
    label: str


@dataclass(frozen=True)
class NormalizedEntry:
    """リーダーボードの1レコードを正規化したもの."""

    rank: int | float  # 1始まり。レコードに無ければページ位置から採番
    username: str | None
    mindshare: int | float | None
    raw: Any = field(default=None, compare=False, repr=False)


@dataclass
class TimeframeResult:
    """1期間分の判定結果."""

    total_fetched: int
    rank100_mindshare: int | float | None
    found: bool = False
    rank: int | float | None = None
    mindshare: int | float | None = None
    needed_mindshare: int | float | None = None

    def to_dict(self) -> dict:
        """レスポンス用の dict に変換する（見つからない場合は順位系を含めない）."""
        out = {
            "totalFetched": self.total_fetched,
            "rank100_mindshare": self.rank100_mindshare,
            "found": self.found,
        }
        if self.found:
            out["rank"] = self.rank
            out["mindshare"] = self.mindshare
            out["needed_mindshare"] = self.needed_mindshare
        return out
