"""プロセス内 TTL キャッシュ.

期限切れエントリは同じキーの次回参照時に削除する（定期掃除なし）。
ロックは取らない。同時に miss した場合は両方が計算し、後勝ちで上書きされる。
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable

from mindshare.config import CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

_MISSING = object()


class TTLCache:
    """キーごとに有効期限を持つ dict ベースのキャッシュ."""

    def __init__(
        self,
        ttl_seconds: float = CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        # key -> (value, expires_at)
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str, default: Any = None) -> Any:
        """有効なエントリの値を返す. 無い・期限切れなら default."""
        item = self._entries.get(key)
        if item is None:
            return default
        value, expires_at = item
        if self._clock() > expires_at:
            self._entries.pop(key, None)
            return default
        return value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self.ttl_seconds if ttl_seconds is None else ttl_seconds
        self._entries[key] = (value, self._clock() + ttl)

    def get_or_compute(
        self,
        key: str,
        compute_fn: Callable[[], Any],
        ttl_seconds: float | None = None,
    ) -> Any:
        """キャッシュにあればそれを返し、無ければ compute_fn の結果を保存して返す.

        空リストなど偽値もキャッシュ済みとして扱う。
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            logger.debug("キャッシュヒット: key=%s", key)
            return value

        logger.debug("キャッシュミス: key=%s", key)
        value = compute_fn()
        self.set(key, value, ttl_seconds)
        return value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)


# プロセス全体で共有するリーダーボードキャッシュ
leaderboard_cache = TTLCache()
