"""マインドシェア順位チェック — 期間ごとの取得と結果組み立て.

処理フロー:
  1. クエリのユーザー名を正規化
  2. 3期間を並行取得（各期間はキャッシュ経由、ページングは逐次）
  3. 期間ごとに100位ラインとユーザーの順位を計算
  4. 期間キーごとの結果にまとめる
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor

from mindshare.cache import TTLCache, leaderboard_cache
from mindshare.config import MAX_PAGES, PAGE_SIZE_HINT, TIMEFRAMES
from mindshare.fetcher import PageFetcher, fetch_all_pages, fetch_leaderboard_page
from mindshare.models import NormalizedEntry
from mindshare.standing import compute_standing

logger = logging.getLogger(__name__)


def normalize_query_username(raw: str | None) -> str | None:
    """クエリのユーザー名を前後空白・先頭 "@" 除去、小文字化する.

    空判定は "@" 除去前に行うため、"@" だけなら "" を返す。空白のみ・未指定なら None。
    """
    text = (raw or "").strip()
    if not text:
        return None
    if text.startswith("@"):
        text = text[1:]
    return text.lower()


def load_timeframe(
    timeframe_key: str,
    cache: TTLCache = leaderboard_cache,
    fetch_page: PageFetcher = fetch_leaderboard_page,
) -> list[NormalizedEntry]:
    """1期間分の正規化済みエントリをキャッシュ経由で取得する."""
    return cache.get_or_compute(
        f"tf:{timeframe_key}",
        lambda: fetch_all_pages(
            timeframe_key, MAX_PAGES, PAGE_SIZE_HINT, fetch_page=fetch_page
        ),
    )


def check_user(
    username: str,
    cache: TTLCache = leaderboard_cache,
    fetch_page: PageFetcher = fetch_leaderboard_page,
) -> dict:
    """全期間についてユーザーの順位と100位までの不足分を返す.

    Args:
        username: normalize_query_username 済みのユーザー名

    Returns:
        {"username": str, "results": {timeframe_key: TimeframeResult.to_dict(), ...}}
    """
    with ThreadPoolExecutor(max_workers=len(TIMEFRAMES)) as executor:
        # map は入力順で返すので results は TIMEFRAMES の順になる
        buckets = list(
            executor.map(
                lambda tf: load_timeframe(tf.key, cache=cache, fetch_page=fetch_page),
                TIMEFRAMES,
            )
        )

    output = {"username": username, "results": {}}
    for tf, entries in zip(TIMEFRAMES, buckets):
        standing = compute_standing(entries, username)
        output["results"][tf.key] = standing.to_dict()
        logger.info(
            "%s (%s): 取得 %d 件, 100位 mindshare=%s, found=%s",
            tf.key, tf.label, standing.total_fetched,
            standing.rank100_mindshare, standing.found,
        )

    return output
