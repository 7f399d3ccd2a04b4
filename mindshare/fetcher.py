"""リーダーボード API のページ取得・集約モジュール.

取得戦略:
  1. page=1 から順に1ページずつ取得（前ページの結果で停止判定するため逐次）
  2. 空ページ・リスト無しでページング終了
  3. 取得失敗時はそのページ以降を打ち切り、それまでの結果を返す
"""

from __future__ import annotations

import logging
from typing import Any, Callable

import requests

from mindshare.config import (
    LEADERBOARD_API_URL,
    MAX_PAGES,
    PAGE_SIZE_HINT,
    REQUEST_TIMEOUT,
    SORT_BY,
    USER_AGENT,
)
from mindshare.models import NormalizedEntry
from mindshare.normalizer import normalize

logger = logging.getLogger(__name__)

# (timeframe_key, page) -> JSON。失敗時は None
PageFetcher = Callable[[str, int], Any]


def fetch_leaderboard_page(timeframe_key: str, page: int) -> Any:
    """リーダーボード API の1ページ分の JSON を取得する.

    Args:
        timeframe_key: "24h" / "7d" / "month"
        page: ページ番号（1始まり）

    Returns:
        デコード済み JSON。失敗時は None。
    """
    params = {"timeframe": timeframe_key, "sortBy": SORT_BY, "page": page}
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/json",
    }

    try:
        resp = requests.get(
            LEADERBOARD_API_URL, params=params, headers=headers, timeout=REQUEST_TIMEOUT
        )
        resp.raise_for_status()
        return resp.json()
    except (requests.RequestException, ValueError, RecursionError) as e:
        logger.warning(
            "ページ取得失敗: timeframe=%s, page=%d, error=%s", timeframe_key, page, e
        )
        return None


def extract_records(payload: Any) -> list:
    """レスポンス JSON からレコードのリストを取り出す.

    優先順: payload 自体がリスト → "data" → "items" → 最初に見つかったリスト値
    """
    if not payload:
        return []
    if isinstance(payload, list):
        return payload
    if not isinstance(payload, dict):
        return []

    for key in ("data", "items"):
        if isinstance(payload.get(key), list):
            return payload[key]

    for value in payload.values():
        if isinstance(value, list):
            return value
    return []


def fetch_all_pages(
    timeframe_key: str,
    max_pages: int = MAX_PAGES,
    page_size_hint: int = PAGE_SIZE_HINT,
    fetch_page: PageFetcher = fetch_leaderboard_page,
) -> list[NormalizedEntry]:
    """指定期間の全ページを取得し、正規化済みエントリを上流の順序のまま返す.

    username を取り出せないレコードは捨てる。
    """
    results: list[NormalizedEntry] = []
    skipped = 0

    for page in range(1, max_pages + 1):
        payload = fetch_page(timeframe_key, page)
        if payload is None:
            # 取得失敗（ログは fetch_page 側）。ここまでの結果で打ち切る
            break

        records = extract_records(payload)
        if not records:
            logger.info("ページング終了: timeframe=%s, page=%d", timeframe_key, page)
            break

        for i, record in enumerate(records):
            entry = normalize(record, page, i, page_size_hint)
            if entry is None or entry.username is None:
                skipped += 1
                continue
            results.append(entry)

    if skipped:
        logger.info(
            "username 無しのレコードをスキップ: timeframe=%s, %d 件", timeframe_key, skipped
        )
    logger.info("取得完了: timeframe=%s, %d 件", timeframe_key, len(results))
    return results
