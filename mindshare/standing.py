"""100位ライン判定・ユーザー順位計算モジュール."""

from __future__ import annotations

import math

from mindshare.models import NormalizedEntry, TimeframeResult

TARGET_RANK = 100


def _is_finite_number(value) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


def find_rank100_entry(entries: list[NormalizedEntry]) -> NormalizedEntry | None:
    """100位に相当するエントリを決める.

    判定順:
      1. rank == 100 のエントリ（mindshare が None でも採用）
      2. mindshare が有限のエントリが 100 件以上 → mindshare 降順の 100 番目
      3. 全エントリが 100 件以上 → rank 昇順の 100 番目
    どれにも当たらなければ None（データ不足）。
    """
    for e in entries:
        if e.rank == TARGET_RANK:
            return e

    with_mindshare = [e for e in entries if _is_finite_number(e.mindshare)]
    if len(with_mindshare) >= TARGET_RANK:
        with_mindshare.sort(key=lambda e: e.mindshare, reverse=True)
        return with_mindshare[TARGET_RANK - 1]

    if len(entries) >= TARGET_RANK:
        by_rank = sorted(entries, key=lambda e: e.rank)
        return by_rank[TARGET_RANK - 1]

    return None


def resolve_rank100(entries: list[NormalizedEntry]) -> int | float | None:
    """100位の mindshare を返す. 決められなければ None."""
    entry = find_rank100_entry(entries)
    return entry.mindshare if entry is not None else None


def find_user(entries: list[NormalizedEntry], username: str) -> NormalizedEntry | None:
    """username（小文字化済み）に完全一致する最初のエントリを返す. 大文字小文字は無視."""
    for e in entries:
        if e.username and e.username.lower() == username:
            return e
    return None


def compute_standing(entries: list[NormalizedEntry], username: str) -> TimeframeResult:
    """1期間分のエントリからユーザーの順位と100位までの不足分を計算する.

    Args:
        entries: fetch_all_pages の結果
        username: 小文字化済みのユーザー名

    Returns:
        TimeframeResult
    """
    rank100 = resolve_rank100(entries)
    result = TimeframeResult(total_fetched=len(entries), rank100_mindshare=rank100)

    you = find_user(entries, username)
    if you is None:
        return result

    result.found = True
    result.rank = you.rank
    result.mindshare = you.mindshare
    if _is_finite_number(rank100) and _is_finite_number(you.mindshare):
        result.needed_mindshare = max(0, rank100 - you.mindshare)
    return result
