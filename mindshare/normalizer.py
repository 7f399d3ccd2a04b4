"""リーダーボードのレコード正規化モジュール.

上流 API のレスポンス形式は固定されていないため、キー名の部分一致で
{rank, username, mindshare} を推定する。

判定ルール（フィールドごとに上から順に評価し、最初の一致を採用）:
  - username: キー名に username / user / handle / twitter / name / creator を含む最初のキー。
    該当キーが無ければ "@" で始まる文字列値を探す
  - mindshare: キー名に mindshare / score / ms / value / points を含み、有限の数値に変換できる最初のキー
  - rank: キー名に rank / position を含み、有限の数値に変換できる最初のキー。
    無ければページ番号とページ内位置から採番する
"""

from __future__ import annotations

import math
import re
from typing import Any, Callable, NamedTuple

from mindshare.models import NormalizedEntry


class FieldRule(NamedTuple):
    """1フィールド分の抽出ルール."""

    name: str
    hints: tuple[str, ...]  # 小文字化したキー名に含まれていれば一致
    extract: Callable[[Any], Any]  # 変換できなければ None
    first_key_only: bool  # True: 最初に一致したキーで打ち切る


# JS の Number() が受け付ける10進リテラル（"1_000" や全角数字は数値扱いしない）
_NUMERIC_LITERAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


def _to_number(value: Any) -> int | float | None:
    """JSON 値を有限の数値に変換する. 変換できなければ None.

    null・空文字は 0、真偽値は 0/1 として扱う。
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        if not _NUMERIC_LITERAL.fullmatch(text):
            return None
        if any(c in text for c in ".eE"):
            number = float(text)
        else:
            number = int(text)
    else:
        return None

    if isinstance(number, float) and not math.isfinite(number):
        return None
    return number


def _to_text(value: Any) -> str:
    """JSON 値をユーザー名用の文字列にする."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


FIELD_RULES = (
    FieldRule(
        "username",
        ("username", "user", "handle", "twitter", "name", "creator"),
        _to_text,
        True,
    ),
    FieldRule(
        "mindshare",
        ("mindshare", "score", "ms", "value", "points"),
        _to_number,
        False,
    ),
    FieldRule("rank", ("rank", "position"), _to_number, False),
)


def _apply_rule(rule: FieldRule, record: dict) -> Any:
    for key, value in record.items():
        lowered = str(key).lower()
        if not any(hint in lowered for hint in rule.hints):
            continue
        extracted = rule.extract(value)
        if extracted is not None or rule.first_key_only:
            return extracted
    return None


def _find_at_handle(record: dict) -> str | None:
    """値の中から "@" で始まる文字列を探す."""
    for value in record.values():
        if isinstance(value, str) and value.startswith("@"):
            return value[1:]
    return None


def extract_fields(record: dict) -> dict[str, Any]:
    """FIELD_RULES を順に適用し、フィールド名 -> 値 の dict を返す."""
    return {rule.name: _apply_rule(rule, record) for rule in FIELD_RULES}


def normalize(
    record: Any, page: int, index: int, page_size_hint: int = 100
) -> NormalizedEntry | None:
    """1レコードを NormalizedEntry に正規化する.

    Args:
        record: 上流 API の1レコード（任意の JSON 値）
        page: ページ番号（1始まり）
        index: ページ内の位置（0始まり）
        page_size_hint: rank 採番に使う想定ページサイズ

    Returns:
        NormalizedEntry。record がオブジェクトでなければ None。
        username / mindshare は取れなければ None、rank は常に数値。
    """
    if not isinstance(record, dict):
        return None

    fields = extract_fields(record)

    username = fields["username"]
    if username is not None:
        username = username.strip()
        if username.startswith("@"):
            username = username[1:]
    else:
        username = _find_at_handle(record)

    rank = fields["rank"]
    if rank is None:
        rank = (page - 1) * page_size_hint + (index + 1)
    elif isinstance(rank, float) and rank.is_integer():
        rank = int(rank)

    return NormalizedEntry(
        rank=rank,
        username=username or None,
        mindshare=fields["mindshare"],
        raw=record,
    )
