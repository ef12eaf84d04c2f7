"""Tolerant decoding of JSON arrays from generation-service output."""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Callable

_LEADING_FENCE = re.compile(r"^```[\w+-]*[ \t]*\n?")
_TRAILING_FENCE = re.compile(r"\n?[ \t]*```$")

SYNTAX = "syntax"
SHAPE = "shape"


@dataclass(frozen=True)
class ParseResult:
    """Tagged outcome of decoding one batch response.

    Exactly one of ``value`` or ``kind``/``error`` is meaningful, depending
    on ``success``.
    """

    success: bool
    value: list | None = None
    kind: str | None = None  # "syntax" | "shape"
    error: str | None = None

    @classmethod
    def ok(cls, value: list) -> ParseResult:
        return cls(success=True, value=value)

    @classmethod
    def failure(cls, kind: str, error: str) -> ParseResult:
        return cls(success=False, kind=kind, error=error)


def strip_code_fences(text: str) -> str:
    """Remove a leading ```lang fence and a trailing ``` fence, if present."""
    text = text.strip()
    if text.startswith("```"):
        text = _LEADING_FENCE.sub("", text, count=1)
        text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_batch(
    raw: Any,
    expected_length: int,
    item_check: Callable[[Any], bool],
) -> ParseResult:
    """Decode ``raw`` as a JSON array of ``expected_length`` valid items.

    Never raises. Text that is not JSON is a ``syntax`` failure; JSON with the
    wrong top level, length or element types is a ``shape`` failure.
    """
    if not isinstance(raw, str):
        return ParseResult.failure(SHAPE, f"expected text, got {type(raw).__name__}")

    text = strip_code_fences(raw)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        # Model sometimes adds a sentence of chatter around the array
        data = _extract_brackets(text)
        if data is None:
            return ParseResult.failure(SYNTAX, f"{exc.msg} at position {exc.pos}")

    if not isinstance(data, list):
        return ParseResult.failure(SHAPE, f"top level is {type(data).__name__}, not array")
    if len(data) != expected_length:
        return ParseResult.failure(
            SHAPE, f"expected {expected_length} items, got {len(data)}"
        )
    for i, item in enumerate(data):
        if not item_check(item):
            return ParseResult.failure(SHAPE, f"item {i} has unexpected type {type(item).__name__}")
    return ParseResult.ok(data)


def is_string(item: Any) -> bool:
    return isinstance(item, str)


def is_string_list(item: Any) -> bool:
    return isinstance(item, list) and all(isinstance(v, str) for v in item)


def _extract_brackets(text: str) -> list | None:
    """Try to extract JSON array from first '[' to last ']'."""
    start = text.find("[")
    end = text.rfind("]")
    if start != -1 and end != -1 and end > start:
        try:
            return json.loads(text[start : end + 1])
        except json.JSONDecodeError:
            pass
    return None
