"""Decoding of semi-structured JSON returned by the LLM.

Provider output is cleaned (Markdown fences and any chatter around the outer
object are dropped), parsed, then handed to a coercion function that turns
the raw dict into a typed record. The outcome is a ``DecodeResult`` so the
retry loop can branch on it without catching exceptions.
"""
import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")

FENCE_PATTERN = re.compile(r"```(?:json)?\n?|\n?```")
LEADING_NOISE = re.compile(r"^[^{]*")
TRAILING_NOISE = re.compile(r"[^}]*$")


class SchemaViolation(ValueError):
    """Raised by coercion functions when a payload cannot be salvaged."""


class DecodeStatus(str, Enum):
    OK = "ok"
    SYNTAX_ERROR = "syntax_error"
    SCHEMA_ERROR = "schema_error"


@dataclass
class DecodeResult(Generic[T]):
    status: DecodeStatus
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is DecodeStatus.OK


def strip_json_wrapping(text: str) -> str:
    cleaned = FENCE_PATTERN.sub("", text or "")
    cleaned = LEADING_NOISE.sub("", cleaned, count=1)
    cleaned = TRAILING_NOISE.sub("", cleaned, count=1)
    return cleaned.strip()


def decode_json_object(text: str, coerce: Callable[[dict], T]) -> DecodeResult[T]:
    cleaned = strip_json_wrapping(text)
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        return DecodeResult(DecodeStatus.SYNTAX_ERROR, error=str(e))

    if not isinstance(parsed, dict):
        return DecodeResult(
            DecodeStatus.SCHEMA_ERROR,
            error=f"Expected a JSON object, got {type(parsed).__name__}",
        )

    try:
        return DecodeResult(DecodeStatus.OK, value=coerce(parsed))
    except SchemaViolation as e:
        return DecodeResult(DecodeStatus.SCHEMA_ERROR, error=str(e))


# Field coercions shared by the analyzer's record builders.

def as_str(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) else default


def as_str_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def clamp_percentage(value: Any) -> float:
    if not is_number(value) or value != value:
        return 0
    return min(max(value, 0), 100)


def as_dict_list(value: Any) -> List[dict]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]
