"""Strict parse-then-validate of reasoning-collaborator output.

LLM text is untrusted. Parsing never raises; it returns either ``Parsed`` or
``Malformed`` so each caller decides whether a failure is fatal
(requirement interpretation) or triggers a fallback (scoring).
"""

import json
import re
from dataclasses import dataclass
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*\n?")
_FENCE_CLOSE = re.compile(r"\n?```\s*$")


@dataclass(frozen=True)
class Parsed:
    value: Any


@dataclass(frozen=True)
class Malformed:
    reason: str
    raw: str = ""


ParseResult = Parsed | Malformed


def strip_fences(raw_text: str) -> str:
    """Remove a markdown code fence (```json ... ```) around the payload."""
    cleaned = _FENCE_OPEN.sub("", raw_text.strip())
    return _FENCE_CLOSE.sub("", cleaned).strip()


def parse_json_payload(
    raw_text: str,
    expected: type[dict[Any, Any]] | type[list[Any]],
) -> ParseResult:
    """Parse an LLM response into a JSON object or array.

    Handles markdown-wrapped JSON and prose around a single JSON payload.
    """
    if not raw_text or not raw_text.strip():
        return Malformed("empty response", raw_text or "")

    cleaned = strip_fences(raw_text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        data = _slice_payload(cleaned, expected)
        if data is None:
            return Malformed(f"invalid JSON: {e}", raw_text)

    if not isinstance(data, expected):
        return Malformed(
            f"expected a JSON {expected.__name__}, got {type(data).__name__}", raw_text,
        )
    return Parsed(data)


def validate_model(
    raw_text: str,
    model: type[ModelT],
    required: tuple[str, ...] = (),
) -> ModelT | Malformed:
    """Parse a JSON object and validate it against ``model``.

    Keys in ``required`` must be present even where the model has a default.
    """
    result = parse_json_payload(raw_text, dict)
    if isinstance(result, Malformed):
        return result
    missing = [key for key in required if key not in result.value]
    if missing:
        return Malformed(f"missing required fields: {missing}", raw_text)
    try:
        return model.model_validate(result.value)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(p) for p in err['loc']) or '<root>'}: {err['msg']}"
            for err in e.errors()
        )
        return Malformed(f"schema violation: {problems}", raw_text)


def _slice_payload(text: str, expected: type[dict[Any, Any]] | type[list[Any]]) -> Any:
    open_char, close_char = ("{", "}") if expected is dict else ("[", "]")
    start = text.find(open_char)
    end = text.rfind(close_char)
    if start == -1 or end <= start:
        return None
    try:
        return json.loads(text[start : end + 1])
    except json.JSONDecodeError:
        return None
