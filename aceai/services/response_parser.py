# Strict parse-then-validate step for untrusted model output
# aceai/services/response_parser.py
import json
import re
from dataclasses import dataclass
from typing import Any, Generic, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_FENCE_RE = re.compile(r"```(?:json|JSON)?[ \t]*\n?|\n?```")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class ParseError:
    reason: str
    raw: str


@dataclass(frozen=True)
class SchemaError:
    reason: str
    raw: str


ParseResult = Union[Ok[T], ParseError, SchemaError]


def strip_code_fences(text: str) -> str:
    """Removes markdown code-fence wrapping (```json ... ```) from a completion."""
    return _FENCE_RE.sub("", text).strip()


def parse_json(raw: str) -> Union[Ok[Any], ParseError]:
    cleaned = strip_code_fences(raw or "")
    if not cleaned:
        return ParseError("empty response", raw or "")
    try:
        return Ok(json.loads(cleaned))
    except json.JSONDecodeError as e:
        return ParseError(f"invalid JSON: {e}", raw)


def parse_model(raw: str, model: Type[M]) -> ParseResult[M]:
    """Parses `raw` as JSON (after fence stripping) and validates it against `model`."""
    parsed = parse_json(raw)
    if not isinstance(parsed, Ok):
        return parsed
    return validate_payload(parsed.value, model, raw)


def validate_payload(payload: Any, model: Type[M], raw: str = "") -> Union[Ok[M], SchemaError]:
    """Validates an already-decoded JSON value against `model`."""
    try:
        return Ok(model.model_validate(payload))
    except ValidationError as e:
        return SchemaError(f"{model.__name__} validation failed: {e.error_count()} error(s): {e}", raw)


def failure_reason(result: Union[ParseError, SchemaError]) -> str:
    kind = "parse error" if isinstance(result, ParseError) else "schema error"
    return f"{kind}: {result.reason}"
