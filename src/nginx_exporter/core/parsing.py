"""JSON access log line parsing."""

import json
import math
from dataclasses import dataclass
from typing import Any

from nginx_exporter.core.models import LogRecord, ParseError

_MISSING = object()


@dataclass(frozen=True)
class FieldMapping:
    """Names of the JSON keys holding each LogRecord field.

    Dotted names match either a flat key ("nginx.time.request") or a nested
    object path ({"nginx": {"time": {"request": ...}}}).
    """

    method: str = "nginx.access.method"
    path: str = "nginx.access.url"
    host: str = "nginx.access.host"
    status_code: str = "http.response.status_code"
    request_time: str = "nginx.time.request"


DEFAULT_FIELDS = FieldMapping()


def _lookup(obj: dict[str, Any], name: str) -> Any:
    """Find a field by flat key first, then by nested dotted path."""
    if name in obj:
        return obj[name]
    current: Any = obj
    for part in name.split("."):
        if not isinstance(current, dict) or part not in current:
            return _MISSING
        current = current[part]
    return current


def _require(obj: dict[str, Any], name: str) -> Any:
    value = _lookup(obj, name)
    if value is _MISSING:
        raise ParseError(f"missing field {name!r}")
    return value


def _string_field(obj: dict[str, Any], name: str) -> str:
    value = _require(obj, name)
    if not isinstance(value, str):
        raise ParseError(f"field {name!r} must be a string, got {type(value).__name__}")
    return value


def _number_field(obj: dict[str, Any], name: str) -> float:
    """Read a numeric field given as a JSON number or a numeric string."""
    value = _require(obj, name)
    # bool is an int subclass but never a valid measurement
    if isinstance(value, bool):
        raise ParseError(f"field {name!r} must be numeric, got bool")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            raise ParseError(f"field {name!r} is not numeric: {value!r}") from None
    raise ParseError(f"field {name!r} must be numeric, got {type(value).__name__}")


def _status_code(obj: dict[str, Any], name: str) -> int:
    value = _number_field(obj, name)
    if not value.is_integer():
        raise ParseError(f"status code is not an integer: {value!r}")
    code = int(value)
    if not 100 <= code <= 599:
        raise ParseError(f"status code out of range: {code}")
    return code


def _request_time(obj: dict[str, Any], name: str) -> float:
    value = _number_field(obj, name)
    if not math.isfinite(value) or value < 0:
        raise ParseError(f"request time must be a non-negative number: {value!r}")
    return value


def parse_line(raw: bytes | str, fields: FieldMapping = DEFAULT_FIELDS) -> LogRecord:
    """Parse one access log line into a LogRecord.

    Args:
        raw: A single line, with or without its trailing newline.
        fields: Key names of the record fields in the JSON object.

    Returns:
        The validated LogRecord.

    Raises:
        ParseError: If the line is not valid UTF-8 or JSON, is not an object,
            or a required field is missing, mistyped, or out of range.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"invalid UTF-8: {e}") from e
    try:
        obj = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"invalid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise ParseError(f"expected a JSON object, got {type(obj).__name__}")

    return LogRecord(
        method=_string_field(obj, fields.method),
        path=_string_field(obj, fields.path),
        status_code=_status_code(obj, fields.status_code),
        host=_string_field(obj, fields.host),
        request_time=_request_time(obj, fields.request_time),
    )
