"""Schema adapter over pydantic validation.

A schema is anything ``pydantic.TypeAdapter`` accepts, or an object that
already exposes ``validate_python`` (e.g. a prebuilt ``TypeAdapter``).
"""

from __future__ import annotations

import inspect
import threading
from dataclasses import dataclass
from typing import Any

from pydantic import TypeAdapter, ValidationError

from contractrpc.utils.exceptions import ConfigurationError

Issue = dict[str, Any]

_lock = threading.RLock()
_adapters: dict[int, tuple[Any, Any]] = {}


@dataclass(slots=True)
class SchemaParseResult:
    """Outcome of validating one value."""

    success: bool
    value: Any = None
    issues: list[Issue] | None = None


def get_validator(schema: Any) -> Any:
    """Return a cached object exposing ``validate_python`` for ``schema``."""
    if hasattr(schema, "validate_python") and not isinstance(schema, type):
        return schema
    key = id(schema)
    with _lock:
        cached = _adapters.get(key)
        # Keep the schema alive alongside its adapter so the id stays valid.
        if cached is None or cached[0] is not schema:
            cached = (schema, TypeAdapter(schema))
            _adapters[key] = cached
        return cached[1]


def issues_from_validation_error(exc: ValidationError) -> list[Issue]:
    """Normalise pydantic errors into JSON-safe ``{message, path, code}`` dicts."""
    return [
        {
            "message": err.get("msg", ""),
            "path": list(err.get("loc", ())),
            "code": err.get("type", "value_error"),
        }
        for err in exc.errors(include_url=False)
    ]


def parse_with_schema(schema: Any, value: Any) -> SchemaParseResult:
    """Validate ``value`` synchronously; never raises for invalid data."""
    validator = get_validator(schema)
    try:
        parsed = validator.validate_python(value)
    except ValidationError as exc:
        return SchemaParseResult(success=False, issues=issues_from_validation_error(exc))
    if inspect.isawaitable(parsed):
        if inspect.iscoroutine(parsed):
            parsed.close()
        raise ConfigurationError("Schema is async", schema=repr(schema))
    return SchemaParseResult(success=True, value=parsed)


def schema_to_json_schema(schema: Any) -> dict[str, Any]:
    """Portable JSON-Schema description for contract publishing."""
    validator = get_validator(schema)
    if hasattr(validator, "json_schema"):
        return validator.json_schema()
    return {}
