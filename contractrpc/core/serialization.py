"""Structured JSON serializer for values richer than plain JSON.

``serialize`` splits a value into a JSON-compatible tree plus a flat
annotation table ``{"values": {path: tag}}``; ``deserialize`` reverses
it. Paths are dot-joined keys/indexes into the JSON tree, with ``.`` and
``\\`` escaped by a backslash. A tag on the root value itself is
stored separately as ``meta["root"]``.
"""

from __future__ import annotations

import base64
import json
import math
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable
from uuid import UUID

# Integers beyond this magnitude are not exactly representable by JSON
# numbers on every peer.
MAX_SAFE_INTEGER = 2**53 - 1

SerializedValue = dict[str, Any]


def escape_path_segment(segment: str | int) -> str:
    return str(segment).replace("\\", "\\\\").replace(".", "\\.")


def join_path(parts: list[str | int]) -> str:
    return ".".join(escape_path_segment(p) for p in parts)


def split_path(path: str) -> list[str]:
    """Inverse of ``join_path`` (segments come back as strings)."""
    parts: list[str] = []
    current: list[str] = []
    escaped = False
    for char in path:
        if escaped:
            current.append(char)
            escaped = False
        elif char == "\\":
            escaped = True
        elif char == ".":
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
    parts.append("".join(current))
    return parts


def _encode_number(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return "Infinity" if value > 0 else "-Infinity"


def _decode_number(value: str) -> float:
    return {"NaN": math.nan, "Infinity": math.inf, "-Infinity": -math.inf}[value]


_DECODERS: dict[str, Callable[[Any], Any]] = {
    "Date": datetime.fromisoformat,
    "date": date.fromisoformat,
    "time": time.fromisoformat,
    "Decimal": Decimal,
    "UUID": UUID,
    "bigint": int,
    "number": _decode_number,
    "bytes": base64.b64decode,
    "set": set,
    "frozenset": frozenset,
    "tuple": tuple,
    "map": lambda pairs: {_freeze(k): v for k, v in pairs},
}


def _freeze(key: Any) -> Any:
    # Map keys decoded from JSON arrays come back as lists.
    if isinstance(key, list):
        return tuple(_freeze(k) for k in key)
    return key


class _Walker:
    def __init__(self) -> None:
        self.annotations: dict[str, str] = {}
        self.root_tag: str | None = None

    def _tag(self, path: list[str | int], tag: str) -> None:
        if not path:
            self.root_tag = tag
        else:
            self.annotations[join_path(path)] = tag

    def walk(self, value: Any, path: list[str | int], seen: set[int]) -> Any:
        if value is None or isinstance(value, (bool, str)):
            return value
        if isinstance(value, int):
            if abs(value) > MAX_SAFE_INTEGER:
                self._tag(path, "bigint")
                return str(value)
            return value
        if isinstance(value, float):
            if math.isfinite(value):
                return value
            self._tag(path, "number")
            return _encode_number(value)
        # datetime is a date subclass, so it has to be checked first.
        if isinstance(value, datetime):
            self._tag(path, "Date")
            return value.isoformat()
        if isinstance(value, date):
            self._tag(path, "date")
            return value.isoformat()
        if isinstance(value, time):
            self._tag(path, "time")
            return value.isoformat()
        if isinstance(value, Decimal):
            self._tag(path, "Decimal")
            return str(value)
        if isinstance(value, UUID):
            self._tag(path, "UUID")
            return str(value)
        if isinstance(value, (bytes, bytearray)):
            self._tag(path, "bytes")
            return base64.b64encode(bytes(value)).decode("ascii")

        marker = id(value)
        if marker in seen:
            raise ValueError("cannot serialize a self-referencing value")
        seen = seen | {marker}

        if isinstance(value, dict):
            if all(isinstance(k, str) for k in value):
                return {k: self.walk(v, [*path, k], seen) for k, v in value.items()}
            self._tag(path, "map")
            return [
                [self.walk(k, [*path, i, 0], seen), self.walk(v, [*path, i, 1], seen)]
                for i, (k, v) in enumerate(value.items())
            ]
        if isinstance(value, (set, frozenset)):
            self._tag(path, "frozenset" if isinstance(value, frozenset) else "set")
            return [self.walk(v, [*path, i], seen) for i, v in enumerate(value)]
        if isinstance(value, tuple):
            self._tag(path, "tuple")
            return [self.walk(v, [*path, i], seen) for i, v in enumerate(value)]
        if isinstance(value, list):
            return [self.walk(v, [*path, i], seen) for i, v in enumerate(value)]
        if hasattr(value, "model_dump"):
            return self.walk(value.model_dump(), path, seen)
        raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def serialize(value: Any) -> SerializedValue:
    """Encode ``value`` into ``{"json": tree}`` plus ``meta`` when tags were needed."""
    walker = _Walker()
    tree = walker.walk(value, [], set())
    result: SerializedValue = {"json": tree}
    meta: dict[str, Any] = {}
    if walker.annotations:
        meta["values"] = walker.annotations
    if walker.root_tag is not None:
        meta["root"] = walker.root_tag
    if meta:
        result["meta"] = meta
    return result


def _decoder_for(tag: str) -> Callable[[Any], Any]:
    decoder = _DECODERS.get(tag)
    if decoder is None:
        raise ValueError(f"unknown serialized type tag: {tag}")
    return decoder


def _get(container: Any, segment: str) -> Any:
    if isinstance(container, list):
        return container[int(segment)]
    return container[segment]


def _set(container: Any, segment: str, item: Any) -> None:
    if isinstance(container, list):
        container[int(segment)] = item
    else:
        container[segment] = item


def deserialize(payload: SerializedValue) -> Any:
    """Decode a ``serialize`` result back into the original value."""
    if not isinstance(payload, dict) or "json" not in payload:
        raise ValueError("serialized payload must be an object with a 'json' key")
    tree = payload["json"]
    meta = payload.get("meta") or {}
    values = meta.get("values") or {}
    if not isinstance(values, dict):
        raise ValueError("serialized meta.values must be an object")

    # Deepest paths first: ancestors are still plain JSON while children convert.
    ordered = sorted(
        ((split_path(path), tag) for path, tag in values.items()),
        key=lambda item: len(item[0]),
        reverse=True,
    )
    for parts, tag in ordered:
        decoder = _decoder_for(tag)
        parent = tree
        for segment in parts[:-1]:
            parent = _get(parent, segment)
        _set(parent, parts[-1], decoder(_get(parent, parts[-1])))
    root_tag = meta.get("root")
    if root_tag is not None:
        tree = _decoder_for(root_tag)(tree)
    return tree


def stringify(value: Any) -> str:
    return json.dumps(serialize(value), separators=(",", ":"), ensure_ascii=False)


def parse(text: str | bytes) -> Any:
    return deserialize(json.loads(text))
