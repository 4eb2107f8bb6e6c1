"""
Value serialization using orjson.

Stored values are JSON text. Non-string dict keys are written as strings.
A missing raw value decodes to None.
"""

from __future__ import annotations

from typing import Any

import orjson

from lscache.exceptions import SerializationError


def encode_value(value: Any, key: str | None = None) -> str:
    """Serialize a value to JSON text.

    Raises:
        SerializationError: If the value is not JSON serializable
            (including circular structures).
    """
    try:
        return orjson.dumps(value, option=orjson.OPT_NON_STR_KEYS).decode("utf-8")
    except orjson.JSONEncodeError as e:
        raise SerializationError(
            f"Cannot serialize value: {e}", context={"key": key}
        ) from e


def decode_value(raw: str | None, key: str | None = None) -> Any:
    """Deserialize JSON text, mapping a missing record to None.

    Raises:
        SerializationError: If the stored text is not valid JSON.
    """
    if raw is None:
        return None
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as e:
        raise SerializationError(
            f"Cannot deserialize stored value: {e}", context={"key": key}
        ) from e
