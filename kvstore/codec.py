"""JSON text <-> key/value mapping.

The file holds a single object, each field a stored key mapped to its scalar
in JSON literal form. Kinds are recovered from the literal itself: quoted
strings, ``true``/``false``, integers and numbers with a fraction or exponent.
"""
from __future__ import annotations

import json
import math
from typing import Dict, Optional

from .exceptions import CodecError
from .values import Scalar, check_int64


def encode(data: Dict[str, Scalar], indent: Optional[int] = None) -> str:
    separators = (",", ":") if indent is None else (",", ": ")
    return json.dumps(
        data, ensure_ascii=False, allow_nan=False, indent=indent, separators=separators
    )


def decode(text: str) -> Dict[str, Scalar]:
    if not text.strip():
        raise CodecError("Empty document.")
    try:
        data = json.loads(text, parse_constant=_reject_constant)
    except json.JSONDecodeError as exc:
        raise CodecError(f"Invalid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise CodecError(f"Expected a JSON object, got {type(data).__name__}.")
    for key, value in data.items():
        _check_value(key, value)
    return data


def _reject_constant(name: str) -> None:
    raise CodecError(f"{name} is not a valid JSON value.")


def _check_value(key: str, value: object) -> None:
    if isinstance(value, float) and not math.isfinite(value):
        raise CodecError(f"Value for [{key}] is not a finite number.")
    if isinstance(value, (str, bool, float)):
        return
    if isinstance(value, int):
        try:
            check_int64(value)
        except OverflowError as exc:
            raise CodecError(f"Value for [{key}] is out of range: {exc}") from exc
        return
    raise CodecError(
        f"Value for [{key}] has unsupported type {type(value).__name__}."
    )
