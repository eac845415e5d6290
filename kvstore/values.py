from __future__ import annotations

import enum
import math
import struct
from typing import Any, Union

from .exceptions import IllegalTypeError, TypeMismatchError

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ScalarKind(str, enum.Enum):
    STR = "STR"
    INT = "INT"
    BOOL = "BOOL"
    FLOAT = "FLOAT"
    DOUBLE = "DOUBLE"


class Float32(float):
    """A float rounded to single precision.

    Plain ``float`` values are stored as ``DOUBLE``; wrap a value in
    ``Float32`` to store it as ``FLOAT``.
    """

    def __new__(cls, value: Any = 0.0) -> "Float32":
        return super().__new__(cls, to_single(float(value)))


Scalar = Union[str, int, bool, float]

_TYPE_KINDS = {
    str: ScalarKind.STR,
    int: ScalarKind.INT,
    bool: ScalarKind.BOOL,
    float: ScalarKind.DOUBLE,
    Float32: ScalarKind.FLOAT,
}


def to_single(value: float) -> float:
    if math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def check_int64(value: int) -> int:
    if not INT64_MIN <= value <= INT64_MAX:
        raise OverflowError(f"Integer {value} does not fit in 64 bits.")
    return value


def kind_of(value: Any) -> ScalarKind:
    """Return the kind of a value, rejecting anything outside the scalar set."""
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return ScalarKind.BOOL
    if isinstance(value, float):
        if not math.isfinite(value):
            # NaN and Infinity have no JSON literal
            raise ValueError(f"Non-finite float {value!r} cannot be stored.")
        return ScalarKind.FLOAT if isinstance(value, Float32) else ScalarKind.DOUBLE
    if isinstance(value, int):
        check_int64(value)
        return ScalarKind.INT
    if isinstance(value, str):
        return ScalarKind.STR
    raise IllegalTypeError(
        f"Illegal type [{type(value).__name__}]. Values can only be "
        "str, int, bool, float or Float32."
    )


def resolve_kind(kind: Any) -> ScalarKind:
    """Map a ScalarKind, its tag, or a Python type to a ScalarKind."""
    if isinstance(kind, ScalarKind):
        return kind
    if isinstance(kind, type) and kind in _TYPE_KINDS:
        return _TYPE_KINDS[kind]
    if isinstance(kind, str):
        try:
            return ScalarKind(kind.upper())
        except ValueError:
            pass
    raise IllegalTypeError(
        f"Illegal type [{kind!r}]. Only str, int, bool, float or Float32 "
        "can be requested."
    )


def convert(value: Scalar, requested: Any) -> Scalar:
    """Checked conversion of a stored value to the requested kind.

    Integers widen to either float kind and the two float kinds are
    interchangeable; every other mismatch raises ``TypeMismatchError``.
    """
    target = resolve_kind(requested)
    stored = kind_of(value)
    if stored == target:
        if target == ScalarKind.FLOAT:
            return Float32(value)
        return value
    if target in (ScalarKind.FLOAT, ScalarKind.DOUBLE) and stored in (
        ScalarKind.INT,
        ScalarKind.FLOAT,
        ScalarKind.DOUBLE,
    ):
        return Float32(value) if target == ScalarKind.FLOAT else float(value)
    raise TypeMismatchError(
        f"Stored value of kind {stored.value} cannot be read as {target.value}."
    )


def check_key(key: str) -> None:
    if not isinstance(key, str):
        raise TypeError(f"Keys must be str, got {type(key).__name__}.")
    if not key:
        raise ValueError("Keys must be non-empty.")
