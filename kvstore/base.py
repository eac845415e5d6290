"""Backend-independent typed surface shared by every store."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .values import Float32, Scalar, ScalarKind

MISSING: Any = object()


class KeyValueStore(ABC):
    """Typed get/set/delete contract.

    ``set_value`` returns False only when ``overwrite_if_exists`` is False
    and the key already exists. Every method may raise
    StoreUnreachableError or StoreCorruptError.
    """

    @abstractmethod
    def set_value(self, key: str, value: Scalar, overwrite_if_exists: bool = True) -> bool:
        ...

    @abstractmethod
    def delete_value(self, key: str) -> None:
        ...

    @abstractmethod
    def get_value(self, key: str, kind: Any, default: Any = MISSING) -> Any:
        """Return the value for ``key`` converted to ``kind``.

        ``kind`` is a ScalarKind or one of str, int, bool, float, Float32.
        Raises KeyNotFoundError when the key is absent and no default is
        given, IllegalTypeError for an unsupported kind and
        TypeMismatchError when the stored value is of an incompatible kind.
        """

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def set_str(self, key: str, value: str, overwrite_if_exists: bool = True) -> bool:
        return self.set_value(key, str(value), overwrite_if_exists)

    def set_int(self, key: str, value: int, overwrite_if_exists: bool = True) -> bool:
        return self.set_value(key, int(value), overwrite_if_exists)

    def set_bool(self, key: str, value: bool, overwrite_if_exists: bool = True) -> bool:
        return self.set_value(key, bool(value), overwrite_if_exists)

    def set_float(self, key: str, value: float, overwrite_if_exists: bool = True) -> bool:
        return self.set_value(key, Float32(value), overwrite_if_exists)

    def set_double(self, key: str, value: float, overwrite_if_exists: bool = True) -> bool:
        return self.set_value(key, float(value), overwrite_if_exists)

    def get_str(self, key: str, default: Any = MISSING) -> str:
        return self.get_value(key, ScalarKind.STR, default)

    def get_int(self, key: str, default: Any = MISSING) -> int:
        return self.get_value(key, ScalarKind.INT, default)

    def get_bool(self, key: str, default: Any = MISSING) -> bool:
        return self.get_value(key, ScalarKind.BOOL, default)

    def get_float(self, key: str, default: Any = MISSING) -> float:
        return self.get_value(key, ScalarKind.FLOAT, default)

    def get_double(self, key: str, default: Any = MISSING) -> float:
        return self.get_value(key, ScalarKind.DOUBLE, default)
