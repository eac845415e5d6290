from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from typing import Any, Iterator, Optional, Tuple

from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .base import MISSING, KeyValueStore
from .config import Settings
from .db import Base, make_engine, make_session_factory
from .exceptions import KeyNotFoundError, StoreCorruptError, StoreUnreachableError
from .models import KeyValueRow
from .values import (
    Float32,
    Scalar,
    ScalarKind,
    check_int64,
    check_key,
    convert,
    kind_of,
    resolve_kind,
)

logger = logging.getLogger(__name__)


def to_text(value: Scalar) -> Tuple[str, ScalarKind]:
    """Return the VALUE text and TYPE tag for a scalar."""
    kind = kind_of(value)
    if kind == ScalarKind.BOOL:
        return ("True" if value else "False"), kind
    if kind in (ScalarKind.FLOAT, ScalarKind.DOUBLE):
        return repr(float(value)), kind
    return str(value), kind


def from_text(text: str, tag: str) -> Scalar:
    """Parse a stored VALUE according to its TYPE tag.

    The tag is always trusted; a value that does not parse as its tag says
    means the table was edited by hand and is treated as corruption.
    """
    try:
        kind = ScalarKind(tag)
    except ValueError:
        raise StoreCorruptError(f"Unknown TYPE tag [{tag}].") from None
    try:
        if kind == ScalarKind.STR:
            return text
        if kind == ScalarKind.INT:
            return check_int64(int(text))
        if kind == ScalarKind.BOOL:
            lowered = text.strip().lower()
            if lowered in ("true", "1"):
                return True
            if lowered in ("false", "0"):
                return False
            raise ValueError(f"not a boolean: {text!r}")
        number = float(text)
        if not math.isfinite(number):
            raise ValueError(f"non-finite number: {text!r}")
        return Float32(number) if kind == ScalarKind.FLOAT else number
    except (ValueError, OverflowError) as exc:
        raise StoreCorruptError(f"VALUE [{text}] is not a valid {kind.value}.") from exc


class SqlStore(KeyValueStore):
    """Key-value store kept in a single ``KeyValueDataStore`` table.

    There is no cache here: every call is a round trip to the database,
    which for SQLite is cheap enough.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        engine: Optional[Engine] = None,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or Settings()
        self._owns_engine = engine is None
        try:
            self.engine = engine if engine is not None else make_engine(url or self.settings.database_url)
            Base.metadata.create_all(bind=self.engine, tables=[KeyValueRow.__table__])
        except SQLAlchemyError as exc:
            raise StoreUnreachableError(
                "SqlStore() -- There was an error connecting to the database."
            ) from exc
        self._sessions = make_session_factory(self.engine)
        logger.info("Opened SQL store on %s", self.engine.url.render_as_string(hide_password=True))

    @contextmanager
    def _session(self, op: str) -> Iterator[Session]:
        session = self._sessions()
        try:
            yield session
            session.commit()
        except SQLAlchemyError as exc:
            session.rollback()
            logger.error("%s failed: %s", op, exc)
            raise StoreUnreachableError(
                f"{op} -- There was an error accessing the database."
            ) from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def set_value(self, key: str, value: Scalar, overwrite_if_exists: bool = True) -> bool:
        check_key(key)
        text, kind = to_text(value)
        with self._session("SqlStore.set_value") as session:
            row = session.get(KeyValueRow, key)
            if row is not None:
                if not overwrite_if_exists:
                    return False
                row.value = text
                row.type = kind.value
            else:
                session.add(KeyValueRow(key=key, value=text, type=kind.value))
        return True

    def delete_value(self, key: str) -> None:
        check_key(key)
        with self._session("SqlStore.delete_value") as session:
            row = session.get(KeyValueRow, key)
            if row is not None:
                session.delete(row)

    def get_value(self, key: str, kind: Any, default: Any = MISSING) -> Any:
        target = resolve_kind(kind)
        check_key(key)
        with self._session("SqlStore.get_value") as session:
            row = session.get(KeyValueRow, key)
            stored = None if row is None else (row.value, row.type)
        if stored is None:
            if default is MISSING:
                raise KeyNotFoundError(f"Key [{key}] does not exist in the database.")
            return default
        return convert(from_text(*stored), target)

    def close(self) -> None:
        if self._owns_engine:
            self.engine.dispose()

