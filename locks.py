from __future__ import annotations

import logging
import threading
import weakref
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from db import persist
from errors import Conflict, LibraryServiceError, NotFound, PersistenceFailure
from orm import AssetORM

logger = logging.getLogger("app.locks")

_registry_guard = threading.Lock()
# entries vanish once no thread references the lock
_asset_locks: weakref.WeakValueDictionary[str, threading.RLock] = weakref.WeakValueDictionary()
_state = threading.local()


def asset_lock(asset_id: str) -> threading.RLock:
    with _registry_guard:
        lock = _asset_locks.get(asset_id)
        if lock is None:
            lock = threading.RLock()
            _asset_locks[asset_id] = lock
        return lock


def _depth() -> int:
    return getattr(_state, "depth", 0)


@contextmanager
def write_unit(db: Session, *, commit: bool, label: str) -> Iterator[None]:
    """Persist the block's changes, translating store errors.

    Any failure rolls the session back when this unit owns the commit.
    ``IntegrityError`` becomes ``Conflict`` and any other SQLAlchemy error
    becomes ``PersistenceFailure``.
    """
    try:
        yield
        persist(db, commit=commit)
    except LibraryServiceError:
        if commit:
            db.rollback()
        raise
    except IntegrityError as exc:
        if commit:
            db.rollback()
        logger.warning("%s integrity violation: %s", label, exc.orig)
        raise Conflict(f"{label} conflicts with existing records") from exc
    except SQLAlchemyError as exc:
        if commit:
            db.rollback()
        logger.exception("%s persistence failure", label)
        raise PersistenceFailure() from exc
    except Exception:
        if commit:
            db.rollback()
        raise


@contextmanager
def asset_transaction(db: Session, asset_id: str, *, commit: bool = True) -> Iterator[AssetORM]:
    """Serialize a compound write against one asset.

    Yields the locked asset row. Everything done inside the block is
    persisted as one unit when it exits; with ``commit=False`` the caller
    owns the commit and the rollback. A call nested inside another
    ``asset_transaction`` on the same thread only flushes, whatever its
    ``commit`` argument; the outermost call decides.
    """
    nested = _depth() > 0
    with asset_lock(asset_id):
        _state.depth = _depth() + 1
        try:
            with write_unit(db, commit=commit and not nested, label=f"asset {asset_id}"):
                asset = db.execute(
                    select(AssetORM)
                    .where(AssetORM.id == asset_id)
                    .with_for_update()
                    .execution_options(populate_existing=True)
                ).scalar_one_or_none()
                if asset is None:
                    raise NotFound("asset", asset_id)
                yield asset
        finally:
            _state.depth -= 1
