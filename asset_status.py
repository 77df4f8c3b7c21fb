"""Asset status tracking.

An asset's stored status is a cache of what its checkout and hold records
say. ``derive_status`` is the source of truth and every write goes through
``apply_status``, which refuses a core status that disagrees with it.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

import settings
from db import as_stored, persist, utcnow
from errors import Conflict, NotFound, StatusNotRegistered
from locks import asset_transaction
from orm import AssetORM, CheckoutORM, HoldORM, StatusORM

logger = logging.getLogger("app.asset_status")

STATUS_DESCRIPTIONS = {
    settings.STATUS_AVAILABLE: "Free to be checked out",
    settings.STATUS_CHECKED_OUT: "On loan to a card",
    settings.STATUS_ON_HOLD: "Reserved by the earliest queued hold",
}


def seed_statuses(db: Session, *, commit: bool = True) -> list[str]:
    """Register any missing core status names. Returns the names added."""
    existing = set(db.execute(select(StatusORM.name)).scalars().all())
    added = []
    for name in settings.CORE_STATUSES:
        if name in existing:
            continue
        db.add(StatusORM(name=name, description=STATUS_DESCRIPTIONS.get(name)))
        added.append(name)
    if added:
        persist(db, commit=commit)
        logger.info("seeded statuses=%s", ",".join(added))
    return added


def resolve_status(db: Session, name: str) -> StatusORM:
    status = db.execute(select(StatusORM).where(StatusORM.name == name)).scalar_one_or_none()
    if status is None:
        raise StatusNotRegistered(name)
    return status


def get_asset_row(db: Session, asset_id: str) -> AssetORM:
    asset = db.get(AssetORM, asset_id)
    if asset is None:
        raise NotFound("asset", asset_id)
    return asset


def has_active_checkout(db: Session, asset_id: str) -> bool:
    stmt = select(func.count()).select_from(CheckoutORM).where(CheckoutORM.asset_id == asset_id)
    return int(db.execute(stmt).scalar_one()) > 0


def has_queued_holds(db: Session, asset_id: str) -> bool:
    stmt = select(func.count()).select_from(HoldORM).where(HoldORM.asset_id == asset_id)
    return int(db.execute(stmt).scalar_one()) > 0


def derive_status(db: Session, asset_id: str) -> str:
    # the session does not autoflush; pending records must be visible
    db.flush()
    if has_active_checkout(db, asset_id):
        return settings.STATUS_CHECKED_OUT
    if has_queued_holds(db, asset_id):
        return settings.STATUS_ON_HOLD
    return settings.STATUS_AVAILABLE


def current_status(db: Session, asset_id: str) -> str:
    return get_asset_row(db, asset_id).status.name


def apply_status(db: Session, asset: AssetORM, name: str, *, now: Optional[datetime] = None) -> str:
    """Set ``asset``'s status inside an open transaction."""
    status = resolve_status(db, name)
    if name in settings.CORE_STATUSES:
        derived = derive_status(db, asset.id)
        if derived != name:
            raise Conflict(f"asset {asset.id} cannot be {name!r} while its records say {derived!r}")
    elif has_active_checkout(db, asset.id):
        raise Conflict(f"asset {asset.id} is checked out")

    if asset.status_id == status.id:
        return name

    previous = asset.status.name if asset.status is not None else None
    asset.status = status
    asset.updated_at = as_stored(now or utcnow())
    logger.info("asset_id=%s status=%s previous=%s", asset.id, name, previous)
    return name


def set_status(db: Session, asset_id: str, name: str, *, commit: bool = True) -> str:
    with asset_transaction(db, asset_id, commit=commit) as asset:
        result = apply_status(db, asset, name)
    return result


def refresh_status(db: Session, asset_id: str, *, commit: bool = True) -> str:
    with asset_transaction(db, asset_id, commit=commit) as asset:
        result = apply_status(db, asset, derive_status(db, asset.id))
    return result
