"""Hold queue per asset.

Holds are served strictly first come first served: the earliest
``hold_placed`` wins and the autoincrement id breaks ties.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

import settings
from asset_status import apply_status, get_asset_row
from cards import get_card_row, patron_name
from db import as_stored, utcnow
from errors import Conflict, NotFound
from locks import asset_transaction
from loans import active_checkout_row, open_checkout
from models import Hold, Page
from orm import AssetORM, CheckoutORM, HoldORM
from paging import paginate

logger = logging.getLogger("app.holds")

QUEUE_ORDER = (HoldORM.hold_placed.asc(), HoldORM.id.asc())


def _hold_to_schema(h: HoldORM) -> Hold:
    return Hold(
        id=h.id,
        asset_id=h.asset_id,
        card_id=h.card_id,
        hold_placed=h.hold_placed,
    )


def earliest_hold_row(db: Session, asset_id: str) -> Optional[HoldORM]:
    stmt = select(HoldORM).where(HoldORM.asset_id == asset_id).order_by(*QUEUE_ORDER).limit(1)
    return db.execute(stmt).scalars().first()


def get_hold_row(db: Session, hold_id: int) -> HoldORM:
    row = db.get(HoldORM, hold_id)
    if row is None:
        raise NotFound("hold", hold_id)
    return row


def _check_duplicate(db: Session, asset_id: str, card_id: str) -> None:
    queued = db.execute(
        select(HoldORM.id).where(HoldORM.asset_id == asset_id, HoldORM.card_id == card_id)
    ).first()
    if queued is not None:
        raise Conflict(f"card {card_id} already has a hold on asset {asset_id}")

    checkout = db.execute(
        select(CheckoutORM.id).where(CheckoutORM.asset_id == asset_id, CheckoutORM.card_id == card_id)
    ).first()
    if checkout is not None:
        raise Conflict(f"card {card_id} already has asset {asset_id} checked out")


def place_hold(
    db: Session,
    asset_id: str,
    card_id: str,
    now: Optional[datetime] = None,
    *,
    commit: bool = True,
) -> Hold:
    now = as_stored(now or utcnow())
    with asset_transaction(db, asset_id, commit=commit) as asset:
        card = get_card_row(db, card_id)
        if not settings.ALLOW_DUPLICATE_HOLDS:
            _check_duplicate(db, asset.id, card.id)

        hold = HoldORM(asset_id=asset.id, card_id=card.id, hold_placed=now)
        db.add(hold)
        db.flush()

        if asset.status.name == settings.STATUS_AVAILABLE:
            apply_status(db, asset, settings.STATUS_ON_HOLD, now=now)

        result = _hold_to_schema(hold)

    logger.info("asset_id=%s card_id=%s hold_id=%s placed=%s", asset_id, card_id, result.id, now)
    return result


def take_earliest_hold(db: Session, asset: AssetORM, now: datetime) -> Optional[CheckoutORM]:
    """Turn the earliest hold into a checkout, inside an open transaction.

    Returns the new checkout, or None when nobody is waiting.
    """
    hold = earliest_hold_row(db, asset.id)
    if hold is None:
        return None

    card = hold.card
    hold_id = hold.id
    db.delete(hold)
    db.flush()

    checkout = open_checkout(db, asset, card, now)
    logger.info("asset_id=%s hold_id=%s promoted card_id=%s", asset.id, hold_id, card.id)
    return checkout


def promote_earliest_hold(
    db: Session,
    asset_id: str,
    now: Optional[datetime] = None,
    *,
    commit: bool = True,
) -> bool:
    now = as_stored(now or utcnow())
    with asset_transaction(db, asset_id, commit=commit) as asset:
        if active_checkout_row(db, asset.id) is not None:
            raise Conflict(f"asset {asset.id} is still checked out")
        promoted = take_earliest_hold(db, asset, now) is not None
    return promoted


def get_earliest_hold(db: Session, asset_id: str) -> Optional[Hold]:
    get_asset_row(db, asset_id)
    row = earliest_hold_row(db, asset_id)
    return _hold_to_schema(row) if row else None


def get_current_holds(
    db: Session,
    asset_id: str,
    *,
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
) -> Page[Hold]:
    get_asset_row(db, asset_id)
    stmt = select(HoldORM).where(HoldORM.asset_id == asset_id)
    return paginate(
        db,
        stmt,
        order_by=QUEUE_ORDER,
        page=page,
        per_page=per_page,
        to_schema=_hold_to_schema,
    )


def get_hold(db: Session, hold_id: int) -> Hold:
    return _hold_to_schema(get_hold_row(db, hold_id))


def get_current_hold_patron(db: Session, hold_id: int) -> str:
    return patron_name(get_hold_row(db, hold_id).card)


def get_current_hold_placed(db: Session, hold_id: int) -> datetime:
    return get_hold_row(db, hold_id).hold_placed
