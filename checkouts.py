"""Checking assets out and back in.

``check_in`` is a single transaction in two explicit steps: close the
current loan, then hand the asset to the earliest hold (if any). The asset
lock is held throughout, so no other request sees the asset between the
two steps.
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
from holds import earliest_hold_row, take_earliest_hold
from locks import asset_transaction
from loans import (
    active_checkout_row,
    checkout_to_schema,
    close_checkout,
    history_to_schema,
    open_checkout,
)
from models import CheckInResult, Checkout, CheckoutHistory, Page
from orm import CheckoutHistoryORM, CheckoutORM
from paging import paginate

logger = logging.getLogger("app.checkouts")


def is_checked_out(db: Session, asset_id: str) -> bool:
    get_asset_row(db, asset_id)
    return active_checkout_row(db, asset_id) is not None


def check_out(
    db: Session,
    asset_id: str,
    card_id: str,
    now: Optional[datetime] = None,
    *,
    commit: bool = True,
) -> Checkout:
    now = as_stored(now or utcnow())
    with asset_transaction(db, asset_id, commit=commit) as asset:
        card = get_card_row(db, card_id)
        if active_checkout_row(db, asset.id) is not None:
            raise Conflict(f"asset {asset.id} is already checked out")

        # an asset on hold goes to the head of the queue only
        hold = earliest_hold_row(db, asset.id)
        if hold is not None:
            if hold.card_id != card.id:
                raise Conflict(f"asset {asset.id} is on hold for another card")
            db.delete(hold)
            db.flush()
            logger.info("asset_id=%s hold_id=%s collected by card_id=%s", asset.id, hold.id, card.id)

        checkout = open_checkout(db, asset, card, now)
        result = checkout_to_schema(checkout)
    return result


def check_in(
    db: Session,
    asset_id: str,
    now: Optional[datetime] = None,
    *,
    commit: bool = True,
) -> CheckInResult:
    now = as_stored(now or utcnow())
    with asset_transaction(db, asset_id, commit=commit) as asset:
        close_checkout(db, asset, now)

        promoted = take_earliest_hold(db, asset, now)
        if promoted is None:
            apply_status(db, asset, settings.STATUS_AVAILABLE, now=now)

        result = CheckInResult(
            asset_id=asset.id,
            promoted_hold=promoted is not None,
            status=asset.status.name,
            checkout=checkout_to_schema(promoted) if promoted is not None else None,
        )

    logger.info("asset_id=%s promoted_hold=%s status=%s", asset_id, result.promoted_hold, result.status)
    return result


def get(db: Session, checkout_id: int) -> Checkout:
    row = db.get(CheckoutORM, checkout_id)
    if row is None:
        raise NotFound("checkout", checkout_id)
    return checkout_to_schema(row)


def get_latest_checkout(db: Session, asset_id: str) -> Checkout:
    get_asset_row(db, asset_id)
    stmt = (
        select(CheckoutORM)
        .where(CheckoutORM.asset_id == asset_id)
        .order_by(CheckoutORM.since.desc(), CheckoutORM.id.desc())
        .limit(1)
    )
    row = db.execute(stmt).scalars().first()
    if row is None:
        raise NotFound("checkout for asset", asset_id)
    return checkout_to_schema(row)


def get_current_patron(db: Session, asset_id: str) -> str:
    get_asset_row(db, asset_id)
    row = active_checkout_row(db, asset_id)
    if row is None:
        raise NotFound("checkout for asset", asset_id)
    return patron_name(row.card)


def get_all(
    db: Session,
    *,
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
) -> Page[Checkout]:
    return paginate(
        db,
        select(CheckoutORM),
        order_by=(CheckoutORM.since.asc(), CheckoutORM.id.asc()),
        page=page,
        per_page=per_page,
        to_schema=checkout_to_schema,
    )


def get_checkout_history(
    db: Session,
    asset_id: str,
    *,
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
) -> Page[CheckoutHistory]:
    get_asset_row(db, asset_id)
    stmt = select(CheckoutHistoryORM).where(CheckoutHistoryORM.asset_id == asset_id)
    return paginate(
        db,
        stmt,
        order_by=(CheckoutHistoryORM.checked_out.desc(), CheckoutHistoryORM.id.desc()),
        page=page,
        per_page=per_page,
        to_schema=history_to_schema,
    )
