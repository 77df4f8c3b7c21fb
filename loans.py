"""Checkout and checkout-history records.

These helpers only stage changes in the session. Callers run them inside
``locks.asset_transaction`` so that a checkout, its history row and the
asset status always land together.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

import settings
from asset_status import apply_status
from errors import Conflict, NotFound
from models import Checkout, CheckoutHistory
from orm import AssetORM, CardORM, CheckoutHistoryORM, CheckoutORM

logger = logging.getLogger("app.loans")


def checkout_to_schema(c: CheckoutORM) -> Checkout:
    return Checkout(
        id=c.id,
        asset_id=c.asset_id,
        card_id=c.card_id,
        since=c.since,
        until=c.until,
    )


def history_to_schema(h: CheckoutHistoryORM) -> CheckoutHistory:
    return CheckoutHistory(
        id=h.id,
        asset_id=h.asset_id,
        card_id=h.card_id,
        checked_out=h.checked_out,
        checked_in=h.checked_in,
    )


def due_date(since: datetime) -> datetime:
    return since + settings.LOAN_PERIOD


def active_checkout_row(db: Session, asset_id: str) -> Optional[CheckoutORM]:
    stmt = select(CheckoutORM).where(CheckoutORM.asset_id == asset_id)
    return db.execute(stmt).scalars().first()


def open_history_row(db: Session, asset_id: str) -> Optional[CheckoutHistoryORM]:
    stmt = (
        select(CheckoutHistoryORM)
        .where(CheckoutHistoryORM.asset_id == asset_id, CheckoutHistoryORM.checked_in.is_(None))
        .order_by(CheckoutHistoryORM.checked_out.desc(), CheckoutHistoryORM.id.desc())
        .limit(1)
    )
    return db.execute(stmt).scalars().first()


def open_checkout(db: Session, asset: AssetORM, card: CardORM, now: datetime) -> CheckoutORM:
    if active_checkout_row(db, asset.id) is not None:
        raise Conflict(f"asset {asset.id} is already checked out")

    checkout = CheckoutORM(
        asset_id=asset.id,
        card_id=card.id,
        since=now,
        until=due_date(now),
    )
    history = CheckoutHistoryORM(
        asset_id=asset.id,
        card_id=card.id,
        checked_out=now,
        checked_in=None,
    )
    db.add_all([checkout, history])
    db.flush()

    apply_status(db, asset, settings.STATUS_CHECKED_OUT, now=now)
    logger.info("asset_id=%s card_id=%s checkout_id=%s until=%s", asset.id, card.id, checkout.id, checkout.until)
    return checkout


def close_checkout(db: Session, asset: AssetORM, now: datetime) -> CheckoutHistoryORM:
    """Remove the active checkout and stamp its open history row.

    The asset status is left for the caller to settle.
    """
    checkout = active_checkout_row(db, asset.id)
    if checkout is None:
        raise NotFound("checkout for asset", asset.id)

    history = open_history_row(db, asset.id)
    if history is None:
        raise NotFound("open checkout history for asset", asset.id)

    db.delete(checkout)
    history.checked_in = now
    db.flush()

    logger.info("asset_id=%s card_id=%s checked_in=%s", asset.id, history.card_id, now)
    return history
