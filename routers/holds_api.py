from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import holds
import settings
from dependencies import get_db
from models import Hold, HoldIn, HoldPlaced, Page, PromoteResult

router = APIRouter()


@router.post("/assets/{asset_id}/holds", response_model=Hold, status_code=201)
def place_hold_api(
    asset_id: str,
    body: HoldIn,
    db: Session = Depends(get_db),
):
    return holds.place_hold(db, asset_id, body.card_id)


@router.post("/assets/{asset_id}/holds/promote", response_model=PromoteResult)
def promote_hold_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return PromoteResult(asset_id=asset_id, promoted_hold=holds.promote_earliest_hold(db, asset_id))


@router.get("/assets/{asset_id}/holds", response_model=Page[Hold])
def current_holds_api(
    asset_id: str,
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
    db: Session = Depends(get_db),
):
    return holds.get_current_holds(db, asset_id, page=page, per_page=per_page)


@router.get("/assets/{asset_id}/holds/earliest", response_model=Optional[Hold])
def earliest_hold_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return holds.get_earliest_hold(db, asset_id)


@router.get("/holds/{hold_id}", response_model=Hold)
def get_hold_api(
    hold_id: int,
    db: Session = Depends(get_db),
):
    return holds.get_hold(db, hold_id)


@router.get("/holds/{hold_id}/patron")
def hold_patron_api(
    hold_id: int,
    db: Session = Depends(get_db),
):
    return {"hold_id": hold_id, "patron": holds.get_current_hold_patron(db, hold_id)}


@router.get("/holds/{hold_id}/placed", response_model=HoldPlaced)
def hold_placed_api(
    hold_id: int,
    db: Session = Depends(get_db),
):
    return HoldPlaced(hold_id=hold_id, hold_placed=holds.get_current_hold_placed(db, hold_id))
