from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import checkouts
import settings
from dependencies import get_db
from models import CheckInResult, Checkout, CheckoutHistory, CheckoutIn, Page

router = APIRouter()


@router.post("/assets/{asset_id}/checkout", response_model=Checkout, status_code=201)
def check_out_api(
    asset_id: str,
    body: CheckoutIn,
    db: Session = Depends(get_db),
):
    return checkouts.check_out(db, asset_id, body.card_id)


@router.post("/assets/{asset_id}/checkin", response_model=CheckInResult)
def check_in_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return checkouts.check_in(db, asset_id)


@router.get("/assets/{asset_id}/checkout", response_model=Checkout)
def latest_checkout_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return checkouts.get_latest_checkout(db, asset_id)


@router.get("/assets/{asset_id}/patron")
def current_patron_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return {"asset_id": asset_id, "patron": checkouts.get_current_patron(db, asset_id)}


@router.get("/assets/{asset_id}/history", response_model=Page[CheckoutHistory])
def checkout_history_api(
    asset_id: str,
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
    db: Session = Depends(get_db),
):
    return checkouts.get_checkout_history(db, asset_id, page=page, per_page=per_page)


@router.get("/checkouts", response_model=Page[Checkout])
def list_checkouts_api(
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
    db: Session = Depends(get_db),
):
    return checkouts.get_all(db, page=page, per_page=per_page)


@router.get("/checkouts/{checkout_id}", response_model=Checkout)
def get_checkout_api(
    checkout_id: int,
    db: Session = Depends(get_db),
):
    return checkouts.get(db, checkout_id)
