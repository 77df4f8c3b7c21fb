from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

import asset_status
import assets
import settings
from dependencies import get_db
from models import Asset, AssetIn, AssetStatus, Page, StatusIn

router = APIRouter()


@router.get("/assets", response_model=Page[Asset])
def list_assets_api(
    status: Optional[str] = None,
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
    db: Session = Depends(get_db),
):
    return assets.list_assets(db, status=status, page=page, per_page=per_page)


@router.post("/assets", response_model=Asset, status_code=201)
def create_asset_api(
    body: AssetIn,
    db: Session = Depends(get_db),
):
    if assets.asset_tag_exists(db, body.asset_tag):
        raise HTTPException(status_code=409, detail="asset_tag already exists")
    return assets.create_asset(db, body)


@router.get("/assets/{asset_id}", response_model=Asset)
def get_asset_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return assets.get_asset(db, asset_id)


@router.get("/assets/{asset_id}/status", response_model=AssetStatus)
def get_asset_status_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return AssetStatus(asset_id=asset_id, status=asset_status.current_status(db, asset_id))


@router.put("/assets/{asset_id}/status", response_model=AssetStatus)
def set_asset_status_api(
    asset_id: str,
    body: StatusIn,
    db: Session = Depends(get_db),
):
    return AssetStatus(asset_id=asset_id, status=asset_status.set_status(db, asset_id, body.status))


@router.post("/assets/{asset_id}/status/refresh", response_model=AssetStatus)
def refresh_asset_status_api(
    asset_id: str,
    db: Session = Depends(get_db),
):
    return AssetStatus(asset_id=asset_id, status=asset_status.refresh_status(db, asset_id))
