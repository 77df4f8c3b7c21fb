from __future__ import annotations

from typing import Optional
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.orm import Session

import settings
from asset_status import get_asset_row, resolve_status
from db import utcnow
from locks import write_unit
from models import Asset, AssetIn, Page
from orm import AssetORM, StatusORM
from paging import paginate

def _asset_to_schema(a: AssetORM) -> Asset:
    return Asset(
        id=a.id,
        name=a.name,
        asset_tag=a.asset_tag,
        status=a.status.name,
        created_at=a.created_at,
        updated_at=a.updated_at,
    )


def asset_tag_exists(db: Session, asset_tag: str) -> bool:
    stmt = select(AssetORM).where(AssetORM.asset_tag == asset_tag)
    return db.execute(stmt).first() is not None


def get_asset(db: Session, asset_id: str) -> Asset:
    return _asset_to_schema(get_asset_row(db, asset_id))


def create_asset(db: Session, body: AssetIn, *, commit: bool = True) -> Asset:
    now = utcnow()
    with write_unit(db, commit=commit, label=f"asset_tag {body.asset_tag}"):
        a = AssetORM(
            id=str(uuid4()),
            name=body.name,
            asset_tag=body.asset_tag,
            status=resolve_status(db, settings.STATUS_AVAILABLE),
            created_at=now,
            updated_at=now,
        )
        db.add(a)
    if commit:
        db.refresh(a)
    return _asset_to_schema(a)


def list_assets(
    db: Session,
    *,
    status: Optional[str] = None,
    page: int = 1,
    per_page: int = settings.DEFAULT_PER_PAGE,
) -> Page[Asset]:
    """Assets by tag; ``status`` narrows to one core status, other values are ignored."""
    stmt = select(AssetORM)
    if status in settings.CORE_STATUSES:
        stmt = stmt.join(StatusORM, AssetORM.status_id == StatusORM.id).where(StatusORM.name == status)

    return paginate(
        db,
        stmt,
        order_by=(AssetORM.asset_tag.asc(), AssetORM.id.asc()),
        page=page,
        per_page=per_page,
        to_schema=_asset_to_schema,
    )
