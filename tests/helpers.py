from sqlalchemy import func, select

import settings
from orm import AssetORM, CheckoutHistoryORM, CheckoutORM, HoldORM


def assert_consistent(db, asset_id):
    """Stored status must match what the checkout/hold records say."""
    db.expire_all()
    asset = db.get(AssetORM, asset_id)
    checkouts = db.execute(
        select(func.count()).select_from(CheckoutORM).where(CheckoutORM.asset_id == asset_id)
    ).scalar_one()
    holds = db.execute(
        select(func.count()).select_from(HoldORM).where(HoldORM.asset_id == asset_id)
    ).scalar_one()
    open_histories = db.execute(
        select(func.count())
        .select_from(CheckoutHistoryORM)
        .where(CheckoutHistoryORM.asset_id == asset_id, CheckoutHistoryORM.checked_in.is_(None))
    ).scalar_one()

    assert checkouts in (0, 1)
    assert open_histories == checkouts
    if checkouts:
        assert asset.status.name == settings.STATUS_CHECKED_OUT
    elif holds:
        assert asset.status.name == settings.STATUS_ON_HOLD
    else:
        assert asset.status.name == settings.STATUS_AVAILABLE
