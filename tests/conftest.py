import os
import tempfile
from pathlib import Path

# テスト用DBパス（app のモジュールを import する前に設定）
_TMP_DIR = Path(tempfile.mkdtemp(prefix="circulation_"))
os.environ["APP_DB_PATH"] = str(_TMP_DIR / "test_circulation.db")
os.environ.pop("APP_DATABASE_URL", None)

import pytest
from fastapi.testclient import TestClient


@pytest.fixture(scope="session")
def app_module():
    import main

    return main


@pytest.fixture()
def client(app_module):
    def _get_db_override():
        db = app_module.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    app_module.app.dependency_overrides[app_module.get_db] = _get_db_override
    with TestClient(app_module.app) as c:
        yield c
    app_module.app.dependency_overrides.clear()


@pytest.fixture()
def db_session(app_module):
    db = app_module.SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def clean_db(app_module, db_session):
    # 子テーブルから順に全消し（statuses は残す）
    from sqlalchemy import delete
    from orm import AssetORM, CardORM, CheckoutHistoryORM, CheckoutORM, HoldORM

    db_session.execute(delete(HoldORM))
    db_session.execute(delete(CheckoutHistoryORM))
    db_session.execute(delete(CheckoutORM))
    db_session.execute(delete(AssetORM))
    db_session.execute(delete(CardORM))
    db_session.commit()
    yield


@pytest.fixture()
def make_asset(db_session):
    import assets
    from models import AssetIn

    counter = {"n": 0}

    def _make(name="Projector"):
        counter["n"] += 1
        return assets.create_asset(db_session, AssetIn(name=name, asset_tag=f"A-{counter['n']:03d}"))

    return _make


@pytest.fixture()
def make_card(db_session):
    import cards
    from models import CardIn

    def _make(first_name="Alice", last_name="Smith"):
        return cards.create_card(db_session, CardIn(first_name=first_name, last_name=last_name))

    return _make
