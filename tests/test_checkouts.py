from datetime import datetime, timedelta

import pytest

import checkouts
import settings
from errors import Conflict, NotFound
from helpers import assert_consistent

T0 = datetime(2026, 1, 5, 9, 0, 0)


def test_check_out_available_asset(db_session, make_asset, make_card):
    asset = make_asset()
    card = make_card()

    checkout = checkouts.check_out(db_session, asset.id, card.id, now=T0)

    assert checkout.asset_id == asset.id
    assert checkout.card_id == card.id
    assert checkout.since == T0
    assert checkout.until == T0 + timedelta(days=30)
    assert checkouts.is_checked_out(db_session, asset.id) is True
    assert_consistent(db_session, asset.id)


def test_check_out_already_checked_out_is_conflict(db_session, make_asset, make_card):
    asset = make_asset()
    alice = make_card("Alice")
    bob = make_card("Bob")
    first = checkouts.check_out(db_session, asset.id, alice.id, now=T0)

    with pytest.raises(Conflict):
        checkouts.check_out(db_session, asset.id, bob.id, now=T0 + timedelta(hours=1))

    db_session.expire_all()
    assert checkouts.get_latest_checkout(db_session, asset.id) == first
    assert checkouts.get_current_patron(db_session, asset.id) == "Alice Smith"
    assert_consistent(db_session, asset.id)


def test_check_out_unknown_ids(db_session, make_asset, make_card):
    asset = make_asset()
    card = make_card()

    with pytest.raises(NotFound):
        checkouts.check_out(db_session, "missing", card.id)
    with pytest.raises(NotFound) as excinfo:
        checkouts.check_out(db_session, asset.id, "missing")
    assert excinfo.value.kind == "card"

    assert checkouts.is_checked_out(db_session, asset.id) is False
    assert_consistent(db_session, asset.id)


def test_check_in_without_holds_makes_asset_available(db_session, make_asset, make_card):
    asset = make_asset()
    card = make_card()
    checkouts.check_out(db_session, asset.id, card.id, now=T0)

    result = checkouts.check_in(db_session, asset.id, now=T0 + timedelta(days=3))

    assert result.promoted_hold is False
    assert result.checkout is None
    assert result.status == settings.STATUS_AVAILABLE
    assert checkouts.is_checked_out(db_session, asset.id) is False
    assert checkouts.get_all(db_session).total == 0

    history = checkouts.get_checkout_history(db_session, asset.id).results
    assert len(history) == 1
    assert history[0].checked_out == T0
    assert history[0].checked_in == T0 + timedelta(days=3)
    assert_consistent(db_session, asset.id)


def test_check_in_without_checkout_is_not_found(db_session, make_asset):
    asset = make_asset()
    with pytest.raises(NotFound):
        checkouts.check_in(db_session, asset.id)
    with pytest.raises(NotFound):
        checkouts.check_in(db_session, "missing")
    assert_consistent(db_session, asset.id)


def test_read_projections_for_unknown_records(db_session, make_asset):
    asset = make_asset()
    with pytest.raises(NotFound):
        checkouts.get(db_session, 12345)
    with pytest.raises(NotFound):
        checkouts.get_latest_checkout(db_session, asset.id)
    with pytest.raises(NotFound):
        checkouts.get_current_patron(db_session, asset.id)
    with pytest.raises(NotFound):
        checkouts.is_checked_out(db_session, "missing")


def test_get_checkout_by_id(db_session, make_asset, make_card):
    asset = make_asset()
    created = checkouts.check_out(db_session, asset.id, make_card().id, now=T0)
    assert checkouts.get(db_session, created.id) == created


def test_history_is_newest_first_and_pages_cover_everything(db_session, make_asset, make_card):
    asset = make_asset()
    card = make_card()
    for day in range(5):
        checkouts.check_out(db_session, asset.id, card.id, now=T0 + timedelta(days=day))
        checkouts.check_in(db_session, asset.id, now=T0 + timedelta(days=day, hours=4))

    pages = [
        checkouts.get_checkout_history(db_session, asset.id, page=p, per_page=2)
        for p in (1, 2, 3)
    ]
    assert [p.total for p in pages] == [5, 5, 5]
    assert pages[0].total_pages == 3
    assert [len(p.results) for p in pages] == [2, 2, 1]

    rows = [h for p in pages for h in p.results]
    assert len({h.id for h in rows}) == 5
    assert [h.checked_out for h in rows] == [T0 + timedelta(days=d) for d in (4, 3, 2, 1, 0)]
    assert all(h.checked_in is not None for h in rows)


def test_get_all_is_ordered_by_since(db_session, make_asset, make_card):
    card = make_card()
    a1, a2, a3 = make_asset("Camera"), make_asset("Tripod"), make_asset("Microphone")
    checkouts.check_out(db_session, a2.id, card.id, now=T0 + timedelta(hours=2))
    checkouts.check_out(db_session, a3.id, card.id, now=T0)
    checkouts.check_out(db_session, a1.id, card.id, now=T0 + timedelta(hours=1))

    first = checkouts.get_all(db_session, page=1, per_page=2)
    second = checkouts.get_all(db_session, page=2, per_page=2)

    assert [c.asset_id for c in first.results + second.results] == [a3.id, a1.id, a2.id]
    assert checkouts.get_all(db_session, page=3, per_page=2).results == []


def test_page_arguments_are_clamped(db_session, make_asset, make_card):
    checkouts.check_out(db_session, make_asset().id, make_card().id, now=T0)
    page = checkouts.get_all(db_session, page=0, per_page=0)
    assert page.page_number == 1
    assert page.per_page == 1
    assert len(page.results) == 1
