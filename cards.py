from __future__ import annotations

from uuid import uuid4

from sqlalchemy.orm import Session

from db import utcnow
from errors import NotFound
from locks import write_unit
from models import Card, CardIn
from orm import CardORM


def _card_to_schema(c: CardORM) -> Card:
    return Card(
        id=c.id,
        first_name=c.first_name,
        last_name=c.last_name,
        created_at=c.created_at,
    )


def patron_name(c: CardORM) -> str:
    return f"{c.first_name} {c.last_name}"


def get_card_row(db: Session, card_id: str) -> CardORM:
    row = db.get(CardORM, card_id)
    if row is None:
        raise NotFound("card", card_id)
    return row


def get_card(db: Session, card_id: str) -> Card:
    return _card_to_schema(get_card_row(db, card_id))


def create_card(db: Session, body: CardIn, *, commit: bool = True) -> Card:
    c = CardORM(
        id=str(uuid4()),
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        created_at=utcnow(),
    )
    with write_unit(db, commit=commit, label=f"card {c.id}"):
        db.add(c)
    if commit:
        db.refresh(c)
    return _card_to_schema(c)
