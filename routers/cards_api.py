from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

import cards
from dependencies import get_db
from models import Card, CardIn

router = APIRouter()


@router.post("/cards", response_model=Card, status_code=201)
def create_card_api(
    body: CardIn,
    db: Session = Depends(get_db),
):
    return cards.create_card(db, body)


@router.get("/cards/{card_id}", response_model=Card)
def get_card_api(
    card_id: str,
    db: Session = Depends(get_db),
):
    return cards.get_card(db, card_id)
