from pydantic import BaseModel
from typing import Generic, Optional, TypeVar
from datetime import datetime

T = TypeVar("T")

class AssetIn(BaseModel):
    name: str
    asset_tag: str

class Asset(AssetIn):
    id: str
    status: str
    created_at: datetime
    updated_at: datetime

class AssetStatus(BaseModel):
    asset_id: str
    status: str

class StatusIn(BaseModel):
    status: str

class CardIn(BaseModel):
    first_name: str
    last_name: str

class Card(CardIn):
    id: str
    created_at: datetime

class CheckoutIn(BaseModel):
    card_id: str

class Checkout(BaseModel):
    id: int
    asset_id: str
    card_id: str
    since: datetime
    until: datetime

class CheckoutHistory(BaseModel):
    id: int
    asset_id: str
    card_id: str
    checked_out: datetime
    checked_in: Optional[datetime] = None

class CheckInResult(BaseModel):
    asset_id: str
    promoted_hold: bool
    status: str
    checkout: Optional[Checkout] = None

class HoldIn(BaseModel):
    card_id: str

class Hold(BaseModel):
    id: int
    asset_id: str
    card_id: str
    hold_placed: datetime

class PromoteResult(BaseModel):
    asset_id: str
    promoted_hold: bool

class HoldPlaced(BaseModel):
    hold_id: int
    hold_placed: datetime

class Page(BaseModel, Generic[T]):
    results: list[T]
    page_number: int
    per_page: int
    total: int
    total_pages: int
