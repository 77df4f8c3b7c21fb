from datetime import datetime
from sqlalchemy import String, DateTime, ForeignKey, Integer, Index, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from db import Base

class StatusORM(Base):
    __tablename__ = "statuses"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)
    description: Mapped[str | None] = mapped_column(String, nullable=True)

class AssetORM(Base):
    __tablename__ = "assets"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    asset_tag: Mapped[str] = mapped_column(String, nullable=False, unique=True, index=True)

    status_id: Mapped[int] = mapped_column(Integer, ForeignKey("statuses.id"), nullable=False)
    status: Mapped[StatusORM] = relationship(StatusORM)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

class CardORM(Base):
    __tablename__ = "cards"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    last_name: Mapped[str] = mapped_column(String, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)

class CheckoutORM(Base):
    __tablename__ = "checkouts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # unique: at most one active checkout per asset
    asset_id: Mapped[str] = mapped_column(String, ForeignKey("assets.id"), nullable=False, unique=True)
    card_id: Mapped[str] = mapped_column(String, ForeignKey("cards.id"), nullable=False, index=True)

    since: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    until: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    card: Mapped[CardORM] = relationship(CardORM)

class CheckoutHistoryORM(Base):
    __tablename__ = "checkout_histories"
    __table_args__ = (
        Index(
            "uq_checkout_histories_open",
            "asset_id",
            unique=True,
            sqlite_where=text("checked_in IS NULL"),
            postgresql_where=text("checked_in IS NULL"),
        ),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    asset_id: Mapped[str] = mapped_column(String, ForeignKey("assets.id"), nullable=False, index=True)
    card_id: Mapped[str] = mapped_column(String, ForeignKey("cards.id"), nullable=False)

    checked_out: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    checked_in: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

class HoldORM(Base):
    __tablename__ = "holds"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    asset_id: Mapped[str] = mapped_column(String, ForeignKey("assets.id"), nullable=False, index=True)
    card_id: Mapped[str] = mapped_column(String, ForeignKey("cards.id"), nullable=False)

    hold_placed: Mapped[datetime] = mapped_column(DateTime, nullable=False)

    card: Mapped[CardORM] = relationship(CardORM)
