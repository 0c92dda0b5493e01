from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Integer, Numeric, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from brewery_api.validators.constraints import PRICE_SCALE


def utcnow() -> datetime:
    """Naive UTC timestamp, so values round-trip unchanged through every backend."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_utc(value: datetime) -> datetime:
    """Attach UTC to a naive timestamp read back from the store."""
    return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)


class Base(DeclarativeBase):
    pass


class AuditedMixin:
    """
    Bookkeeping columns shared by every table.

    version and updated_at are set by the store on insert and advanced by
    every patch statement.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)


class Beer(AuditedMixin, Base):
    __tablename__ = "beer"

    beer_name: Mapped[str] = mapped_column(String(50), nullable=False)
    beer_style: Mapped[str] = mapped_column(String(30), nullable=False)
    upc: Mapped[str] = mapped_column(String(12), nullable=False)
    quantity_on_hand: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    price: Mapped[Decimal] = mapped_column(Numeric(12, PRICE_SCALE), nullable=False)

    def __repr__(self) -> str:
        return f"<Beer id={self.id} name={self.beer_name!r} version={self.version}>"


class Customer(AuditedMixin, Base):
    __tablename__ = "customer"

    customer_name: Mapped[str] = mapped_column(String(100), nullable=False)

    def __repr__(self) -> str:
        return f"<Customer id={self.id} name={self.customer_name!r} version={self.version}>"
