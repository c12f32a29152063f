"""SQLAlchemy ORM model definitions."""

from decimal import Decimal

from sqlalchemy import Column, DateTime, Integer, Numeric, String

from stocktracker.repositories.sqlalchemy.database import Base


class HoldingORM(Base):
    """SQLAlchemy model for a holding row."""

    __tablename__ = "holdings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(64), nullable=False, index=True)
    ticker = Column(String(20), nullable=False, index=True)
    buy_date = Column(DateTime, nullable=False)
    quantity = Column(Numeric(precision=18, scale=8), nullable=False)
    buy_price = Column(Numeric(precision=18, scale=4), nullable=False)
    brokerage = Column(Numeric(precision=18, scale=2), nullable=False, default=Decimal("0"))
