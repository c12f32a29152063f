"""SQLAlchemy repository implementations."""

from stocktracker.repositories.sqlalchemy.holdings_repo import SqlAlchemyHoldingsRepository

__all__ = [
    "SqlAlchemyHoldingsRepository",
]
