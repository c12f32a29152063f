"""SQLAlchemy implementation of HoldingsRepository."""

from typing import Callable

from sqlalchemy import func
from sqlalchemy.orm import Session

from stocktracker.core.ticker import distinct_tickers
from stocktracker.domain.models import HoldingSnapshot
from stocktracker.repositories.sqlalchemy.orm_models import HoldingORM


class SqlAlchemyHoldingsRepository:
    """
    SQLAlchemy-backed, read-only holdings repository.

    Takes a session factory rather than a session so each read gets its own
    short-lived session; reads run on worker threads.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    def list_by_owner(self, owner_id: str) -> list[HoldingSnapshot]:
        """List all holdings belonging to an owner, ordered by id."""
        with self._session_factory() as db:
            rows = (
                db.query(HoldingORM)
                .filter(HoldingORM.owner_id == owner_id)
                .order_by(HoldingORM.id)
                .all()
            )
            return [self._to_domain(row) for row in rows]

    def list_all_tickers(self) -> list[str]:
        """Distinct canonical tickers across all owners."""
        with self._session_factory() as db:
            rows = (
                db.query(func.upper(HoldingORM.ticker))
                .distinct()
                .order_by(func.upper(HoldingORM.ticker))
                .all()
            )
        # SQL upper() keeps surrounding whitespace; canonicalize and dedupe here
        return sorted(distinct_tickers(ticker for (ticker,) in rows if ticker and ticker.strip()))

    @staticmethod
    def _to_domain(row: HoldingORM) -> HoldingSnapshot:
        return HoldingSnapshot(
            id=row.id,
            ticker=row.ticker,
            buy_date=row.buy_date,
            quantity=row.quantity,
            buy_price=row.buy_price,
            brokerage=row.brokerage,
        )
