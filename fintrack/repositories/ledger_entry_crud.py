import asyncio
import logging
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from fintrack.models.model import Transaction
from fintrack.schemas.insights_schema import EntryFilter, LedgerEntry
from fintrack.utils.exceptions import LedgerFetchError, LedgerIntegrityError

logger = logging.getLogger(__name__)


def query_entry_rows(db: Session, user_id: int, entry_filter: EntryFilter) -> List[Dict]:
    query = (
        db.query(Transaction)
        .options(joinedload(Transaction.category))
        .filter(Transaction.user_id == user_id)
    )

    if entry_filter.type:
        query = query.filter(Transaction.type == entry_filter.type)
    if entry_filter.start_date:
        query = query.filter(Transaction.date >= entry_filter.start_date)
    if entry_filter.end_date:
        query = query.filter(Transaction.date <= entry_filter.end_date)

    return [
        {
            "type": transaction.type,
            "amount": transaction.amount,
            "date": transaction.date,
            "category": (
                {"name": transaction.category.name, "color": transaction.category.color}
                if transaction.category
                else None
            ),
        }
        for transaction in query.all()
    ]


def to_ledger_entries(rows: List[Dict]) -> List[LedgerEntry]:
    try:
        return [LedgerEntry.model_validate(row) for row in rows]
    except ValidationError as e:
        raise LedgerIntegrityError(f"Invalid ledger row: {e}") from e


class SqlEntrySource:
    """Reads one user's transactions as ledger entries.

    Every fetch runs on its own session in a worker thread so that
    independent fetches can be awaited together.
    """

    def __init__(
        self,
        session_factory: Callable[[], Session],
        user_id: int,
        timeout: Optional[float] = None,
    ):
        self.session_factory = session_factory
        self.user_id = user_id
        self.timeout = timeout

    def _fetch_rows(self, entry_filter: EntryFilter) -> List[Dict]:
        with self.session_factory() as db:
            return query_entry_rows(db, self.user_id, entry_filter)

    async def fetch_entries(self, entry_filter: EntryFilter) -> List[LedgerEntry]:
        try:
            rows = await asyncio.wait_for(
                asyncio.to_thread(self._fetch_rows, entry_filter), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Ledger query for user {self.user_id} timed out after {self.timeout}s")
            raise LedgerFetchError(f"Ledger query timed out after {self.timeout}s") from e
        except SQLAlchemyError as e:
            logger.error(f"Ledger query for user {self.user_id} failed: {e}")
            raise LedgerFetchError(str(e)) from e

        return to_ledger_entries(rows)
