"""Generic record access over a table store.

Every entity service is a thin configuration of ``Repository``: a table
name, a default ordering and an error policy. The store is injected, so a
service can run against the database or an in-memory store alike.

Error policies:
    ErrorPolicy.DEFAULT: log the failure and return an empty/default value
        (``[]``, ``None``, ``False`` or ``0``). Callers cannot tell a failed
        query from an empty result.
    ErrorPolicy.RAISE: log the failure and re-raise the StoreError.

Only StoreError is handled; anything else propagates unchanged.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Optional, Sequence

from app.store import Filter, StoreError, TableStore, eq, in_

logger = logging.getLogger(__name__)

# Columns the store owns; stripped from create/update payloads
PROTECTED_FIELDS = ('id', 'created_at', 'updated_at')


class ErrorPolicy:
    """How a repository reacts to a failing store."""
    DEFAULT = 'default'
    RAISE = 'raise'

    ALL = [DEFAULT, RAISE]


def utcnow_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def today_iso() -> str:
    """Current UTC date as YYYY-MM-DD."""
    return datetime.now(timezone.utc).date().isoformat()


def require_fields(data: dict, fields: Sequence[str]) -> None:
    """Raise ValueError listing any required field that is missing or empty."""
    missing = [f for f in fields if f not in data or data[f] in (None, '')]
    if missing:
        raise ValueError(f"Missing required fields: {missing}")


def check_choice(value: Any, allowed: Sequence[Any], field: str = 'status') -> None:
    """Raise ValueError if value is not one of allowed."""
    if value not in allowed:
        raise ValueError(f"Invalid {field}: {value}. Must be one of: {list(allowed)}")


class Repository:
    """CRUD access to one table.

    Args:
        store: The table store to query.
        table: Table name.
        order_by: Default sort column for list operations.
        descending: Default sort direction.
        policy: ErrorPolicy.DEFAULT or ErrorPolicy.RAISE.
        label: Human name used in log messages (defaults to the table name).
    """

    def __init__(
        self,
        store: TableStore,
        table: str,
        order_by: Optional[str] = 'created_at',
        descending: bool = True,
        policy: str = ErrorPolicy.RAISE,
        label: Optional[str] = None,
    ):
        if policy not in ErrorPolicy.ALL:
            raise ValueError(f"Invalid error policy: {policy}. Must be one of: {ErrorPolicy.ALL}")
        self.store = store
        self.table = table
        self.order_by = order_by
        self.descending = descending
        self.policy = policy
        self.label = label or table

    def guard(self, action: str, default: Any, func: Callable[[], Any],
              policy: Optional[str] = None) -> Any:
        """Run a store call under the error policy.

        Args:
            action: Short description for the log message.
            default: Value returned on failure under the DEFAULT policy.
            func: Zero-argument callable performing the store call.
            policy: Overrides the repository policy for this call.
        """
        try:
            return func()
        except StoreError:
            logger.exception('Error %s %s', action, self.label, extra={'table': self.table})
            if (policy or self.policy) == ErrorPolicy.RAISE:
                raise
            return default

    def find(
        self,
        filters: Iterable[Filter] = (),
        order_by: Optional[str] = None,
        descending: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        columns: Optional[Sequence[str]] = None,
        policy: Optional[str] = None,
    ) -> list[dict]:
        """Fetch rows matching all filters, in the default order unless given."""
        filters = list(filters)
        return self.guard(
            'fetching', [],
            lambda: self.store.select(
                self.table,
                filters,
                order_by=order_by or self.order_by,
                descending=self.descending if descending is None else descending,
                limit=limit,
                offset=offset,
                columns=columns,
            ) or [],
            policy,
        )

    def page(self, page: int = 1, page_size: int = 10,
             filters: Iterable[Filter] = ()) -> tuple[list[dict], int]:
        """Fetch one 1-based page of rows plus the total matching count.

        Raises:
            ValueError: If page or page_size is below 1.
        """
        if page < 1 or page_size < 1:
            raise ValueError("page and page_size must be at least 1")
        filters = list(filters)

        def run():
            total = self.store.count(self.table, filters)
            rows = self.store.select(
                self.table,
                filters,
                order_by=self.order_by,
                descending=self.descending,
                limit=page_size,
                offset=(page - 1) * page_size,
            )
            return rows, total

        return self.guard('paging', ([], 0), run)

    def get(self, id: str, policy: Optional[str] = None) -> Optional[dict]:
        """Fetch one row by id, or None if it does not exist."""
        def run():
            rows = self.store.select(self.table, [eq('id', id)], limit=1)
            return rows[0] if rows else None

        return self.guard('fetching', None, run, policy)

    def find_one(self, filters: Iterable[Filter]) -> Optional[dict]:
        """Fetch the first row matching the filters, or None."""
        rows = self.find(filters, limit=1)
        return rows[0] if rows else None

    def create(self, data: dict, policy: Optional[str] = None) -> Optional[dict]:
        """Insert one row; the store assigns id and timestamps."""
        payload = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}

        def run():
            return self.store.insert(self.table, [payload])[0]

        return self.guard('creating', None, run, policy)

    def create_many(self, rows: list[dict]) -> list[dict]:
        """Insert several rows in one store call."""
        payloads = [
            {k: v for k, v in row.items() if k not in PROTECTED_FIELDS}
            for row in rows
        ]
        return self.guard('creating', [], lambda: self.store.insert(self.table, payloads))

    def update(self, id: str, data: dict, policy: Optional[str] = None) -> Optional[dict]:
        """Apply a partial update and stamp updated_at.

        Returns:
            The updated row, or None if no row has that id.
        """
        values = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
        values['updated_at'] = utcnow_iso()

        def run():
            rows = self.store.update(self.table, [eq('id', id)], values)
            return rows[0] if rows else None

        return self.guard('updating', None, run, policy)

    def update_where(self, filters: Iterable[Filter], data: dict) -> list[dict]:
        """Apply the same partial update to every matching row."""
        filters = list(filters)
        values = {k: v for k, v in data.items() if k not in PROTECTED_FIELDS}
        values['updated_at'] = utcnow_iso()
        return self.guard('updating', [], lambda: self.store.update(self.table, filters, values))

    def delete(self, id: str, policy: Optional[str] = None) -> bool:
        """Hard delete one row. Returns True if a row was removed."""
        return self.guard(
            'deleting', False,
            lambda: self.store.delete(self.table, [eq('id', id)]) > 0,
            policy,
        )

    def delete_many(self, ids: Iterable[str]) -> bool:
        """Hard delete every row whose id is listed.

        No partial-failure reporting: either the store call succeeds or the
        policy applies to the whole batch.
        """
        ids = list(ids)

        def run():
            self.store.delete(self.table, [in_('id', ids)])
            return True

        return self.guard('deleting', False, run)

    def count(self, filters: Iterable[Filter] = ()) -> int:
        """Count rows matching all filters."""
        filters = list(filters)
        return self.guard('counting', 0, lambda: self.store.count(self.table, filters))
