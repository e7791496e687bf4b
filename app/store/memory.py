"""In-process table store.

Keeps each table as an insertion-ordered dict of rows keyed by id. Used by
the test suite and for running the application without a database
(DATA_STORE=memory).
"""
import copy
import re
import uuid
from datetime import datetime, timezone
from typing import Iterable, Optional, Sequence

from app.models import MODELS_BY_TABLE
from app.store.base import (
    Filter,
    StoreError,
    TableStore,
    to_number,
    to_store_value,
    validate_filters,
)


def _utcnow_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _numeric_columns(table: str) -> dict[str, type]:
    model = MODELS_BY_TABLE.get(table)
    return model.numeric_columns() if model is not None else {}


def _normalize(table: str, data: dict) -> dict:
    """Convert a row payload to stored form, matching the column types.

    Raises:
        ValueError: If a numeric column is given a non-number.
    """
    numeric = _numeric_columns(table)
    row = {}
    for key, value in data.items():
        if key in numeric:
            value = to_number(key, value, numeric[key])
        row[key] = to_store_value(value)
    return row


def _like_to_regex(pattern: str) -> re.Pattern:
    """Translate a SQL LIKE pattern into a case-insensitive regex."""
    parts = []
    for ch in pattern:
        if ch == '%':
            parts.append('.*')
        elif ch == '_':
            parts.append('.')
        else:
            parts.append(re.escape(ch))
    return re.compile('^' + ''.join(parts) + '$', re.IGNORECASE | re.DOTALL)


def _matches(row: dict, f: Filter) -> bool:
    if f.op == 'ilike_any':
        needle = str(f.value).lower()
        return any(
            row.get(col) is not None and needle in str(row.get(col)).lower()
            for col in f.column
        )

    value = row.get(f.column)
    operand = to_store_value(f.value)

    if f.op == 'is_null':
        return value is None
    if f.op == 'not_null':
        return value is not None
    if f.op == 'eq':
        return value == operand
    if f.op == 'neq':
        # SQL semantics: NULL never compares unequal
        return value is not None and value != operand
    if f.op == 'in':
        return value in [to_store_value(v) for v in operand]
    if f.op == 'ilike':
        return value is not None and bool(_like_to_regex(operand).match(str(value)))

    if value is None:
        return False
    if f.op == 'gt':
        return value > operand
    if f.op == 'gte':
        return value >= operand
    if f.op == 'lt':
        return value < operand
    if f.op == 'lte':
        return value <= operand
    return False


class MemoryStore(TableStore):
    """Dict-backed TableStore.

    Args:
        tables: Optional iterable of table names to accept. When given,
            operations on any other table raise StoreError, mirroring a
            database without that relation.
    """

    def __init__(self, tables: Optional[Iterable[str]] = None):
        self._allowed = set(tables) if tables is not None else None
        self._tables: dict[str, dict[str, dict]] = {}

    def _table(self, table: str) -> dict[str, dict]:
        if self._allowed is not None and table not in self._allowed:
            raise StoreError(f"Unknown table: {table}")
        return self._tables.setdefault(table, {})

    def _filtered(self, table: str, filters: Iterable[Filter]) -> list[dict]:
        checked = validate_filters(filters)
        try:
            return [
                row for row in self._table(table).values()
                if all(_matches(row, f) for f in checked)
            ]
        except TypeError as exc:
            raise StoreError(f"Cannot compare values in {table}: {exc}") from exc

    def select(
        self,
        table: str,
        filters: Iterable[Filter] = (),
        order_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        offset: int = 0,
        columns: Optional[Sequence[str]] = None,
    ) -> list[dict]:
        rows = self._filtered(table, filters)

        if order_by:
            # Nulls last in both directions
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            try:
                present.sort(key=lambda r: r[order_by], reverse=descending)
            except TypeError as exc:
                raise StoreError(f"Cannot order {table} by {order_by}: {exc}") from exc
            rows = present + missing

        rows = rows[offset:]
        if limit is not None:
            rows = rows[:limit]

        if columns:
            return [{c: row.get(c) for c in columns} for row in rows]
        return [copy.deepcopy(row) for row in rows]

    def count(self, table: str, filters: Iterable[Filter] = ()) -> int:
        return len(self._filtered(table, filters))

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        target = self._table(table)
        created = []
        for data in rows:
            row = _normalize(table, data)
            row.setdefault('id', str(uuid.uuid4()))
            if row['id'] in target:
                raise StoreError(f"Duplicate id in {table}: {row['id']}")
            now = _utcnow_iso()
            row.setdefault('created_at', now)
            row.setdefault('updated_at', row['created_at'])
            target[row['id']] = row
            created.append(copy.deepcopy(row))
        return created

    def update(self, table: str, filters: Iterable[Filter], values: dict) -> list[dict]:
        changes = _normalize(table, {k: v for k, v in values.items() if k != 'id'})
        updated = []
        for row in self._filtered(table, filters):
            row.update(copy.deepcopy(changes))
            updated.append(copy.deepcopy(row))
        return updated

    def delete(self, table: str, filters: Iterable[Filter]) -> int:
        target = self._table(table)
        doomed = [row['id'] for row in self._filtered(table, filters)]
        for row_id in doomed:
            del target[row_id]
        return len(doomed)

    def clear(self) -> None:
        """Drop all rows from every table."""
        self._tables.clear()
