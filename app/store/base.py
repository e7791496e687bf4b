"""Table store contract.

A table store is the remote data collaborator every service talks to:
select with column projection, filters, ordering and limit/offset
pagination, plus insert, update, delete and row counting. Services never
reach the database directly; they receive a store through their
constructor.
"""
from datetime import date, datetime
from typing import Any, Iterable, NamedTuple, Optional, Sequence


class StoreError(Exception):
    """Raised when the backing store fails to execute an operation.

    The underlying backend exception is chained as ``__cause__``.
    """


class Filter(NamedTuple):
    """A single predicate on a table column.

    Attributes:
        column: Column name, or a tuple of column names for 'ilike_any'.
        op: One of OPERATORS.
        value: Operand. Dates and datetimes are compared as ISO strings.
    """
    column: Any
    op: str
    value: Any = None


OPERATORS = (
    'eq', 'neq', 'gt', 'gte', 'lt', 'lte',
    'in', 'is_null', 'not_null', 'ilike', 'ilike_any',
)


def eq(column: str, value: Any) -> Filter:
    return Filter(column, 'eq', value)


def neq(column: str, value: Any) -> Filter:
    return Filter(column, 'neq', value)


def gt(column: str, value: Any) -> Filter:
    return Filter(column, 'gt', value)


def gte(column: str, value: Any) -> Filter:
    return Filter(column, 'gte', value)


def lt(column: str, value: Any) -> Filter:
    return Filter(column, 'lt', value)


def lte(column: str, value: Any) -> Filter:
    return Filter(column, 'lte', value)


def in_(column: str, values: Iterable[Any]) -> Filter:
    return Filter(column, 'in', list(values))


def is_null(column: str) -> Filter:
    return Filter(column, 'is_null')


def not_null(column: str) -> Filter:
    return Filter(column, 'not_null')


def ilike(column: str, pattern: str) -> Filter:
    """Case-insensitive pattern match using SQL wildcards (% and _)."""
    return Filter(column, 'ilike', pattern)


def search(columns: Sequence[str], term: str) -> Filter:
    """Case-insensitive substring match against any of several columns."""
    return Filter(tuple(columns), 'ilike_any', term)


def between(column: str, start: Any, end: Any) -> list[Filter]:
    """Inclusive range predicate as a pair of filters."""
    return [gte(column, start), lte(column, end)]


def to_store_value(value: Any) -> Any:
    """Normalize a Python value to the form rows carry (ISO strings for dates)."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def to_number(column: str, value: Any, kind: type) -> Any:
    """Normalize a value bound for an Integer (``int``) or Float column.

    Numeric strings such as ``'100'`` are converted; None passes through.

    Raises:
        ValueError: If the value is not a number.
    """
    if value is None or isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return float(value) if kind is float else value
    message = f"{column} must be a number, got {value!r}"
    if not isinstance(value, str):
        raise ValueError(message)
    try:
        return kind(value.strip())
    except ValueError:
        raise ValueError(message) from None


def validate_filters(filters: Iterable[Filter]) -> list[Filter]:
    """Check every filter uses a known operator.

    Raises:
        ValueError: If an operator is not supported.
    """
    result = list(filters)
    for f in result:
        if f.op not in OPERATORS:
            raise ValueError(f"Unsupported filter operator: {f.op}")
    return result


class TableStore:
    """Interface for a tabular data store.

    Rows are plain dicts. Implementations raise StoreError for any backend
    failure, including unknown tables.
    """

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
        raise NotImplementedError

    def count(self, table: str, filters: Iterable[Filter] = ()) -> int:
        raise NotImplementedError

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        raise NotImplementedError

    def update(self, table: str, filters: Iterable[Filter], values: dict) -> list[dict]:
        raise NotImplementedError

    def delete(self, table: str, filters: Iterable[Filter]) -> int:
        raise NotImplementedError
