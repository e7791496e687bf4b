"""Table store package.

The store is the data collaborator behind every service: a tabular query
interface with filters, ordering, pagination, insert, update, delete and
counting. ``create_store`` picks the implementation named by the
DATA_STORE setting.
"""
from app.store.base import (
    Filter,
    StoreError,
    TableStore,
    between,
    eq,
    gt,
    gte,
    ilike,
    in_,
    is_null,
    lt,
    lte,
    neq,
    not_null,
    search,
)
from app.store.memory import MemoryStore


def create_store(kind: str) -> TableStore:
    """Build the table store named by the DATA_STORE setting.

    Args:
        kind: 'sqlalchemy' or 'memory'.

    Raises:
        ValueError: If kind is not a known backend.
    """
    if kind == 'memory':
        return MemoryStore()
    if kind == 'sqlalchemy':
        from app.store.sqlalchemy_store import SQLAlchemyStore
        return SQLAlchemyStore()
    raise ValueError(f"Invalid DATA_STORE: {kind}. Must be 'sqlalchemy' or 'memory'")


__all__ = [
    'Filter',
    'MemoryStore',
    'StoreError',
    'TableStore',
    'between',
    'create_store',
    'eq',
    'gt',
    'gte',
    'ilike',
    'in_',
    'is_null',
    'lt',
    'lte',
    'neq',
    'not_null',
    'search',
]
