"""Table store backed by the Flask-SQLAlchemy models.

Translates the store's filter vocabulary into ORM queries against
``db.session``. Rows cross the boundary as dicts keyed by column name with
dates rendered as ISO strings. Must be used inside an application context.
"""
import logging
from datetime import date, datetime
from typing import Any, Iterable, Optional, Sequence

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from app import db
from app.models import MODELS_BY_TABLE
from app.store.base import Filter, StoreError, TableStore, to_number, validate_filters

logger = logging.getLogger(__name__)


class SQLAlchemyStore(TableStore):
    """TableStore over the application's relational database."""

    def _model(self, table: str):
        try:
            return MODELS_BY_TABLE[table]
        except KeyError:
            raise StoreError(f"Unknown table: {table}") from None

    def _attr(self, model, column: str):
        attr_name = model.column_attributes().get(column)
        if attr_name is None:
            raise StoreError(f"Unknown column {column} on {model.__tablename__}")
        return getattr(model, attr_name)

    def _coerce(self, model, column: str, value: Any) -> Any:
        """Convert ISO strings to date/datetime objects for date columns.

        Values for numeric columns go through to_number.
        """
        kind = model.numeric_columns().get(column)
        if kind is not None:
            return to_number(column, value, kind)
        if not isinstance(value, str):
            return value
        column_type = model.__table__.columns[column].type
        if isinstance(column_type, db.DateTime):
            return datetime.fromisoformat(value)
        if isinstance(column_type, db.Date):
            return date.fromisoformat(value[:10])
        return value

    def _values(self, model, data: dict) -> dict:
        """Map a row dict to constructor/attribute keyword values."""
        attributes = model.column_attributes()
        values = {}
        for column, value in data.items():
            if column not in attributes:
                raise StoreError(f"Unknown column {column} on {model.__tablename__}")
            values[attributes[column]] = self._coerce(model, column, value)
        return values

    def _clause(self, model, f: Filter):
        if f.op == 'ilike_any':
            return or_(*[
                self._attr(model, column).ilike(f'%{f.value}%')
                for column in f.column
            ])

        col = self._attr(model, f.column)
        if f.op == 'is_null':
            return col.is_(None)
        if f.op == 'not_null':
            return col.isnot(None)
        if f.op == 'in':
            return col.in_([self._coerce(model, f.column, v) for v in f.value])
        if f.op == 'ilike':
            return col.ilike(f.value)

        value = self._coerce(model, f.column, f.value)
        if f.op == 'eq':
            return col == value
        if f.op == 'neq':
            return col != value
        if f.op == 'gt':
            return col > value
        if f.op == 'gte':
            return col >= value
        if f.op == 'lt':
            return col < value
        return col <= value

    def _query(self, table: str, filters: Iterable[Filter]):
        model = self._model(table)
        query = db.session.query(model)
        for f in validate_filters(filters):
            query = query.filter(self._clause(model, f))
        return model, query

    def _fail(self, action: str, table: str, exc: Exception):
        db.session.rollback()
        raise StoreError(f"Failed to {action} {table}: {exc}") from exc

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
        try:
            model, query = self._query(table, filters)
            if order_by:
                sort_column = self._attr(model, order_by)
                if descending:
                    query = query.order_by(sort_column.desc().nulls_last())
                else:
                    query = query.order_by(sort_column.asc().nulls_last())
            if offset:
                query = query.offset(offset)
            if limit is not None:
                query = query.limit(limit)
            rows = [record.to_dict() for record in query.all()]
        except SQLAlchemyError as exc:
            self._fail('select from', table, exc)

        if columns:
            return [{c: row.get(c) for c in columns} for row in rows]
        return rows

    def count(self, table: str, filters: Iterable[Filter] = ()) -> int:
        try:
            _, query = self._query(table, filters)
            return query.count()
        except SQLAlchemyError as exc:
            self._fail('count', table, exc)

    def insert(self, table: str, rows: list[dict]) -> list[dict]:
        model = self._model(table)
        records = [model(**self._values(model, row)) for row in rows]
        try:
            db.session.add_all(records)
            db.session.commit()
        except SQLAlchemyError as exc:
            self._fail('insert into', table, exc)
        return [record.to_dict() for record in records]

    def update(self, table: str, filters: Iterable[Filter], values: dict) -> list[dict]:
        try:
            model, query = self._query(table, filters)
            changes = self._values(model, {k: v for k, v in values.items() if k != 'id'})
            records = query.all()
            for record in records:
                for key, value in changes.items():
                    setattr(record, key, value)
            db.session.commit()
        except SQLAlchemyError as exc:
            self._fail('update', table, exc)
        return [record.to_dict() for record in records]

    def delete(self, table: str, filters: Iterable[Filter]) -> int:
        try:
            _, query = self._query(table, filters)
            records = query.all()
            for record in records:
                db.session.delete(record)
            db.session.commit()
        except SQLAlchemyError as exc:
            self._fail('delete from', table, exc)
        logger.debug('Deleted %d row(s) from %s', len(records), table)
        return len(records)
