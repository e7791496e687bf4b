"""Shared columns and serialization for all tracker records."""
import uuid
from datetime import date, datetime, timezone

from sqlalchemy import inspect
from sqlalchemy.orm import Mapped

from app import db


def _utcnow():
    """Return current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class RecordMixin:
    """Primary key and timestamps shared by every table.

    Records are keyed by a generated UUID string. ``created_at`` and
    ``updated_at`` are stamped on insert; ``updated_at`` moves forward on
    every update.
    """

    # Plain (non-Mapped[]) annotations on Column attributes
    __allow_unmapped__ = True

    id: Mapped[str] = db.Column(db.String(36), primary_key=True, default=_new_id)

    created_at: Mapped[datetime] = db.Column(
        db.DateTime,
        nullable=False,
        default=_utcnow
    )
    updated_at: Mapped[datetime] = db.Column(
        db.DateTime,
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow
    )

    @classmethod
    def column_attributes(cls) -> dict[str, str]:
        """Map table column names to mapped attribute names.

        They differ only where a column name is reserved by SQLAlchemy
        (``metadata`` is stored on the ``meta`` attribute).
        """
        return {
            attr.columns[0].name: attr.key
            for attr in inspect(cls).mapper.column_attrs
        }

    @classmethod
    def numeric_columns(cls) -> dict[str, type]:
        """Map Integer and Float column names to ``int`` or ``float``."""
        kinds = {}
        for column in cls.__table__.columns:
            if isinstance(column.type, db.Float):
                kinds[column.name] = float
            elif isinstance(column.type, db.Integer):
                kinds[column.name] = int
        return kinds

    def to_dict(self) -> dict:
        """Convert the record to a row dict keyed by column name.

        Dates and datetimes are rendered as ISO strings.
        """
        row = {}
        for column_name, attr_name in self.column_attributes().items():
            value = getattr(self, attr_name)
            if isinstance(value, (date, datetime)):
                value = value.isoformat()
            row[column_name] = value
        return row

    def __repr__(self) -> str:
        return f'<{type(self).__name__} {self.id}>'
