"""
Declarative base shared by every Bar Costing table.

Each table gets an integer primary key, a stable UUID string for external
references, and created/updated timestamps in naive UTC.
"""

import uuid as uuid_lib
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict

from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base

from barcost.utils.datetime_utils import utc_now

Base = declarative_base()


def _serialize(value: Any) -> Any:
    # Decimal goes out as a string so quantities like 0.0200 keep their scale
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


class BaseModel(Base):
    """Abstract base with id, uuid, timestamps and ``to_dict``."""

    __abstract__ = True

    id = Column(Integer, primary_key=True, autoincrement=True)
    uuid = Column(
        String(36), unique=True, nullable=False, default=lambda: str(uuid_lib.uuid4()), index=True
    )
    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    def to_dict(self, include_relationships: bool = False) -> Dict[str, Any]:
        """
        Column values as a JSON-safe dict.

        Args:
            include_relationships: Also serialize loaded related rows, one
                level deep

        Returns:
            Dict keyed by column (and relationship) name
        """
        result = {col.name: _serialize(getattr(self, col.name)) for col in self.__table__.columns}

        if include_relationships:
            for rel in self.__mapper__.relationships:
                related = getattr(self, rel.key)
                if related is None:
                    result[rel.key] = None
                elif rel.uselist:
                    result[rel.key] = [item.to_dict() for item in related]
                else:
                    result[rel.key] = related.to_dict()

        return result

    def __repr__(self) -> str:
        name = getattr(self, "name", None)
        label = f", name={name!r}" if name is not None else ""
        return f"{self.__class__.__name__}(id={self.id}{label})"
