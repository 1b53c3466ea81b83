"""
SQLAlchemy models for PostgreSQL persistence.

A single namespaced key-value table holds the workflow's persisted keys.
"""

from datetime import datetime
from typing import Any

from sqlalchemy import DateTime, String, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


class KeyValueModel(Base):
    """
    Stores one persisted workflow key.

    ``namespace`` plays the role of a document collection, so several
    workflows can share a database.
    """

    __tablename__ = "workflow_kv"

    namespace: Mapped[str] = mapped_column(String(255), primary_key=True)
    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[Any] = mapped_column(JSONB, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    def __repr__(self) -> str:
        return f"<KeyValueModel({self.namespace}:{self.key}={self.value!r})>"
