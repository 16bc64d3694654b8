"""
Declarative base & the audit columns every table carries.

`created_at` is stamped by the database on insert.  `updated_at` is
bumped by SQLAlchemy on every UPDATE, including the Core `update()`
statements the session store issues for partial merges, so on
`live_sessions` it doubles as "last time a game server touched this
session".  Primary keys are declared per model: game ids are plain
integers, session ids are opaque strings.
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class AuditColumns:
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=utc_now, nullable=False,
    )
