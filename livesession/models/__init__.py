"""
Models package — import every model so SQLAlchemy's Base.metadata
knows about all tables (critical for `create_all` / Alembic).
"""

from livesession.models.base import Base, AuditColumns
from livesession.models.buymenu import BuyMenu
from livesession.models.session import LiveSession
from livesession.models.user import User

__all__ = [
    "Base",
    "AuditColumns",
    "BuyMenu",
    "LiveSession",
    "User",
]
