"""
Inventory buy-menu model.

Each user owns at most one buy menu: eight sub-menus, each an ordered
list of item ids shown in the in-game buy screen.  New menus start
empty and are filled through PUT.  Stored as JSON columns since
sub-menus are always read and written whole.
"""

from sqlalchemy import JSON, Index, Integer
from sqlalchemy.orm import Mapped, mapped_column

from livesession.models.base import Base, AuditColumns

SUB_MENUS = (
    "pistols",
    "shotguns",
    "smgs",
    "rifles",
    "snipers",
    "machineguns",
    "melees",
    "equipment",
)


class BuyMenu(Base, AuditColumns):
    __tablename__ = "inventory_buy_menus"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    pistols: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)
    shotguns: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)
    smgs: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)
    rifles: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)
    snipers: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)
    machineguns: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)
    melees: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)
    equipment: Mapped[list[int]] = mapped_column(JSON, default=lambda: [], nullable=False)

    __table_args__ = (
        Index("ux_inventory_buy_menus_user_id", "user_id", unique=True),
    )

    def __repr__(self) -> str:
        return f"<BuyMenu user={self.user_id}>"
