"""
Live session model — one row per connected user.

Tracks what the game servers need to reach a player:
- External / internal network endpoints (ip + client/server/tv ports)
- Current position in the channel server → channel → room topology

The nested network blocks of the API are stored as flat columns so a
partial update can set individual ports in a single UPDATE statement.
The unique index on `user_id` is what enforces one live session per
user.  Inserts rely on it, never on a prior existence check.
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from livesession.models.base import Base, AuditColumns


class LiveSession(Base, AuditColumns):
    __tablename__ = "live_sessions"

    session_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)

    # ── External network ─────────────────────────────────────────────
    external_ip_address: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    external_client_port: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    external_server_port: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    external_tv_port: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ── Internal network ─────────────────────────────────────────────
    internal_ip_address: Mapped[str] = mapped_column(String(64), default="", nullable=False)
    internal_client_port: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    internal_server_port: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    internal_tv_port: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    # ── Topology ─────────────────────────────────────────────────────
    current_channel_server_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_channel_index: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    current_room_id: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        Index("ux_live_sessions_user_id", "user_id", unique=True),
    )

    def __repr__(self) -> str:
        return f"<LiveSession user={self.user_id} session={self.session_id}>"
