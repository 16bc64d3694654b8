"""
User model.

Design decisions:
- Game clients address users by a small integer id, so the primary key
  is an auto-incrementing integer rather than a UUID.
- `username` is the login name, `playername` the in-game display name;
  both are unique.
- Live sessions and buy menus reference the user id by value only;
  they are owned by separate stores and never cascade from here.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from livesession.models.base import Base, AuditColumns


class User(Base, AuditColumns):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    playername: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(512), nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.id} {self.username}>"
