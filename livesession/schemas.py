"""
Pydantic schemas for request / response serialization.

Kept in a single file for now — split per-domain when it grows.
Schemas are deliberately decoupled from SQLAlchemy models so the
API surface can evolve independently of the DB layer.

Game clients speak camelCase JSON; fields are declared in snake_case
and aliased through `CamelModel`.
"""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Widest value the 32-bit INTEGER columns accept.
DB_INT_MAX = 2_147_483_647

Port = Annotated[int, Field(ge=0, le=65535)]
UserId = Annotated[int, Field(ge=1, le=DB_INT_MAX)]
DbInt = Annotated[int, Field(ge=-DB_INT_MAX - 1, le=DB_INT_MAX)]
IpAddress = Annotated[str, Field(max_length=64)]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Sessions ─────────────────────────────────────────────────────────
class NetworkBlock(CamelModel):
    ip_address: IpAddress = ""
    client_port: Port = 0
    server_port: Port = 0
    tv_port: Port = 0


class SessionOut(CamelModel):
    session_id: str
    user_id: UserId
    external_net: NetworkBlock = Field(default_factory=NetworkBlock)
    internal_net: NetworkBlock = Field(default_factory=NetworkBlock)
    current_channel_server_index: DbInt = 0
    current_channel_index: DbInt = 0
    current_room_id: DbInt = 0


class NetworkBlockUpdate(CamelModel):
    ip_address: IpAddress | None = None
    client_port: Port | None = None
    server_port: Port | None = None
    tv_port: Port | None = None


class SessionUpdate(CamelModel):
    """Sparse session payload: only the fields present are written."""

    external_net: NetworkBlockUpdate | None = None
    internal_net: NetworkBlockUpdate | None = None
    current_channel_server_index: DbInt | None = None
    current_channel_index: DbInt | None = None
    current_room_id: DbInt | None = None

    def changes(self) -> dict[str, Any]:
        """Nested dict of the provided fields, with empty blocks dropped."""
        data = self.model_dump(exclude_none=True, include=set(SessionUpdate.model_fields))
        return {key: value for key, value in data.items() if value != {}}


class SessionUserRequest(CamelModel):
    user_id: UserId


class SessionUpdateRequest(SessionUpdate):
    user_id: UserId


class SessionCreateRequest(BaseModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class DeleteAllResponse(BaseModel):
    deleted: int


# ── Users ────────────────────────────────────────────────────────────
class UserCreateRequest(BaseModel):
    username: str = Field(min_length=1, max_length=64)
    playername: str = Field(min_length=1, max_length=64)
    password: str = Field(min_length=1)


class UserOut(CamelModel):
    user_id: UserId
    username: str
    playername: str


# ── Inventory buy menu ───────────────────────────────────────────────
class BuyMenuOut(CamelModel):
    user_id: UserId
    pistols: list[DbInt] = []
    shotguns: list[DbInt] = []
    smgs: list[DbInt] = []
    rifles: list[DbInt] = []
    snipers: list[DbInt] = []
    machineguns: list[DbInt] = []
    melees: list[DbInt] = []
    equipment: list[DbInt] = []


class BuyMenuUpdate(BaseModel):
    pistols: list[DbInt] | None = None
    shotguns: list[DbInt] | None = None
    smgs: list[DbInt] | None = None
    rifles: list[DbInt] | None = None
    snipers: list[DbInt] | None = None
    machineguns: list[DbInt] | None = None
    melees: list[DbInt] | None = None
    equipment: list[DbInt] | None = None


# ── Generic ──────────────────────────────────────────────────────────
class MessageResponse(BaseModel):
    detail: str
