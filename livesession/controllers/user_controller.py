"""
User controller — player accounts under /users.

Controllers are THIN — they delegate to services and return schemas.
"""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from livesession.core.database import get_db
from livesession.schemas import DB_INT_MAX, MessageResponse, UserCreateRequest, UserOut
from livesession.services import user_service

router = APIRouter(prefix="/users", tags=["Users"])


@router.post("", response_model=UserOut, status_code=201)
async def create_user(body: UserCreateRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.create_user(
        username=body.username,
        playername=body.playername,
        password=body.password,
        db=db,
    )
    return UserOut(user_id=user.id, username=user.username, playername=user.playername)


@router.get("/{user_id}", response_model=UserOut)
async def get_user(user_id: int = Path(ge=1, le=DB_INT_MAX), db: AsyncSession = Depends(get_db)):
    user = await user_service.get_user_by_id(user_id, db)
    return UserOut(user_id=user.id, username=user.username, playername=user.playername)


@router.delete("/{user_id}", response_model=MessageResponse)
async def delete_user(user_id: int = Path(ge=1, le=DB_INT_MAX), db: AsyncSession = Depends(get_db)):
    await user_service.delete_user(user_id, db)
    return MessageResponse(detail="User deleted")
