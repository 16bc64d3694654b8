"""
Inventory controller — buy menus under /inventory/{userId}/buymenu.

    GET     200 menu      / 400 bad userId / 404 no menu
    POST    201 menu      / 400 bad userId / 409 menu exists
    PUT     200           / 400 bad userId or body / 404 no menu
    DELETE  200           / 400 bad userId / 404 no menu
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Path, status
from sqlalchemy.ext.asyncio import AsyncSession

from livesession.core.database import get_db
from livesession.schemas import DB_INT_MAX, BuyMenuOut, BuyMenuUpdate, MessageResponse
from livesession.services import inventory_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/inventory", tags=["Inventory"])


@router.get("/{user_id}/buymenu", response_model=BuyMenuOut)
async def get_buy_menu(user_id: int = Path(ge=1, le=DB_INT_MAX), db: AsyncSession = Depends(get_db)):
    logger.debug("GET request to /inventory/%s/buymenu", user_id)
    menu = await inventory_service.get_buy_menu(user_id, db)
    return inventory_service.to_buy_menu_out(menu)


@router.post("/{user_id}/buymenu", response_model=BuyMenuOut, status_code=201)
async def create_buy_menu(user_id: int = Path(ge=1, le=DB_INT_MAX), db: AsyncSession = Depends(get_db)):
    logger.debug("POST request to /inventory/%s/buymenu", user_id)
    menu = await inventory_service.create_buy_menu(user_id, db)
    return inventory_service.to_buy_menu_out(menu)


@router.put("/{user_id}/buymenu", response_model=MessageResponse)
async def set_buy_menu(
    body: BuyMenuUpdate,
    user_id: int = Path(ge=1, le=DB_INT_MAX),
    db: AsyncSession = Depends(get_db),
):
    logger.debug("PUT request to /inventory/%s/buymenu", user_id)
    if not await inventory_service.set_buy_menu(user_id, body, db):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Buy menu not found")
    return MessageResponse(detail="Buy menu updated")


@router.delete("/{user_id}/buymenu", response_model=MessageResponse)
async def delete_buy_menu(user_id: int = Path(ge=1, le=DB_INT_MAX), db: AsyncSession = Depends(get_db)):
    logger.debug("DELETE request to /inventory/%s/buymenu", user_id)
    if not await inventory_service.remove_buy_menu(user_id, db):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Buy menu not found")
    return MessageResponse(detail="Buy menu deleted")
