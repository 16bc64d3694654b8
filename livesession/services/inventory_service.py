"""
Inventory service — per-user buy menus.

Same shape as the session lifecycle, minus the counter: one buy menu
per user (unique index on `user_id`), partial updates replace only the
sub-menus that are present.
"""

import logging

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from livesession.core.errors import ConflictError, NotFoundError
from livesession.models.buymenu import SUB_MENUS, BuyMenu
from livesession.schemas import BuyMenuOut, BuyMenuUpdate

logger = logging.getLogger(__name__)


def to_buy_menu_out(menu: BuyMenu) -> BuyMenuOut:
    return BuyMenuOut(
        user_id=menu.user_id,
        **{name: list(getattr(menu, name)) for name in SUB_MENUS},
    )


async def create_buy_menu(user_id: int, db: AsyncSession) -> BuyMenu:
    """Create an empty buy menu.  Raises `ConflictError` if one exists."""
    menu = BuyMenu(user_id=user_id, **{name: [] for name in SUB_MENUS})
    db.add(menu)
    try:
        await db.flush()
    except IntegrityError as exc:
        await db.rollback()
        logger.warning("Tried to create a buy menu for an existing user (userId: %s)", user_id)
        raise ConflictError("User already has a buy menu", details={"userId": user_id}) from exc
    return menu


async def get_buy_menu(user_id: int, db: AsyncSession) -> BuyMenu:
    stmt = (
        select(BuyMenu)
        .where(BuyMenu.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    menu = result.scalar_one_or_none()
    if menu is None:
        raise NotFoundError("Buy menu not found", details={"userId": user_id})
    return menu


async def set_buy_menu(user_id: int, body: BuyMenuUpdate, db: AsyncSession) -> bool:
    """Replace the provided sub-menus.  Returns False if the user has no menu."""
    values = body.model_dump(exclude_none=True)
    if not values:
        stmt = select(BuyMenu.id).where(BuyMenu.user_id == user_id)
        return (await db.execute(stmt)).scalar_one_or_none() is not None

    stmt = (
        update(BuyMenu)
        .where(BuyMenu.user_id == user_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount > 0


async def remove_buy_menu(user_id: int, db: AsyncSession) -> bool:
    stmt = (
        delete(BuyMenu)
        .where(BuyMenu.user_id == user_id)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    await db.flush()
    return result.rowcount > 0
