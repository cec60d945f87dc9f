from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api import api
from bistro.database import get_db
from bistro.schemas.menu import CategoryWithItems
from bistro.services import menu_service

router = APIRouter()


@api.menu.list.route(router)
async def list_menu(db: AsyncSession = Depends(get_db)) -> list[CategoryWithItems]:
    categories = await menu_service.list_menu(db)
    return [CategoryWithItems.model_validate(category) for category in categories]
