from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api import api
from bistro.database import get_db
from bistro.schemas.notice import NoticeRead
from bistro.services import notice_service

router = APIRouter()


@api.notices.list.route(router)
async def list_notices(db: AsyncSession = Depends(get_db)) -> list[NoticeRead]:
    notices = await notice_service.list_active_notices(db)
    return [NoticeRead.model_validate(notice) for notice in notices]
