from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.api import api
from bistro.database import get_db
from bistro.schemas.catering import CateringInquiryCreate, CateringInquiryRead
from bistro.services import catering_service

router = APIRouter()


@api.catering.create.route(router)
async def create_inquiry(
    body: CateringInquiryCreate,
    db: AsyncSession = Depends(get_db),
) -> CateringInquiryRead:
    inquiry = await catering_service.create_inquiry(db, body)
    return CateringInquiryRead.model_validate(inquiry)
