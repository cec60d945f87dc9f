import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.models.catering import CateringInquiry
from bistro.schemas.catering import CateringInquiryCreate

logger = logging.getLogger(__name__)


async def create_inquiry(db: AsyncSession, data: CateringInquiryCreate) -> CateringInquiry:
    inquiry = CateringInquiry(
        name=data.name,
        email=str(data.email),
        phone=data.phone,
        event_date=data.event_date,
        guest_count=data.guest_count,
        message=data.message or None,
    )
    db.add(inquiry)
    await db.commit()
    logger.info(
        "Catering inquiry received",
        extra={"inquiry_id": inquiry.id, "guest_count": inquiry.guest_count},
    )
    return inquiry


async def list_latest_inquiries(db: AsyncSession, limit: int = 50) -> list[CateringInquiry]:
    result = await db.execute(
        select(CateringInquiry)
        .order_by(CateringInquiry.created_at.desc(), CateringInquiry.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())
