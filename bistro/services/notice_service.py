import logging
from datetime import datetime

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bistro.errors import NotFound
from bistro.models.notice import Notice, NoticePriority
from bistro.schemas.notice import NoticeCreate, NoticeUpdate

logger = logging.getLogger(__name__)

_PRIORITY_RANK = case(
    (Notice.priority == NoticePriority.HIGH, 3),
    (Notice.priority == NoticePriority.NORMAL, 2),
    else_=1,
)


def _is_visible(now: datetime):
    return and_(
        Notice.is_active.is_(True),
        or_(Notice.expires_at.is_(None), Notice.expires_at >= now),
    )


async def list_active_notices(db: AsyncSession) -> list[Notice]:
    """Notices shown on the public site, most important first."""
    result = await db.execute(
        select(Notice)
        .where(_is_visible(datetime.utcnow()))
        .order_by(_PRIORITY_RANK.desc(), Notice.published_at.desc(), Notice.id.desc())
    )
    return list(result.scalars().all())


async def count_active_notices(db: AsyncSession) -> int:
    result = await db.execute(
        select(func.count()).select_from(Notice).where(_is_visible(datetime.utcnow()))
    )
    return result.scalar_one()


async def list_all_notices(db: AsyncSession) -> list[Notice]:
    result = await db.execute(select(Notice).order_by(Notice.created_at.desc(), Notice.id.desc()))
    return list(result.scalars().all())


async def create_notice(db: AsyncSession, data: NoticeCreate) -> Notice:
    notice = Notice(
        title=data.title,
        body=data.body,
        priority=data.priority,
        is_active=data.is_active,
        published_at=data.published_at or datetime.utcnow(),
        expires_at=data.expires_at,
        action_label=data.action_label,
        action_url=data.action_url,
    )
    db.add(notice)
    await db.commit()
    logger.info("Notice created", extra={"notice_id": notice.id, "priority": notice.priority.value})
    return notice


async def update_notice(db: AsyncSession, notice_id: int, data: NoticeUpdate) -> Notice:
    notice = await db.get(Notice, notice_id)
    if notice is None:
        raise NotFound("Notice not found")

    changes = data.model_dump(exclude_unset=True)
    # Only these may be cleared by sending null
    nullable = {"expires_at", "action_label", "action_url"}
    for field, value in changes.items():
        if value is None and field not in nullable:
            continue
        setattr(notice, field, value)
    notice.updated_at = datetime.utcnow()

    await db.commit()
    logger.info("Notice updated", extra={"notice_id": notice.id, "fields": sorted(changes)})
    return notice


async def delete_notice(db: AsyncSession, notice_id: int) -> None:
    notice = await db.get(Notice, notice_id)
    if notice is None:
        raise NotFound("Notice not found")
    await db.delete(notice)
    await db.commit()
    logger.info("Notice deleted", extra={"notice_id": notice_id})
