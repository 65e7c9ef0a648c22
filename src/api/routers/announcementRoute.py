from datetime import datetime, timezone

from fastapi import APIRouter
from sqlmodel import or_, select

from src.api.core.dependencies import GetSession
from src.api.core.response import api_response
from src.api.core.utility import utc_naive
from src.api.models import Announcement
from src.api.models.announcementModel import AnnouncementRead

router = APIRouter(prefix="/announcements", tags=["Announcement"])


def active_announcement_statement(now: datetime):
    return (
        select(Announcement)
        .where(
            Announcement.active == True,  # noqa: E712
            or_(Announcement.start_at.is_(None), Announcement.start_at <= now),
            or_(Announcement.end_at.is_(None), Announcement.end_at >= now),
        )
        .order_by(Announcement.created_at.desc(), Announcement.id.desc())
    )


# ✅ ACTIVE
@router.get("/active")
def read_active(session: GetSession):
    now = utc_naive(datetime.now(timezone.utc))
    announcement = session.exec(active_announcement_statement(now)).first()

    data = AnnouncementRead.model_validate(announcement) if announcement else None
    return api_response(200, "Active announcement", data)
