from datetime import datetime, timezone

from fastapi import APIRouter
from sqlmodel import select

from src.api.core.dependencies import GetSession, ListQueryParams, requireAdmin
from src.api.core.operation import paginate
from src.api.core.response import api_response, raiseExceptions
from src.api.core.utility import as_utc, utc_naive
from src.api.models import Announcement
from src.api.models.announcementModel import AnnouncementCreate, AnnouncementRead, AnnouncementUpdate

router = APIRouter(prefix="/admin/announcements", tags=["Admin Announcement"])


def _check_window(start_at, end_at):
    if start_at is not None and end_at is not None:
        raiseExceptions((as_utc(end_at) > as_utc(start_at), 400, "End time must be after start time"))


# ✅ LIST
@router.get("")
def list_announcements(admin: requireAdmin, session: GetSession, query_params: ListQueryParams):
    statement = select(Announcement)
    if query_params.search:
        statement = statement.where(Announcement.title.ilike(f"%{query_params.search}%"))
    statement = statement.order_by(Announcement.created_at.desc(), Announcement.id.desc())

    announcements, pagination = paginate(session, statement, query_params.page, query_params.limit)
    return api_response(
        200,
        "Announcements found",
        [AnnouncementRead.model_validate(a) for a in announcements],
        pagination=pagination,
    )


# ✅ CREATE
@router.post("")
def create_announcement(request: AnnouncementCreate, admin: requireAdmin, session: GetSession):
    _check_window(request.start_at, request.end_at)

    data = request.model_dump()
    data["start_at"] = utc_naive(data["start_at"])
    data["end_at"] = utc_naive(data["end_at"])
    announcement = Announcement(**data)
    session.add(announcement)
    session.commit()
    session.refresh(announcement)

    return api_response(201, "Announcement created successfully", AnnouncementRead.model_validate(announcement))


# ✅ READ BY ID
@router.get("/{id}")
def read_announcement(id: int, admin: requireAdmin, session: GetSession):
    announcement = session.get(Announcement, id)
    raiseExceptions((announcement, 404, "Announcement not found"))

    return api_response(200, "Announcement found", AnnouncementRead.model_validate(announcement))


# ✅ UPDATE
@router.put("/{id}")
def update_announcement(id: int, request: AnnouncementUpdate, admin: requireAdmin, session: GetSession):
    announcement = session.get(Announcement, id)
    raiseExceptions((announcement, 404, "Announcement not found"))

    data = request.model_dump(exclude_unset=True)
    for field in ("start_at", "end_at"):
        if field in data:
            data[field] = utc_naive(data[field])
    _check_window(data.get("start_at", announcement.start_at), data.get("end_at", announcement.end_at))

    for key, value in data.items():
        setattr(announcement, key, value)
    announcement.updated_at = datetime.now(timezone.utc)
    session.add(announcement)
    session.commit()
    session.refresh(announcement)

    return api_response(200, "Announcement updated successfully", AnnouncementRead.model_validate(announcement))


# ✅ DELETE
@router.delete("/{id}")
def delete_announcement(id: int, admin: requireAdmin, session: GetSession):
    announcement = session.get(Announcement, id)
    raiseExceptions((announcement, 404, "Announcement not found"))

    session.delete(announcement)
    session.commit()
    return api_response(200, "Announcement deleted successfully")
