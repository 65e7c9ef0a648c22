from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query

from src.api.core.dependencies import GetSession, requireAdmin
from src.api.core.response import api_response
from src.api.services.analytics_service import get_analytics

router = APIRouter(prefix="/admin/analytics", tags=["Admin Analytics"])


# ✅ SUMMARY
@router.get("")
def read_analytics(
    admin: requireAdmin,
    session: GetSession,
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
):
    return api_response(200, "Analytics found", get_analytics(session, start_date, end_date))
