from fastapi import APIRouter

from src.api.core.dependencies import GetSession, requireAdmin
from src.api.core.response import api_response
from src.api.models.settingsModel import SettingsRead, SettingsUpdate
from src.api.services.settings_service import get_settings, update_settings

router = APIRouter(prefix="/admin/settings", tags=["Admin Settings"])


# ✅ READ
@router.get("")
def read_settings(admin: requireAdmin, session: GetSession):
    return api_response(200, "Settings found", SettingsRead.model_validate(get_settings(session)))


# ✅ UPDATE
@router.put("")
def save_settings(request: SettingsUpdate, admin: requireAdmin, session: GetSession):
    settings = update_settings(session, request)
    return api_response(200, "Settings updated successfully", SettingsRead.model_validate(settings))
