from fastapi import APIRouter

from src.api.core.dependencies import GetSession
from src.api.core.response import api_response
from src.api.models.settingsModel import PublicSettingsRead
from src.api.services.settings_service import get_settings

router = APIRouter(prefix="/settings", tags=["Settings"])


# ✅ READ (public subset)
@router.get("")
def read_public_settings(session: GetSession):
    settings = get_settings(session)
    return api_response(200, "Settings found", PublicSettingsRead.model_validate(settings))
