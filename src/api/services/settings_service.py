# src/api/services/settings_service.py
"""
Store-wide settings: one row with a fixed id, read through the cache.

update_settings() is the only write path and always drops the cached copy.
"""
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.api.core.decimal_formatter import to_number
from src.api.core.operation import updateOp
from src.api.models.settingsModel import Settings, SettingsUpdate
from src.lib.cache import get_cache

logger = logging.getLogger(__name__)

SETTINGS_ID = 1
SETTINGS_CACHE_KEY = "app:settings"
SETTINGS_CACHE_TTL = 300

NUMERIC_FIELDS = ("shipping_fee", "free_shipping_threshold", "tax_rate")


def get_or_create_settings_row(session: Session) -> Settings:
    settings = session.get(Settings, SETTINGS_ID)
    if settings is not None:
        return settings

    settings = Settings(id=SETTINGS_ID)
    session.add(settings)
    try:
        session.commit()
    except IntegrityError:
        # another request created the row first
        session.rollback()
        logger.info("Settings row created concurrently, re-reading")
        settings = session.get(Settings, SETTINGS_ID)
        if settings is None:
            raise
        return settings

    session.refresh(settings)
    logger.info("Default settings row created")
    return settings


def serialize_settings(settings: Settings) -> dict:
    data = settings.model_dump(exclude={"id", "created_at", "updated_at"})
    for field in NUMERIC_FIELDS:
        data[field] = to_number(data[field])
    return data


def get_settings(session: Session) -> dict:
    cache = get_cache()
    cached = cache.get(SETTINGS_CACHE_KEY)
    if cached is not None:
        return cached

    data = serialize_settings(get_or_create_settings_row(session))
    cache.set(SETTINGS_CACHE_KEY, data, SETTINGS_CACHE_TTL)
    return data


def invalidate_settings_cache() -> None:
    get_cache().delete(SETTINGS_CACHE_KEY)


def update_settings(session: Session, request: SettingsUpdate) -> dict:
    settings = get_or_create_settings_row(session)
    updateOp(settings, request, session)
    session.commit()
    session.refresh(settings)
    invalidate_settings_cache()
    return serialize_settings(settings)
