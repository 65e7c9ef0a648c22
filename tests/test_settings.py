from decimal import Decimal

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session

from src.api.models import Settings
from src.api.models.settingsModel import SettingsUpdate
from src.api.services import settings_service
from src.api.services.settings_service import (
    SETTINGS_CACHE_KEY,
    get_or_create_settings_row,
    get_settings,
    invalidate_settings_cache,
    update_settings,
)
from tests.conftest import auth_headers


def count_reads(monkeypatch):
    calls = []
    original = settings_service.get_or_create_settings_row

    def counting(session):
        calls.append(1)
        return original(session)

    monkeypatch.setattr(settings_service, "get_or_create_settings_row", counting)
    return calls


def test_cold_read_creates_defaults(session, cache):
    data = get_settings(session)

    assert data["shipping_fee"] == 30000
    assert data["free_shipping_threshold"] is None
    assert data["tax_rate"] == 0
    assert data["order_expiry_minutes"] == 10
    assert cache.get(SETTINGS_CACHE_KEY) == data
    assert session.get(Settings, 1) is not None


def test_second_read_is_served_from_cache(session, monkeypatch):
    calls = count_reads(monkeypatch)

    first = get_settings(session)
    second = get_settings(session)

    assert first == second
    assert len(calls) == 1


def test_cold_read_is_one_store_read_and_one_cache_write(session, cache, monkeypatch):
    reads = count_reads(monkeypatch)
    writes = []
    original_set = cache.set

    def counting_set(key, value, ttl):
        writes.append(key)
        return original_set(key, value, ttl)

    monkeypatch.setattr(cache, "set", counting_set)

    get_settings(session)
    get_settings(session)

    assert len(reads) == 1
    assert writes == [SETTINGS_CACHE_KEY]


def test_invalidation_forces_store_read(session, monkeypatch):
    calls = count_reads(monkeypatch)

    get_settings(session)
    invalidate_settings_cache()
    get_settings(session)

    assert len(calls) == 2


def test_update_drops_cached_copy(session, store_settings, cache):
    get_settings(session)

    update_settings(session, SettingsUpdate(shipping_fee=Decimal("25000"), tax_rate=Decimal("8")))

    assert cache.get(SETTINGS_CACHE_KEY) is None
    data = get_settings(session)
    assert data["shipping_fee"] == 25000
    assert data["tax_rate"] == 8


def test_concurrent_row_creation_rereads(engine, monkeypatch):
    """The losing insert rolls back and uses the row the other request created"""
    with Session(engine) as other:
        other.add(Settings(id=1, store_name="Created elsewhere"))
        other.commit()

    with Session(engine) as session:
        real_get = session.get
        misses = []

        def first_get_misses(model, ident, **kwargs):
            if not misses:
                misses.append(1)
                return None
            return real_get(model, ident, **kwargs)

        monkeypatch.setattr(session, "get", first_get_misses)
        settings = get_or_create_settings_row(session)

    assert settings.store_name == "Created elsewhere"


def test_concurrent_creation_error_without_row_propagates(engine, monkeypatch):
    with Session(engine) as session:
        monkeypatch.setattr(session, "get", lambda model, ident, **kwargs: None)

        def failing_commit():
            raise IntegrityError("INSERT INTO settings", {}, Exception("UNIQUE constraint failed: settings.id"))

        monkeypatch.setattr(session, "commit", failing_commit)
        with pytest.raises(IntegrityError):
            get_or_create_settings_row(session)


def test_public_settings_endpoint(client, store_settings):
    response = client.get("/settings")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["storeName"] == "Fashion Store"
    assert body["data"]["shippingFee"] == 30000
    assert "orderExpiryMinutes" not in body["data"]


def test_admin_settings_update(client, admin, store_settings, cache):
    response = client.put(
        "/admin/settings",
        json={"freeShippingThreshold": 499000, "orderExpiryMinutes": 15},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["data"]["freeShippingThreshold"] == 499000
    assert cache.get(SETTINGS_CACHE_KEY) is None
    assert client.get("/settings").json()["data"]["freeShippingThreshold"] == 499000


def test_admin_settings_requires_admin(client, customer_headers):
    response = client.get("/admin/settings", headers=customer_headers)

    assert response.status_code == 403
    assert response.json() == {"success": False, "detail": "Admin access required"}
