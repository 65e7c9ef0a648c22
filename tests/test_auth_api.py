from datetime import timedelta

import pytest

from src.api.core import email_service
from src.api.core.security import (
    AUTH_COOKIE_NAME,
    create_access_token,
    create_reset_token,
    decode_reset_token,
    verify_password,
)
from src.api.models import User
from tests.conftest import PASSWORD, _create_user


def test_register(client, session):
    response = client.post(
        "/auth/register",
        json={"name": "Tran Thi B", "email": "Tran@Example.com", "password": "hunter22"},
    )

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["email"] == "tran@example.com"
    assert data["role"] == "CUSTOMER"
    assert "password" not in data
    assert data["isActive"] is True


def test_register_duplicate_email(client, customer):
    response = client.post(
        "/auth/register",
        json={"name": "Someone", "email": "CUSTOMER@example.com", "password": "hunter22"},
    )

    assert response.status_code == 400
    assert response.json()["detail"] == "Email is already registered"


def test_register_validation(client):
    response = client.post("/auth/register", json={"name": "X", "email": "not-an-email", "password": "1"})

    assert response.status_code == 400
    fields = {e["field"] for e in response.json()["errors"]}
    assert {"name", "email", "password"} <= fields


def test_signin_sets_cookie(client, customer):
    response = client.post("/auth/signin", json={"email": customer.email, "password": PASSWORD})

    assert response.status_code == 200
    body = response.json()
    assert body["data"]["user"]["id"] == customer.id
    assert body["data"]["token"]
    assert response.cookies.get(AUTH_COOKIE_NAME) == body["data"]["token"]
    assert "httponly" in response.headers["set-cookie"].lower()


def test_cookie_authenticates(client, customer):
    token = client.post("/auth/signin", json={"email": customer.email, "password": PASSWORD}).json()["data"]["token"]
    client.cookies.set(AUTH_COOKIE_NAME, token)

    response = client.get("/auth/me")

    assert response.status_code == 200
    assert response.json()["data"]["email"] == customer.email


def test_signin_wrong_password(client, customer):
    response = client.post("/auth/signin", json={"email": customer.email, "password": "wrong"})

    assert response.status_code == 401
    assert response.json() == {"success": False, "detail": "Invalid email or password"}


def test_signin_disabled_account(client, session):
    user = _create_user(session, "Blocked", "blocked@example.com", is_active=False)

    response = client.post("/auth/signin", json={"email": user.email, "password": PASSWORD})

    assert response.status_code == 403


def test_me_requires_token(client):
    response = client.get("/auth/me")

    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


def test_expired_token(client, customer):
    token = create_access_token({"id": customer.id, "role": "CUSTOMER"}, expires=timedelta(seconds=-1))

    response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_logout_clears_cookie(client):
    response = client.post("/auth/logout")

    assert response.status_code == 200
    assert f'{AUTH_COOKIE_NAME}=""' in response.headers["set-cookie"]


def test_forgot_password_does_not_reveal_accounts(client, customer, monkeypatch):
    sent = []
    monkeypatch.setattr(
        "src.api.routers.authRoute.send_password_reset_email",
        lambda email, url, name: sent.append((email, url)),
    )

    known = client.post("/auth/forgot-password", json={"email": customer.email})
    unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

    assert known.status_code == unknown.status_code == 200
    assert known.json()["detail"] == unknown.json()["detail"]
    assert len(sent) == 1
    assert sent[0][1].startswith("http://frontend.test/auth/reset-password?token=")


def test_forgot_password_survives_smtp_failure(client, customer, monkeypatch):
    def broken(*args):
        raise OSError("connection refused")

    monkeypatch.setattr("src.api.routers.authRoute.send_password_reset_email", broken)

    assert client.post("/auth/forgot-password", json={"email": customer.email}).status_code == 200


def test_reset_password(client, session, customer):
    token = create_reset_token(customer)

    response = client.post("/auth/reset-password", json={"token": token, "password": "brand-new"})

    assert response.status_code == 200
    session.refresh(customer)
    assert verify_password("brand-new", customer.password)


def test_reset_token_is_not_an_access_token(client, customer):
    token = create_reset_token(customer)

    assert decode_reset_token(token)["email"] == customer.email
    assert client.get("/auth/me", headers={"Authorization": f"Bearer {token}"}).status_code == 401


def test_access_token_cannot_reset(client, customer, customer_headers):
    token = customer_headers["Authorization"].split(" ", 1)[1]

    response = client.post("/auth/reset-password", json={"token": token, "password": "brand-new"})

    assert response.status_code == 400


def test_reset_token_for_changed_email(client, session, customer):
    token = create_reset_token(customer)
    customer.email = "changed@example.com"
    session.add(customer)
    session.commit()

    response = client.post("/auth/reset-password", json={"token": token, "password": "brand-new"})

    assert response.status_code == 400


def test_change_password(client, session, customer, customer_headers):
    response = client.put(
        "/profile/password",
        json={"currentPassword": PASSWORD, "newPassword": "another-one"},
        headers=customer_headers,
    )

    assert response.status_code == 200
    user = session.get(User, customer.id)
    session.refresh(user)
    assert verify_password("another-one", user.password)


def test_missing_smtp_config_raises(monkeypatch):
    monkeypatch.setattr(email_service, "SMTP_EMAIL", None)
    monkeypatch.setattr(email_service, "SMTP_PASSWORD", None)

    with pytest.raises(ValueError, match="SMTP_EMAIL"):
        email_service.send_password_reset_email("to@example.com", "http://frontend.test/reset")
