import os

# must be set before src.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "memory://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("VNPAY_TMN_CODE", "TESTTMN")
os.environ.setdefault("VNPAY_HASH_SECRET", "TESTHASHSECRET")
os.environ.setdefault("FRONTEND_URL", "http://frontend.test")

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

import src.api.models  # noqa: F401
from src.main import app
from src.lib.cache import MemoryCache, set_cache
from src.lib.db_con import get_session
from src.api.core.payment import PaymentGatewayFactory
from src.api.core.security import create_access_token, hash_password, user_token_data
from src.api.models import (
    Address,
    Category,
    Coupon,
    CouponType,
    Product,
    ProductVariant,
    Settings,
    User,
    UserRole,
)

PASSWORD = "secret123"


@pytest.fixture(name="engine")
def engine_fixture():
    """Fresh in-memory database per test, shared by every connection"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(name="session")
def session_fixture(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture(name="cache", autouse=True)
def cache_fixture():
    cache = MemoryCache()
    set_cache(cache)
    PaymentGatewayFactory.clear_instances()
    yield cache
    set_cache(None)
    PaymentGatewayFactory.clear_instances()


@pytest.fixture(name="client")
def client_fixture(session):
    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


def _create_user(session, name, email, role=UserRole.CUSTOMER, is_active=True):
    user = User(
        name=name,
        email=email,
        password=hash_password(PASSWORD),
        role=role,
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user_token_data(user))}"}


@pytest.fixture
def customer(session):
    return _create_user(session, "Nguyen Van A", "customer@example.com")


@pytest.fixture
def admin(session):
    return _create_user(session, "Store Admin", "admin@example.com", role=UserRole.ADMIN)


@pytest.fixture
def customer_headers(customer):
    return auth_headers(customer)


@pytest.fixture
def admin_headers(admin):
    return auth_headers(admin)


@pytest.fixture
def store_settings(session):
    """Default settings row: 30.000 shipping, no free threshold, no tax"""
    settings = Settings(id=1)
    session.add(settings)
    session.commit()
    session.refresh(settings)
    return settings


@pytest.fixture
def category(session):
    category = Category(name="Shirts", slug="shirts")
    session.add(category)
    session.commit()
    session.refresh(category)
    return category


@pytest.fixture
def product(session, category):
    product = Product(
        name="Linen Shirt",
        slug="linen-shirt",
        price=Decimal("500000"),
        sku="LS-001",
        quantity=10,
        images=["/images/linen-shirt.jpg"],
        brand="Acme",
        category_id=category.id,
        variants=[
            ProductVariant(name="M / White", sku="LS-001-M-W", quantity=5, size="M", color="White"),
            ProductVariant(
                name="L / Black",
                sku="LS-001-L-B",
                price=Decimal("550000"),
                quantity=2,
                size="L",
                color="Black",
            ),
        ],
    )
    session.add(product)
    session.commit()
    session.refresh(product)
    return product


@pytest.fixture
def address(session, customer):
    address = Address(
        user_id=customer.id,
        full_name="Nguyen Van A",
        phone="0901234567",
        street="12 Le Loi",
        city="Ho Chi Minh",
        is_default=True,
    )
    session.add(address)
    session.commit()
    session.refresh(address)
    return address


def make_coupon(session, code="SAVE10", **kwargs):
    now = datetime.now(timezone.utc)
    values = {
        "code": code,
        "type": CouponType.PERCENTAGE,
        "value": Decimal("10"),
        "valid_from": now - timedelta(days=1),
        "valid_until": now + timedelta(days=30),
        "active": True,
    }
    values.update(kwargs)
    coupon = Coupon(**values)
    session.add(coupon)
    session.commit()
    session.refresh(coupon)
    return coupon


@pytest.fixture
def coupon(session):
    return make_coupon(session)
