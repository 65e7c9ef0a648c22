import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import CORS_ORIGINS, LOG_LEVEL
from src.api.core.middleware import register_exception_handlers
from .lib.db_con import create_db_and_tables
from src.api.routers.admin import (
    analyticsRoute as adminAnalyticsRoute,
    announcementRoute as adminAnnouncementRoute,
    categoryRoute as adminCategoryRoute,
    couponRoute as adminCouponRoute,
    customerRoute as adminCustomerRoute,
    orderRoute as adminOrderRoute,
    productRoute as adminProductRoute,
    settingsRoute as adminSettingsRoute,
)
from src.api.routers import (
    # user
    authRoute,
    profileRoute,
    addressRoute,
    # catalog
    categoryRoute,
    productRoute,
    # store
    settingsRoute,
    announcementRoute,
    couponRoute,
    # shopping
    cartRoute,
    wishlistRoute,
    orderRoute,
    paymentRoute,
    # contact
    contactRoute,
)

logger = logging.getLogger(__name__)


# App lifespan: runs once on startup and once on shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    # --- Runs once on startup ---
    logging.basicConfig(
        level=LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger.info("Application starting up")
    create_db_and_tables()

    yield

    # --- Runs once on shutdown ---
    logger.info("Application shutting down")


app = FastAPI(lifespan=lifespan, root_path="/api")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
register_exception_handlers(app)


@app.get("/")
def root():
    return {"message": "Fashion Store API"}


# Auth / profile
app.include_router(authRoute.router)
app.include_router(profileRoute.router)
app.include_router(addressRoute.router)
# Catalog
app.include_router(categoryRoute.router)
app.include_router(productRoute.router)
# Store
app.include_router(settingsRoute.router)
app.include_router(announcementRoute.router)
app.include_router(couponRoute.router)
# Cart / wishlist / orders
app.include_router(cartRoute.router)
app.include_router(wishlistRoute.router)
app.include_router(orderRoute.router)
app.include_router(paymentRoute.router)
# Contact
app.include_router(contactRoute.router)
# Admin
app.include_router(adminProductRoute.router)
app.include_router(adminCategoryRoute.router)
app.include_router(adminCouponRoute.router)
app.include_router(adminOrderRoute.router)
app.include_router(adminCustomerRoute.router)
app.include_router(adminAnnouncementRoute.router)
app.include_router(adminSettingsRoute.router)
app.include_router(adminAnalyticsRoute.router)
