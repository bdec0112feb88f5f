import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from smartops.core.config import CORS_ALLOW_ORIGIN_REGEX, CORS_ORIGINS, DATABASE_URL, ENV
from smartops.core.database import Base, engine, get_db
from smartops.core.errors import register_exception_handlers
from smartops.core.logging_setup import configure_logging
from smartops.core.startup_checks import (
    apply_migrations,
    ensure_migrations_applied,
    stamp_unversioned_schema,
    validate_database_environment,
    validate_security_settings,
)
from smartops.middleware.observability import ObservabilityMiddleware
from smartops.models import Business, Customer, InventoryItem, Sale, User  # registers every model before create_all
from smartops.routers.auth import router as auth_router
from smartops.routers.business import router as business_router, settings_router
from smartops.routers.customers import router as customers_router
from smartops.routers.dashboard import router as dashboard_router
from smartops.routers.internal_metrics import router as internal_metrics_router
from smartops.routers.inventory import router as inventory_router
from smartops.routers.notifications import router as notifications_router
from smartops.routers.reports import router as reports_router
from smartops.routers.sales import router as sales_router
from smartops.routers.users import router as users_router

API_VERSION = "1.0.0"

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)


def _startup_tasks() -> None:
    try:
        validate_security_settings()
        validate_database_environment()
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
            stamp_unversioned_schema(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
        apply_migrations(alembic_config_path=ALEMBIC_CONFIG_PATH)
        ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise
    logger.info("%s ready env=%s", STARTUP_PREFIX, ENV)


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield
    engine.dispose()
    logger.info("%s database connections released", STARTUP_PREFIX)


app = FastAPI(
    title="SmartOps API",
    version=API_VERSION,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_origin_regex=CORS_ALLOW_ORIGIN_REGEX,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ObservabilityMiddleware)
register_exception_handlers(app)

# Routers
app.include_router(auth_router)
app.include_router(business_router)
app.include_router(settings_router)
app.include_router(users_router)
app.include_router(inventory_router)
app.include_router(sales_router)
app.include_router(customers_router)
app.include_router(notifications_router)
app.include_router(reports_router)
app.include_router(dashboard_router)
app.include_router(internal_metrics_router)


@app.get("/")
def root():
    return {"name": "SmartOps API", "version": API_VERSION, "status": "ok"}


@app.get("/api")
def api_info():
    return {
        "name": "SmartOps API",
        "version": API_VERSION,
        "endpoints": [
            "/api/auth",
            "/api/business",
            "/api/users",
            "/api/inventory",
            "/api/sales",
            "/api/customers",
            "/api/notifications",
            "/api/reports",
            "/api/dashboard/stats",
            "/api/analytics",
            "/api/health",
        ],
    }


@app.get("/api/health")
def health(db: Session = Depends(get_db)):
    return {
        "status": "OK",
        "message": "SmartOps API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": {
            "businesses": db.query(Business).count(),
            "users": db.query(User).count(),
            "inventory": db.query(InventoryItem).count(),
            "sales": db.query(Sale).count(),
            "customers": db.query(Customer).count(),
        },
    }
