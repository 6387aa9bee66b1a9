import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from popup_pos.core.config import CORS_ORIGINS, DATABASE_URL, ENV
from popup_pos.core.database import Base, engine
from popup_pos.core.errors import register_exception_handlers
from popup_pos.core.logging_setup import configure_logging
from popup_pos.core.startup_checks import (
    ensure_migrations_applied,
    validate_database_environment,
    validate_session_secret,
)
from popup_pos.middleware.authorization_gate import AuthorizationGateMiddleware
from popup_pos.middleware.observability import ObservabilityMiddleware
import popup_pos.models  # registers every model on Base before create_all

from popup_pos.routers.auth import router as auth_router
from popup_pos.routers.org_auth import router as org_auth_router
from popup_pos.routers.public_menu import router as public_menu_router
from popup_pos.routers.orders import router as orders_router
from popup_pos.routers.admin_menu import router as admin_menu_router
from popup_pos.routers.admin_settings import router as admin_settings_router
from popup_pos.routers.admin_upload import router as admin_upload_router

configure_logging()

logger = logging.getLogger(__name__)
STARTUP_PREFIX = "[STARTUP]"
REPO_ROOT = Path(__file__).resolve().parents[1]
ALEMBIC_CONFIG_PATH = Path(
    os.getenv("ALEMBIC_CONFIG", str(REPO_ROOT / "alembic.ini"))
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    _startup_tasks()
    yield


app = FastAPI(
    title="Popup POS API",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)

# Starlette runs the last-added middleware first: observability wraps the gate.
app.add_middleware(AuthorizationGateMiddleware)
app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)


def _startup_tasks() -> None:
    try:
        logger.info("%s env=%s", STARTUP_PREFIX, ENV)
        validate_database_environment()
        validate_session_secret()
        if DATABASE_URL.startswith("sqlite"):
            Base.metadata.create_all(bind=engine)
        ensure_migrations_applied(engine=engine, alembic_config_path=ALEMBIC_CONFIG_PATH)
    except Exception:
        logger.exception("%s ERROR startup failed", STARTUP_PREFIX)
        raise


# Routers
app.include_router(auth_router)
app.include_router(org_auth_router)
app.include_router(public_menu_router)
app.include_router(orders_router)
app.include_router(admin_menu_router)
app.include_router(admin_settings_router)
app.include_router(admin_upload_router)


@app.get("/")
def root():
    return {"status": "ok"}


@app.get("/health")
def health():
    return {"status": "healthy"}
