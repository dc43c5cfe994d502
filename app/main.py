"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Middleware and router registration.
Configures logging, CORS, Axiom request logging, the local uploads mount,
health check, and the auth/profile/staff/admin routers under /api/v1.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.database import dispose_engine
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.middleware.error_handlers import register_exception_handlers
from app.services.storage_service import storage_service

logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """앱 수명 주기 — Start-up banner and connection pool disposal on shutdown."""
    logger.info(
        "%s starting (storage: %s, timezone: %s)",
        settings.APP_NAME,
        "local" if storage_service.is_local else "s3",
        settings.TIMEZONE,
    )
    yield
    await dispose_engine()


app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

register_exception_handlers(app)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 로컬 저장 모드 — Serve uploaded files when S3 is not configured
if storage_service.is_local:
    uploads_dir: Path = storage_service.uploads_dir
    uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=uploads_dir), name="uploads")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api.auth import router as auth_router  # noqa: E402
from app.api.profile import router as profile_router  # noqa: E402
from app.api.staff import staff_router  # noqa: E402
from app.api.admin import admin_router  # noqa: E402

app.include_router(auth_router, prefix="/api/v1/auth", tags=["Auth"])
app.include_router(profile_router, prefix="/api/v1/profile", tags=["Profile"])
app.include_router(staff_router, prefix="/api/v1/staff")
app.include_router(admin_router, prefix="/api/v1/admin")
