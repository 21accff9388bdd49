import os

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.applications.routes import appeals, instructor_applications
from app.auth.routes import admin, auth, super_admin
from app.core.config import settings
from app.core.exceptions import register_exception_handlers
from app.core.log_config import RequestLoggingMiddleware, setup_logging
from app.core.rate_limit import limiter
from app.courses.routes import (
    categories,
    certificates,
    courses,
    enrollment,
    lessons,
    progress,
    reviews,
    sections,
)
from app.db.session import SessionLocal

setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title=settings.PROJECT_NAME,
    debug=settings.DEBUG,
    description=f"Backend API for the {settings.PLATFORM_NAME} course platform",
    version="1.0.0",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]
register_exception_handlers(app, debug=settings.DEBUG)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

if settings.STORAGE_BACKEND == "local":
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.UPLOAD_DIR), name="uploads")

app.include_router(auth.router, prefix=f"{settings.API_V1_PREFIX}/auth", tags=["authentication"])
app.include_router(admin.router, prefix=f"{settings.API_V1_PREFIX}/admin", tags=["admin"])
app.include_router(
    super_admin.router, prefix=f"{settings.API_V1_PREFIX}/super-admin", tags=["super-admin"]
)

app.include_router(categories.router, prefix=settings.API_V1_PREFIX, tags=["categories"])
app.include_router(courses.router, prefix=settings.API_V1_PREFIX, tags=["courses"])
app.include_router(sections.router, prefix=settings.API_V1_PREFIX, tags=["sections"])
app.include_router(lessons.router, prefix=settings.API_V1_PREFIX, tags=["lessons"])
app.include_router(enrollment.router, prefix=settings.API_V1_PREFIX, tags=["enrollments"])
app.include_router(progress.router, prefix=settings.API_V1_PREFIX, tags=["progress"])
app.include_router(certificates.router, prefix=settings.API_V1_PREFIX, tags=["certificates"])
app.include_router(reviews.router, prefix=settings.API_V1_PREFIX, tags=["reviews"])

app.include_router(
    instructor_applications.router,
    prefix=settings.API_V1_PREFIX,
    tags=["instructor-applications"],
)
app.include_router(
    instructor_applications.admin_router,
    prefix=f"{settings.API_V1_PREFIX}/admin",
    tags=["admin-instructor-applications"],
)
app.include_router(appeals.router, prefix=settings.API_V1_PREFIX, tags=["appeals"])
app.include_router(
    appeals.admin_router, prefix=f"{settings.API_V1_PREFIX}/admin", tags=["admin-appeals"]
)


@app.get("/")
async def root() -> dict[str, str]:
    return {
        "message": f"{settings.PLATFORM_NAME} Course Platform API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health_check() -> dict[str, str]:
    db_status = "unknown"

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
            db_status = "healthy"
        finally:
            db.close()
    except SQLAlchemyError as e:
        logger.error("health_check_database_failed", error=str(e))
        db_status = "unhealthy"

    overall = "healthy" if db_status == "healthy" else "degraded"
    return {"status": overall, "database": db_status}
