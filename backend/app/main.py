"""TutorBooking — FastAPI Application Entry Point."""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.config import settings
from app.middleware.auth import hash_password
from app.middleware.rate_limit import limiter
from app.routers import auth, admin, classes, notifications, tutor
from app.database import engine, Base, SessionLocal
from app.models import User

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)


def ensure_admin_account() -> None:
    """Seed the configured admin account if it does not exist yet."""
    if not settings.ADMIN_PASSWORD:
        return
    db = SessionLocal()
    try:
        existing = db.query(User).filter(User.email == settings.ADMIN_EMAIL).first()
        if existing:
            return
        db.add(User(
            email=settings.ADMIN_EMAIL,
            password_hash=hash_password(settings.ADMIN_PASSWORD),
            name=settings.ADMIN_NAME,
            role="admin",
            is_approved=True,
        ))
        db.commit()
        logger.info("Seeded admin account %s", settings.ADMIN_EMAIL)
    finally:
        db.close()


_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="TutorBooking",
    description="Tutor marketplace API: class requests, moderation, and notifications.",
    version="1.0.0",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)


# Validation
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Report our own field checks as 400 with the first offending field.

    Schema-level errors (wrong types, unknown enum values) keep the 422 body.
    """
    for error in exc.errors():
        if error.get("type") == "value_error":
            cause = (error.get("ctx") or {}).get("error")
            if cause is not None:
                detail = str(cause)
            else:
                detail = error.get("msg", "Invalid request").removeprefix("Value error, ")
            return JSONResponse(status_code=400, content={"detail": detail})
    return await request_validation_exception_handler(request, exc)


app.add_exception_handler(RequestValidationError, validation_error_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(auth.router)
app.include_router(tutor.router)
app.include_router(admin.router)
app.include_router(classes.router)
app.include_router(notifications.router)


@app.on_event("startup")
def on_startup():
    ensure_admin_account()
    if not settings.PUSH_ENABLED:
        logger.info("Push notifications disabled (set PUSH_ENABLED=true to enable)")


@app.get("/")
def root():
    return {"name": "TutorBooking API", "version": "1.0.0", "docs": "/docs"}


@app.get("/health")
def health():
    return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}
