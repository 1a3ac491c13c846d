# src/app.py
import logging
import os
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from config.db import engine
from config.settings import APP_ENV, CORS_ORIGINS, LOG_LEVEL
from config.upload_config import UploadConfig
from model import load_all_models
from model.base import Base
from routes.explore import router as explore_router
from routes.feedback import router as feedback_router
from routes.followers import router as followers_router
from routes.media import router as media_router
from routes.notifications import router as notifications_router
from routes.regions import router as regions_router
from routes.reviews import router as reviews_router
from routes.social.routes import router as social_router
from routes.user import router as user_router
from routes.webhooks import router as webhooks_router

load_all_models()

logger = logging.getLogger(__name__)


app = FastAPI(title="Glooba API", version="1.0.0")

# Serve locally stored uploads (development storage backend)
storage_config = UploadConfig.get_storage_config()
if storage_config["storage_type"] != "s3":
    uploads_dir = Path(storage_config["local_upload_dir"])
    uploads_dir.mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=str(uploads_dir)), name="uploads")


def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    openapi_schema = get_openapi(
        title="Glooba API",
        version="1.0.0",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {}).setdefault("securitySchemes", {})["BearerAuth"] = {
        "type": "http",
        "scheme": "bearer",
        "bearerFormat": "JWT",
    }
    app.openapi_schema = openapi_schema
    return app.openapi_schema
app.openapi = custom_openapi

logging.basicConfig(level=getattr(logging, LOG_LEVEL.upper(), logging.INFO))
logger.info("Glooba API starting (env=%s)…", APP_ENV)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=True,
)

app.include_router(social_router)
# Before the profile router so /v1/users/suggestions is not read as a username
app.include_router(followers_router)
app.include_router(user_router)
app.include_router(reviews_router)
app.include_router(explore_router)
app.include_router(notifications_router)
app.include_router(feedback_router)
app.include_router(regions_router)
app.include_router(media_router)
app.include_router(webhooks_router)


# --- Exception handlers and security headers ---
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
    return JSONResponse(status_code=422, content={
        "code": "validation_error",
        "message": "Invalid request",
        "errors": exc.errors(),
    })

@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    # 4xx/5xx raised intentionally in code
    level = logging.WARNING if 400 <= exc.status_code < 500 else logging.ERROR
    logger.log(level, "HTTPException %s on %s %s: %s", exc.status_code, request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"code": "http_error", "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )

@app.middleware("http")
async def add_security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.setdefault("X-Content-Type-Options", "nosniff")
    response.headers.setdefault("X-Frame-Options", "DENY")
    response.headers.setdefault("Referrer-Policy", "strict-origin-when-cross-origin")
    return response


@app.on_event("startup")
def _startup():
    # Optionally ensure schema in dev if explicitly enabled (prefer Alembic normally)
    if os.getenv("GLOOBA_DEV_CREATE_SCHEMA") == "1":
        Base.metadata.create_all(engine)
        logger.info("DB metadata ensured via SQLAlchemy (dev mode).")
    else:
        logger.info("Skipping Base.metadata.create_all(); use Alembic migrations for schema.")


@app.get("/health")
def health():
    return {"ok": True}
