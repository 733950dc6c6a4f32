import logging
import os
import time
import uuid
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.db import init_db
from backend.logging_config import setup_logging
from backend.health_checks import check_database, check_env, check_settings, get_app_metadata
from backend.error_handlers import register_error_handlers


# Load .env vars
load_dotenv()

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

# Track uptime
start_time = time.time()

# Get API key from env
API_KEY = os.getenv("API_KEY", "default-dev-key")


# Lifespan context for startup/shutdown
@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        init_db()
        logger.info("✅ Database initialized")
    except Exception as e:
        logger.warning(f"⚠️ DB init warning: {e}")
    logger.info("🚀 Roll tracker starting")
    yield
    logger.info("🛑 Roll tracker shutting down")


application = FastAPI(
    title="Roll Tracker API",
    description="Per-player d100 roll tracking and statistics",
    version="1.0.0",
    lifespan=lifespan,
)


application.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Middleware to attach request_id and check auth
@application.middleware("http")
async def add_request_id_and_auth(request: Request, call_next):
    request_id = str(uuid.uuid4())
    request.state.request_id = request_id

    if request.url.path.startswith("/api/") and not any(
        x in request.url.path for x in ["/api/docs", "/api/openapi", "/api/health"]
    ):
        provided_key = request.headers.get("X-API-Key")
        if not provided_key or provided_key != API_KEY:
            return JSONResponse(
                status_code=403,
                content={"error": "Invalid or missing X-API-Key", "request_id": request_id},
            )

    logger.info(f"{request.method} {request.url.path}", extra={"request_id": request_id})

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@application.get("/health")
async def health_check():
    """Simple health check."""
    return {
        "status": "ok",
        "uptime_seconds": time.time() - start_time,
        "timestamp": time.time(),
    }


@application.get("/api/health")
async def api_health_check():
    """Detailed health check with DB and env checks."""
    db_status = check_database()
    settings_status = check_settings()
    healthy = db_status == "ok" and "error" not in settings_status
    return {
        "status": "ok" if healthy else "degraded",
        "database": db_status,
        "environment": check_env(),
        "settings": settings_status,
        "metadata": get_app_metadata(start_time),
        "timestamp": time.time(),
    }


# Register routers (import after app creation to avoid circular imports)
from routes.roll_tracker_fastapi import roll_tracker_blp, comparison_blp

application.include_router(roll_tracker_blp, prefix="/api")
application.include_router(comparison_blp, prefix="/api")


@application.get("/")
async def root():
    """API root."""
    return {
        "message": "Roll Tracker API",
        "docs": "/docs",
        "health": "/health",
        "comparison": "/api/comparison/rolls",
    }


register_error_handlers(application)

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(application, host="0.0.0.0", port=8000)
