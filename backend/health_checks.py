# backend/health_checks.py

from sqlalchemy import text
import os, time
from backend.db import engine
from backend.settings import load_settings

def check_database():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return "ok"
    except Exception as e:
        return f"error: {str(e)}"

def check_env(required=None):
    # Only DATABASE_URL is required; missing values are reported, not fatal
    if required is None:
        required = ["DATABASE_URL"]
    missing = [var for var in required if not os.getenv(var)]
    return "ok" if not missing else {"missing": missing}

def check_settings():
    """Effective tracker settings, or the validation error that rejects them."""
    try:
        settings = load_settings()
    except ValueError as e:
        return {"error": str(e)}
    return {
        "roll_storage": settings.roll_storage,
        "auto_success_threshold": settings.auto_success_threshold,
        "auto_failure_threshold": settings.auto_failure_threshold,
        "comparator_metric": settings.comparator_metric,
        "count_hidden": settings.count_hidden,
    }

def get_app_metadata(start_time):
    uptime = int(time.time() - start_time)
    return {
        "status": "running",
        "version": os.getenv("APP_VERSION", "dev"),
        "uptime": f"{uptime}s"
    }
