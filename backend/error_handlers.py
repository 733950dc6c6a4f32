# backend/error_handlers.py

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from backend.utils.storage import FlagStoreError

logger = logging.getLogger(__name__)


def register_error_handlers(app):
    @app.exception_handler(FlagStoreError)
    async def handle_flag_store_error(request: Request, e: FlagStoreError):
        request_id = getattr(request.state, "request_id", None)
        logger.error("Roll storage unavailable", exc_info=e, extra={"request_id": request_id})
        return JSONResponse(
            status_code=503,
            content={"error": "Roll storage unavailable", "request_id": request_id},
        )

    @app.exception_handler(Exception)
    async def handle_exception(request: Request, e: Exception):
        request_id = getattr(request.state, "request_id", None)
        logger.error("Unhandled exception", exc_info=e, extra={"request_id": request_id})
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "request_id": request_id},
        )
