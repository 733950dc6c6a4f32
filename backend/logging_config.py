# backend/logging_config.py

import logging
import sys
import json

# Custom formatter that outputs logs as structured JSON
class JsonFormatter(logging.Formatter):
    def format(self, record):
        payload = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
        }

        # Optional context injected via `extra=`
        for field in ("request_id", "user_id"):
            if hasattr(record, field):
                payload[field] = getattr(record, field)

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(payload)

# Configure the root logger with our JSON formatter
def setup_logging(level=logging.INFO):
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter())

    root = logging.getLogger()
    root.setLevel(level)

    # Clear any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)
