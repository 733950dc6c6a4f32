# backend/settings.py

"""
Roll tracker configuration.

Values come from the environment (a local `.env` is loaded by backend.db).
The auto success/failure thresholds belong to the game's rules system; the
tracker only reads them.
"""

import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

# Count fields that can be ranked as the comparison's distinguished metric
COMPARATOR_METRICS = (
    "criticals",
    "fumbles",
    "mode_count",
    "auto_success",
    "auto_failure",
    "fortune",
    "dark_deal",
)

UNBOUNDED = -1


class TrackerSettings(BaseModel):
    roll_storage: int = Field(default=50, description="Rolls kept per user (-1 = unbounded)")
    auto_success_threshold: int = Field(default=5, ge=1, le=100)
    auto_failure_threshold: int = Field(default=96, ge=1, le=100)
    comparator_metric: str = Field(default="criticals")
    count_hidden: bool = Field(default=True, description="Track blind rolls made by players")
    local_user_id: Optional[str] = Field(default=None, description="Only store rolls for this user")

    @field_validator("roll_storage")
    @classmethod
    def validate_roll_storage(cls, v):
        if v != UNBOUNDED and v < 0:
            raise ValueError("roll_storage must be -1 (unbounded) or a non-negative integer")
        return v

    @field_validator("comparator_metric")
    @classmethod
    def validate_comparator(cls, v):
        if v not in COMPARATOR_METRICS:
            raise ValueError(f"comparator_metric must be one of {', '.join(COMPARATOR_METRICS)}")
        return v


def _env_bool(name, default):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> TrackerSettings:
    return TrackerSettings(
        roll_storage=int(os.getenv("ROLL_STORAGE", "50")),
        auto_success_threshold=int(os.getenv("AUTO_SUCCESS_THRESHOLD", "5")),
        auto_failure_threshold=int(os.getenv("AUTO_FAILURE_THRESHOLD", "96")),
        comparator_metric=os.getenv("COMPARATOR_METRIC", "criticals"),
        count_hidden=_env_bool("COUNT_HIDDEN", True),
        local_user_id=os.getenv("LOCAL_USER_ID") or None,
    )
