# models.py
from datetime import datetime

from sqlalchemy import Column, String, DateTime, JSON, Integer, Boolean, UniqueConstraint

from backend.db import Base


class Player(Base):
    """A user whose rolls can be tracked. Names are refreshed from roll events."""
    __tablename__ = "players"
    __table_args__ = {'extend_existing': True}
    id = Column(String, primary_key=True)
    name = Column(String, nullable=True)
    is_gm = Column(Boolean, default=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class UserFlag(Base):
    """Per-user key-value flag (rolls, export text) scoped to a module name."""
    __tablename__ = "user_flags"
    __table_args__ = (
        UniqueConstraint("user_id", "scope", "key", name="uq_user_flag"),
        {'extend_existing': True},
    )
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    scope = Column(String, nullable=False)   # e.g., "roll-tracker"
    key = Column(String, nullable=False)     # e.g., "rolls", "export"
    value = Column(JSON)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
