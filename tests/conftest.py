import os

import pytest
from sqlalchemy.exc import OperationalError

# backend.db builds its engine at import time, so the test database has to be
# chosen before any test module is collected.
os.environ.setdefault("DATABASE_URL", "sqlite:///./test_rolls.db")
os.environ.setdefault("API_KEY", "devkey")


class BrokenSession:
    """Session stand-in whose every query fails as if the database were gone."""

    instances = []

    def __init__(self):
        self.rolled_back = False
        self.closed = False
        BrokenSession.instances.append(self)

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is gone"))

    query = _fail
    get = _fail

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


@pytest.fixture
def broken_session():
    BrokenSession.instances.clear()
    yield BrokenSession
    BrokenSession.instances.clear()
