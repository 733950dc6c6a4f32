import copy
import logging

from sqlalchemy.exc import SQLAlchemyError

from backend.db import SessionLocal
from backend.models import Player, UserFlag

logger = logging.getLogger(__name__)

FLAG_SCOPE = "roll-tracker"


class FlagStoreError(RuntimeError):
    """Raised when a flag read or write cannot reach the backing store."""


### 🚩 Per-user Flag Storage ###
class FlagStore:
    """
    Per-user key-value storage. Values must be JSON-serialisable.
    Every write is durable when the call returns.
    """

    def get_flag(self, user_id, key, default=None):
        raise NotImplementedError

    def set_flag(self, user_id, key, value):
        raise NotImplementedError

    def unset_flag(self, user_id, key):
        raise NotImplementedError

    def users_with_flag(self, key):
        raise NotImplementedError


class MemoryFlagStore(FlagStore):
    """Process-local flag store, used by tests and the offline tooling."""

    def __init__(self):
        self._flags = {}

    def get_flag(self, user_id, key, default=None):
        if (user_id, key) not in self._flags:
            return default
        return copy.deepcopy(self._flags[(user_id, key)])

    def set_flag(self, user_id, key, value):
        self._flags[(user_id, key)] = copy.deepcopy(value)

    def unset_flag(self, user_id, key):
        self._flags.pop((user_id, key), None)

    def users_with_flag(self, key):
        return [user_id for (user_id, flag_key) in self._flags if flag_key == key]


class SqlFlagStore(FlagStore):
    """Flag store backed by the `user_flags` table."""

    def __init__(self, session_factory=SessionLocal, scope=FLAG_SCOPE):
        self.session_factory = session_factory
        self.scope = scope

    def _query(self, session, user_id, key):
        return session.query(UserFlag).filter(
            UserFlag.user_id == user_id,
            UserFlag.scope == self.scope,
            UserFlag.key == key,
        )

    def get_flag(self, user_id, key, default=None):
        session = self.session_factory()
        try:
            row = self._query(session, user_id, key).first()
            return row.value if row is not None else default
        except SQLAlchemyError as e:
            logger.error("Flag read failed for %s/%s: %s", user_id, key, str(e))
            raise FlagStoreError(f"Could not read flag '{key}' for user {user_id}") from e
        finally:
            session.close()

    def set_flag(self, user_id, key, value):
        session = self.session_factory()
        try:
            row = self._query(session, user_id, key).first()
            if row is None:
                row = UserFlag(user_id=user_id, scope=self.scope, key=key)
                session.add(row)
            row.value = value
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Flag write failed for %s/%s: %s", user_id, key, str(e))
            raise FlagStoreError(f"Could not write flag '{key}' for user {user_id}") from e
        finally:
            session.close()

    def unset_flag(self, user_id, key):
        session = self.session_factory()
        try:
            self._query(session, user_id, key).delete(synchronize_session=False)
            session.commit()
        except SQLAlchemyError as e:
            session.rollback()
            logger.error("Flag unset failed for %s/%s: %s", user_id, key, str(e))
            raise FlagStoreError(f"Could not unset flag '{key}' for user {user_id}") from e
        finally:
            session.close()

    def users_with_flag(self, key):
        session = self.session_factory()
        try:
            rows = (
                session.query(UserFlag.user_id)
                .filter(UserFlag.scope == self.scope, UserFlag.key == key)
                .order_by(UserFlag.id.asc())
                .all()
            )
            return [r.user_id for r in rows]
        except SQLAlchemyError as e:
            logger.error("Flag scan failed for %s: %s", key, str(e))
            raise FlagStoreError(f"Could not list users holding flag '{key}'") from e
        finally:
            session.close()


### 🧑 Player Directory ###
def upsert_player(user_id, name=None, is_gm=False):
    """
    Records (or refreshes) a player's display name.
    """
    session = SessionLocal()
    try:
        player = session.get(Player, user_id)
        if player is None:
            player = Player(id=user_id)
            session.add(player)
        if name:
            player.name = name
        player.is_gm = bool(is_gm)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        raise FlagStoreError(f"Could not save player {user_id}") from e
    finally:
        session.close()


def get_player_name(user_id):
    session = SessionLocal()
    try:
        player = session.get(Player, user_id)
        return player.name if player else None
    except SQLAlchemyError as e:
        logger.error("Player lookup failed for %s: %s", user_id, str(e))
        raise FlagStoreError(f"Could not read player {user_id}") from e
    finally:
        session.close()
