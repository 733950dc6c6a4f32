# backend/roll_store.py

import logging

from backend.settings import UNBOUNDED

logger = logging.getLogger(__name__)

ROLLS_FLAG = "rolls"
EXPORT_FLAG = "export"


class RollStore:
    """
    Capacity-bounded, append-only roll history per user.

    Sequences live in the flag store under ROLLS_FLAG, oldest first. Capacity
    is read from settings on every append so a config change applies to the
    next roll.
    """

    def __init__(self, flags, settings):
        self.flags = flags
        self.settings = settings

    def get(self, user_id):
        return list(self.flags.get_flag(user_id, ROLLS_FLAG) or [])

    def append(self, user_id, record):
        """
        Adds a record to the end of the user's history.
        Returns False (and stores nothing) when the record id was already seen.
        """
        rolls = self.get(user_id)
        if any(r.get("id") == record["id"] for r in rolls):
            logger.debug("Duplicate roll %s for %s ignored", record["id"], user_id)
            return False

        capacity = self.settings.roll_storage
        if capacity != UNBOUNDED and len(rolls) >= capacity:
            # Always drops at least one, even when exactly at capacity
            evict = max(1, len(rolls) - capacity + 1)
            rolls = rolls[evict:]
            logger.debug("Evicted %d oldest rolls for %s", evict, user_id)

        rolls.append(dict(record))
        self.flags.set_flag(user_id, ROLLS_FLAG, rolls)
        return True

    def clear(self, user_id):
        self.flags.unset_flag(user_id, ROLLS_FLAG)
        self.flags.unset_flag(user_id, EXPORT_FLAG)
        logger.info("🧹 Cleared tracked rolls for %s", user_id)

    def get_export(self, user_id):
        return self.flags.get_flag(user_id, EXPORT_FLAG)

    def set_export(self, user_id, text):
        self.flags.set_flag(user_id, EXPORT_FLAG, text)

    def tracked_users(self):
        return [u for u in self.flags.users_with_flag(ROLLS_FLAG) if self.get(u)]
