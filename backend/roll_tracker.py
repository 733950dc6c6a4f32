# backend/roll_tracker.py

import logging
import threading

from backend.roll_comparison import compare_across_users
from backend.roll_stats import build_roll_record, compute_stats, empty_stats, export_text
from backend.roll_store import RollStore

logger = logging.getLogger(__name__)

# Request handlers run in a threadpool; every read-modify-write of a user's
# flags goes through this lock.
_write_lock = threading.Lock()


class RollTracker:
    """
    Entry point for renderers and event sources.

    flags:    a FlagStore (backend.utils.storage)
    settings: TrackerSettings, read on every call
    names:    callable user_id -> display name (or None)
    """

    def __init__(self, flags, settings, names=None):
        self.settings = settings
        self.store = RollStore(flags, settings)
        self.names = names or (lambda user_id: None)

    ### 📥 Ingest ###
    def should_track(self, user_id, event):
        local = self.settings.local_user_id
        if local and user_id != local:
            return False
        if not event.get("blind"):
            return True
        return self.settings.count_hidden or bool(event.get("is_gm"))

    def save_tracked_roll(self, user_id, event):
        """
        Stores a roll event for a user. Returns the stored record, or None when
        the event was filtered out or already recorded.
        """
        if not self.should_track(user_id, event):
            logger.debug("Roll %s for %s not tracked", event.get("id"), user_id)
            return None

        with _write_lock:
            rolls = self.store.get(user_id)
            previous = rolls[-1] if rolls else None
            record = build_roll_record(event, previous)
            if not self.store.append(user_id, record):
                return None

        logger.info("🎲 Tracked roll %s for %s: %s", record["id"], user_id, record["value"])
        return record

    ### 📊 Stats ###
    def calc_stats(self, user_id, rolls):
        stats = compute_stats(
            rolls,
            self.settings.auto_success_threshold,
            self.settings.auto_failure_threshold,
        )
        # Export text is cached per user on every recompute
        with _write_lock:
            self.store.set_export(user_id, export_text(rolls))
        return stats

    def prepare_roll_stats(self, user_id):
        rolls = self.store.get(user_id)
        stats = self.calc_stats(user_id, rolls) if rolls else empty_stats()
        return {
            "username": self.names(user_id),
            "user_id": user_id,
            "stats": stats,
        }

    def general_comparison(self):
        all_stats = {}
        for user_id in self.store.tracked_users():
            all_stats[user_id] = self.calc_stats(user_id, self.store.get(user_id))

        names = {user_id: self.names(user_id) for user_id in all_stats}
        return compare_across_users(all_stats, names, self.settings.comparator_metric)

    ### 🧹 Maintenance ###
    def clear_tracked_rolls(self, user_id):
        with _write_lock:
            self.store.clear(user_id)

    def export_data(self, user_id):
        return self.store.get_export(user_id)

    def get_rolls(self, user_id):
        return self.store.get(user_id)
