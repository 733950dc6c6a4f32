# main.py — Roll Tracker Entry Point

from dotenv import load_dotenv
from backend.db import init_db
from backend.settings import load_settings

if __name__ == "__main__":
    print("🎲 Roll tracker is booting up...")

    # ✅ Load environment variables
    load_dotenv()

    # ✅ Initialize database tables
    init_db()

    settings = load_settings()
    print(f"Keeping {settings.roll_storage} rolls per user, comparing by {settings.comparator_metric}.")
