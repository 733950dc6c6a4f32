# db.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base, Session
from dotenv import load_dotenv
import os as _os

# When running inside a container, avoid loading the repository `.env` file.
# Loading it at import-time can override platform provided env vars.
if not _os.path.exists("/.dockerenv"):
    load_dotenv()

DATABASE_URL = _os.getenv("DATABASE_URL", "sqlite:///local.db")

engine = create_engine(DATABASE_URL)
SessionLocal = sessionmaker(bind=engine)
Base = declarative_base()


def init_db():
    from backend.models import Player, UserFlag

    Base.metadata.create_all(bind=engine)


def get_db():
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()
