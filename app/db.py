"""Database configuration and helpers for the weather automation backend."""

from __future__ import annotations

import logging
import os
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

DATABASE_URL = os.getenv("WEATHERAUTO_DB_URL", "sqlite:///./weatherauto.db")

engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {},
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

logger = logging.getLogger("weatherauto.db")


def get_db() -> Generator:
    """Yield a SQLAlchemy session and ensure it is closed."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db(bind=None) -> None:
    """Create database tables if they do not exist."""

    import app.db_models  # noqa: F401 - models are imported for side effects

    Base.metadata.create_all(bind=bind or engine)
    logger.debug("Tables ensured on %s", (bind or engine).url)
