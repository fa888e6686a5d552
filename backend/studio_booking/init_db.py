# backend/studio_booking/init_db.py
"""Create all tables on the configured database (development and tests)."""

import logging

from . import models  # noqa: F401  registers mappers on Base.metadata
from .database import Base, engine

logger = logging.getLogger(__name__)


def init_db() -> None:
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    logger.info("Tables created successfully")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
