"""
Schema migration for the candidate store.

Run once before starting the API:

    python migrate.py
"""

import logging

from config import DATABASE_URL, LOG_LEVEL
from database import Database

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def main():
    db = Database(DATABASE_URL, minconn=1, maxconn=1)
    try:
        db.init_database()
    finally:
        db.close()
    logger.info("Migration finished")


if __name__ == "__main__":
    main()
