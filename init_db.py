# init_db.py
import logging

from database.db_session import init_db
from settings import DATABASE_URL, LOG_LEVEL

if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL)
    init_db()
    logging.getLogger("init_db").info("DB tables created at %s", DATABASE_URL)
