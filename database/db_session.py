# database/db_session.py
"""
Database session and initialization module.
Uses SQLite (data/billing.db) unless DATABASE_URL points elsewhere.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, declarative_base

from settings import DATABASE_URL

SQLALCHEMY_DATABASE_URL = DATABASE_URL

connect_args = {"check_same_thread": False} if SQLALCHEMY_DATABASE_URL.startswith("sqlite") else {}

engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)

# Objects stay readable after commit so routes can serialize them.
SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
Base = declarative_base()


def get_db():
    """
    Dependency that provides a database session to API routes.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Creates all tables in the database according to database/models.py
    """
    import database.models  # noqa: F401  # import here to avoid circular imports

    Base.metadata.create_all(bind=engine)


def dispose_db():
    engine.dispose()
