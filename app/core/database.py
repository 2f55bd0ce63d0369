"""
Database configuration and session management for SQLAlchemy.
"""

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker, declarative_base
from app.core.config import DATABASE_URL

# Engine & Session
connect_args = {"check_same_thread": False} if DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(
    autocommit=False, autoflush=False, expire_on_commit=False, bind=engine
)

# Declarative Base
Base = declarative_base()

# Import all models to register them with the Base metadata
import app.profiles.models  # noqa: F401,E402
import app.moods.models  # noqa: F401,E402
import app.journals.models  # noqa: F401,E402
import app.therapists.models  # noqa: F401,E402
import app.appointments.models  # noqa: F401,E402
import app.gamification.models  # noqa: F401,E402
import app.moderation.models  # noqa: F401,E402


# Dependency for FastAPI Routes
def get_db():
    """
    Yields a database session for use in FastAPI dependency injection.
    Ensures the session is closed after the request lifecycle.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def two_phase_update(db: Session, instance):
    """
    Applies the changes made inside the block to `instance`, then commits and
    refreshes it. If anything fails the session is rolled back, which expires
    the instance so its next read reflects the stored row again.

    Args:
        db (Session): SQLAlchemy session.
        instance: ORM object being mutated.

    Yields:
        The same instance, for in-place mutation.
    """
    try:
        yield instance
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(instance)
