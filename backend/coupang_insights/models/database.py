"""
Database connection and session management.
"""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from coupang_insights.config.settings import settings
from coupang_insights.models.models import Base

# Determine if using SQLite
is_sqlite = settings.DATABASE_URL.startswith("sqlite")

# Create engine with appropriate settings
connect_args = {"check_same_thread": False} if is_sqlite else {}
engine = create_engine(
    settings.DATABASE_URL,
    pool_pre_ping=not is_sqlite,
    echo=False,
    connect_args=connect_args
)

# Session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_tables():
    """Create all database tables."""
    Base.metadata.create_all(bind=engine)
