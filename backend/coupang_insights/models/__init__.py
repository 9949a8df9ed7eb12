# Models module
from coupang_insights.models.models import Base, KeyValueEntry
from coupang_insights.models.database import create_tables, SessionLocal, engine
from coupang_insights.models.store import KeyValueStore, InMemoryKeyValueStore, SQLAlchemyKeyValueStore

__all__ = [
    "Base", "KeyValueEntry",
    "create_tables", "SessionLocal", "engine",
    "KeyValueStore", "InMemoryKeyValueStore", "SQLAlchemyKeyValueStore"
]
