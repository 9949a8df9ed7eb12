"""
SQLAlchemy Database Models for the record store.

Tables:
- kv_entries: Durable key-value pairs holding the persisted record sets
  (sales records, product master, inbound schedule) as JSON documents
"""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class KeyValueEntry(Base):
    """
    One persisted value.
    Values are replaced wholesale on every write, never patched.
    """
    __tablename__ = "kv_entries"
    
    key = Column(String(100), primary_key=True)
    value = Column(JSON, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
