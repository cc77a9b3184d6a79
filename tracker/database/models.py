#!/usr/bin/env python3
"""
Database models for local persistence of positions, goals and settings
"""

import json
import logging
import os
from datetime import datetime

from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base, sessionmaker

from tracker.config import SCHEMA_VERSION, STORAGE_PREFIX
from tracker.models import DEFAULT_GOALS, ClosedPosition, Goal, Position

logger = logging.getLogger(__name__)

Base = declarative_base()


class CollectionRecord(Base):
    """One named collection, stored as a JSON document"""
    __tablename__ = 'collections'

    name = Column(String, primary_key=True)
    payload = Column(Text, nullable=False)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    def __repr__(self):
        return f"<CollectionRecord(name={self.name}, updated_at={self.updated_at})>"


class TrackerStore:
    """
    Key-value store with load/save per named collection.

    Every call succeeds or fails on its own. Saves return False instead of raising;
    loads fall back to a documented default when data is missing or corrupt.
    """

    def __init__(self, db_path: str = "data/tracker.db"):
        """Initialize database"""
        self.db_path = db_path

        # Create directory if needed
        directory = os.path.dirname(db_path)
        if db_path != ':memory:' and directory:
            os.makedirs(directory, exist_ok=True)

        self.engine = create_engine(f'sqlite:///{db_path}', echo=False)
        Base.metadata.create_all(self.engine)
        self.Session = sessionmaker(bind=self.engine)

        self.init()

    @staticmethod
    def _key(name: str) -> str:
        return STORAGE_PREFIX + name

    def init(self) -> None:
        """Stamp the schema version on first use."""
        if self._load_raw('version') is None:
            self._save_raw('version', SCHEMA_VERSION)

    def _load_raw(self, name: str) -> str | None:
        with self.Session() as session:
            record = session.get(CollectionRecord, self._key(name))
            return record.payload if record else None

    def _save_raw(self, name: str, payload: str) -> None:
        with self.Session() as session:
            record = session.get(CollectionRecord, self._key(name))
            if record is None:
                session.add(CollectionRecord(name=self._key(name), payload=payload))
            else:
                record.payload = payload
            session.commit()

    def save(self, name: str, data) -> bool:
        """Serialize data as JSON under name. Returns True on success."""
        try:
            self._save_raw(name, json.dumps(data))
            return True
        except (SQLAlchemyError, TypeError, ValueError) as e:
            logger.error(f"Storage save failed for {name}: {e}")
            return False

    def load(self, name: str, default=None):
        """Load the JSON document stored under name, or default."""
        try:
            raw = self._load_raw(name)
            return json.loads(raw) if raw else default
        except (SQLAlchemyError, ValueError) as e:
            logger.error(f"Storage load failed for {name}: {e}")
            return default

    # ------------------------------------------------------------------
    # Named collections
    # ------------------------------------------------------------------

    @property
    def schema_version(self) -> str | None:
        return self._load_raw('version')

    def save_positions(self, positions: list[Position]) -> bool:
        return self.save('positions', [p.to_dict() for p in positions])

    def load_positions(self) -> list[Position]:
        return self._load_records('positions', Position)

    def save_closed_positions(self, positions: list[ClosedPosition]) -> bool:
        return self.save('closed_positions', [p.to_dict() for p in positions])

    def load_closed_positions(self) -> list[ClosedPosition]:
        return self._load_records('closed_positions', ClosedPosition)

    def save_goals(self, goals: list[Goal]) -> bool:
        return self.save('goals', [g.to_dict() for g in goals])

    def load_goals(self) -> list[Goal]:
        goals = self._load_records('goals', Goal, default=None)
        return list(DEFAULT_GOALS) if goals is None else goals

    def save_api_key(self, key: str) -> bool:
        return self.save('api_key', (key or '').strip())

    def load_api_key(self) -> str:
        key = self.load('api_key', '')
        return key if isinstance(key, str) else ''

    def _load_records(self, name: str, model, default=()):
        data = self.load(name, None)
        if data is None:
            return list(default) if default is not None else None
        try:
            return [model.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Storage load failed for {name}: corrupt record ({e})")
            return list(default) if default is not None else None

    def clear_all(self) -> None:
        """Delete every stored collection, including the schema stamp."""
        with self.Session() as session:
            session.query(CollectionRecord).filter(
                CollectionRecord.name.startswith(STORAGE_PREFIX)
            ).delete(synchronize_session=False)
            session.commit()
        logger.info("Storage cleared")
