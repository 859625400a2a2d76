import logging
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from string_analyzer.database import create_db_engine, create_session_factory, init_db
from string_analyzer.errors import ConflictError, NotFoundError
from string_analyzer.models import StringAnalysis
from string_analyzer.schemas import AnalysisProperties, StringRecord
from string_analyzer.services.analyzer import analyze_string, compute_sha256

logger = logging.getLogger(__name__)


def _to_record(row: StringAnalysis) -> StringRecord:
    created_at = row.created_at
    # SQLite hands back naive datetimes; everything is stored as UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)

    return StringRecord(
        id=row.id,
        value=row.value,
        properties=AnalysisProperties(
            length=row.length,
            is_palindrome=row.is_palindrome,
            unique_characters=row.unique_characters,
            word_count=row.word_count,
            sha256_hash=row.sha256_hash,
            character_frequency_map=row.character_frequency_map,
        ),
        created_at=created_at,
    )


class StringStore:
    """
    Content-addressed store of analyzed strings.

    Records are keyed by the SHA-256 of their value, so the store holds at
    most one record per distinct string. Every operation runs under one
    lock and one transaction: readers never see a half-applied insert or
    delete, and a failed operation leaves the store untouched.
    """

    def __init__(self, database_url: str = "sqlite://"):
        self.engine = create_db_engine(database_url)
        self._session_factory = create_session_factory(self.engine)
        self._lock = threading.RLock()
        init_db(self.engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        with self._lock:
            db = self._session_factory()
            try:
                yield db
                db.commit()
            except Exception:
                db.rollback()
                raise
            finally:
                db.close()

    @staticmethod
    def _find(db: Session, string_id: str) -> Optional[StringAnalysis]:
        return db.execute(
            select(StringAnalysis).where(StringAnalysis.id == string_id)
        ).scalar_one_or_none()

    def insert(self, value: str) -> StringRecord:
        """Analyze and store a string. Raises ConflictError if it is already stored."""
        string_id = compute_sha256(value)
        with self._session() as db:
            if self._find(db, string_id) is not None:
                raise ConflictError("String already exists in the system")

            properties = analyze_string(value)
            row = StringAnalysis(
                id=string_id,
                value=value,
                length=properties.length,
                is_palindrome=properties.is_palindrome,
                unique_characters=properties.unique_characters,
                word_count=properties.word_count,
                sha256_hash=properties.sha256_hash,
                character_frequency_map=properties.character_frequency_map,
                created_at=datetime.now(timezone.utc),
            )
            db.add(row)
            db.flush()
            record = _to_record(row)

        logger.info(f"Stored string {string_id[:12]}")
        return record

    def get(self, value: str) -> Optional[StringRecord]:
        """Get a record by the original string"""
        return self.get_by_id(compute_sha256(value))

    def get_by_id(self, string_id: str) -> Optional[StringRecord]:
        """Get a record by its SHA-256 id"""
        with self._session() as db:
            row = self._find(db, string_id)
            return _to_record(row) if row is not None else None

    def delete(self, value: str) -> None:
        """Delete a record by the original string. Raises NotFoundError if absent."""
        string_id = compute_sha256(value)
        with self._session() as db:
            row = self._find(db, string_id)
            if row is None:
                raise NotFoundError("String does not exist in the system")
            db.delete(row)

        logger.info(f"Deleted string {string_id[:12]}")

    def enumerate(self) -> List[StringRecord]:
        """All records in insertion order"""
        with self._session() as db:
            rows = db.execute(select(StringAnalysis).order_by(StringAnalysis.seq)).scalars().all()
            return [_to_record(row) for row in rows]

    def count(self) -> int:
        with self._session() as db:
            return db.execute(select(func.count()).select_from(StringAnalysis)).scalar_one()

    def close(self) -> None:
        self.engine.dispose()
