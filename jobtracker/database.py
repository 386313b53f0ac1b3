"""
Database schema and connection management.

Uses SQLite with SQLAlchemy for persistent job storage.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine, Column, Integer, String, DateTime
from sqlalchemy.orm import declarative_base, sessionmaker

from .errors import NotFoundError, ValidationError
from .logger import StructuredLogger, get_logger
from .models import Job
from .schema import validate_job

Base = declarative_base()


class JobRecord(Base):
    """Job row model."""

    __tablename__ = "jobs"
    # AUTOINCREMENT keeps SQLite from reissuing the id of a deleted max row
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def to_job(self) -> Job:
        return Job(
            id=self.id,
            title=self.title,
            description=self.description,
            created_at=self.created_at,
        )


def _engine(db_path: Path):
    return create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},
    )


def init_database(db_path: Path) -> None:
    """
    Initialize database and create tables.

    Args:
        db_path: Path to SQLite database file
    """
    db_path.parent.mkdir(parents=True, exist_ok=True)
    engine = _engine(db_path)
    Base.metadata.create_all(engine)
    engine.dispose()


def get_session(db_path: Path):
    """
    Get database session.

    Args:
        db_path: Path to SQLite database file

    Returns:
        SQLAlchemy session
    """
    engine = _engine(db_path)
    Session = sessionmaker(bind=engine)
    return Session()


class SqliteJobStore:
    """
    Job store backed by a SQLite file.

    Same contract as storage.JobStore; jobs survive process restarts.
    """

    def __init__(self, db_path: Path, logger: Optional[StructuredLogger] = None):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = _engine(self.db_path)
        Base.metadata.create_all(self.engine)
        self._Session = sessionmaker(bind=self.engine, expire_on_commit=False)
        self._lock = threading.Lock()
        self.logger = logger or get_logger(enable_file=False)

    def create(self, title: str, description: str = "") -> Job:
        """
        Insert a new job and return it.

        Raises:
            ValidationError: If title is empty or a field has the wrong type
        """
        if description is None:
            description = ""
        errors = validate_job({"title": title, "description": description})
        if errors:
            err = ValidationError(errors)
            self.logger.record_error(err)
            self.logger.warning("Rejected job", errors=errors)
            raise err

        with self._lock, self._Session() as session:
            record = JobRecord(title=title, description=description, created_at=datetime.now())
            session.add(record)
            session.commit()
            job = record.to_job()

        self.logger.record_create()
        self.logger.info("Job created", job_id=job.id, title=job.title, db=str(self.db_path))
        return job

    def get(self, job_id: int) -> Job:
        with self._lock, self._Session() as session:
            record = session.get(JobRecord, job_id)
            job = record.to_job() if record is not None else None
        if job is None:
            raise self._not_found(job_id)
        return job

    def list(self) -> List[Job]:
        """Return a snapshot of all jobs ordered by id ascending."""
        with self._lock, self._Session() as session:
            records = session.query(JobRecord).order_by(JobRecord.id).all()
            return [r.to_job() for r in records]

    def delete(self, job_id: int) -> None:
        """
        Permanently remove a job. Its id is not reused.

        Raises:
            NotFoundError: If no job has that id
        """
        with self._lock, self._Session() as session:
            record = session.get(JobRecord, job_id)
            if record is not None:
                session.delete(record)
                session.commit()
        if record is None:
            raise self._not_found(job_id)
        self.logger.record_delete()
        self.logger.info("Job deleted", job_id=job_id, db=str(self.db_path))

    def clear(self) -> int:
        """Remove every job and return how many were removed. Ids are not reset."""
        with self._lock, self._Session() as session:
            removed = session.query(JobRecord).delete()
            session.commit()
        self.logger.record_delete(removed)
        self.logger.info("Store cleared", jobs_removed=removed, db=str(self.db_path))
        return removed

    def count(self) -> int:
        with self._lock, self._Session() as session:
            return session.query(JobRecord).count()

    def __len__(self) -> int:
        return self.count()

    def close(self) -> None:
        self.engine.dispose()

    def _not_found(self, job_id: int) -> NotFoundError:
        err = NotFoundError(job_id)
        self.logger.record_error(err)
        self.logger.warning("Job not found", job_id=job_id, db=str(self.db_path))
        return err
