"""
Pytest configuration and shared fixtures.
"""

import pytest
from datetime import datetime
from typing import List

from jobtracker.logger import get_logger, reset_logger
from jobtracker.models import Job
from jobtracker.storage import JobStore


@pytest.fixture(autouse=True)
def quiet_logger(tmp_path, monkeypatch):
    """Route the global logger to a temp dir and keep the console clean."""
    for var in ("JOBTRACKER_DB", "JOBTRACKER_LOG_LEVEL", "JOBTRACKER_LOG_DIR", "JOBTRACKER_LOG_FILE"):
        monkeypatch.delenv(var, raising=False)
    reset_logger()
    logger = get_logger(log_dir=tmp_path / "logs", enable_file=False, enable_console=False)
    yield logger
    reset_logger()


@pytest.fixture
def store(quiet_logger) -> JobStore:
    """Fresh in-memory store."""
    return JobStore(logger=quiet_logger)


@pytest.fixture
def populated_store(store) -> JobStore:
    """Store with three jobs, the middle one deleted."""
    store.create("software engineer", "Build things")
    doomed = store.create("data analyst", "")
    store.create("product manager", 'Owns the "roadmap", talks to users\nand ships')
    store.delete(doomed.id)
    return store


@pytest.fixture
def tricky_jobs() -> List[Job]:
    """Snapshot with every character class the encoders must escape."""
    created = datetime(2024, 3, 1, 9, 30, 15, 123456)
    return [
        Job(id=1, title="Engineer, Backend", description='Say "hello", then leave', created_at=created),
        Job(id=2, title="Analyst", description="", created_at=created),
        Job(id=5, title="Line\nbreak", description="tab\there \\ back\u0001slash, café", created_at=created),
    ]
