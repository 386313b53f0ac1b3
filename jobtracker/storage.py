"""
In-memory job store.

Owns every Job record and the id counter. Ids come from a single counter
that only moves forward, so an id is never handed out twice, even after
the job holding it was deleted.
"""

import threading
from datetime import datetime
from typing import Dict, List, Optional

from .errors import NotFoundError, ValidationError
from .logger import StructuredLogger, get_logger
from .models import Job
from .schema import validate_job


class JobStore:
    """Authoritative collection of jobs, safe to share between threads."""

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self._jobs: Dict[int, Job] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.logger = logger or get_logger(enable_file=False)

    def create(self, title: str, description: str = "") -> Job:
        """
        Insert a new job and return it.

        Args:
            title: Short, non-empty job title
            description: Free text, may be empty

        Returns:
            The stored Job with its assigned id and created_at

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

        with self._lock:
            job = Job(
                id=self._next_id,
                title=title,
                description=description,
                created_at=datetime.now(),
            )
            self._jobs[job.id] = job
            self._next_id += 1

        self.logger.record_create()
        self.logger.info("Job created", job_id=job.id, title=job.title)
        return job

    def get(self, job_id: int) -> Job:
        with self._lock:
            job = self._jobs.get(job_id)
        if job is None:
            raise self._not_found(job_id)
        return job

    def list(self) -> List[Job]:
        """Return a snapshot of all jobs ordered by id ascending."""
        with self._lock:
            return [self._jobs[k] for k in sorted(self._jobs)]

    def delete(self, job_id: int) -> None:
        """
        Permanently remove a job. Its id is not reused.

        Raises:
            NotFoundError: If no job has that id
        """
        with self._lock:
            job = self._jobs.pop(job_id, None)
        if job is None:
            raise self._not_found(job_id)
        self.logger.record_delete()
        self.logger.info("Job deleted", job_id=job_id)

    def clear(self) -> int:
        """Remove every job and return how many were removed. The id counter is kept."""
        with self._lock:
            removed = len(self._jobs)
            self._jobs.clear()
        self.logger.record_delete(removed)
        self.logger.info("Store cleared", jobs_removed=removed)
        return removed

    def count(self) -> int:
        with self._lock:
            return len(self._jobs)

    def __len__(self) -> int:
        return self.count()

    def _not_found(self, job_id: int) -> NotFoundError:
        err = NotFoundError(job_id)
        self.logger.record_error(err)
        self.logger.warning("Job not found", job_id=job_id)
        return err
