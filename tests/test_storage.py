"""
Tests for storage.py - in-memory job store.
"""

import json
import threading
from datetime import datetime

import pytest

from jobtracker.errors import NotFoundError, ValidationError
from jobtracker.export import export_snapshot
from jobtracker.logger import reset_logger
from jobtracker.models import Job
from jobtracker.storage import JobStore


class TestCreate:
    """Test job creation."""

    def test_create_then_get(self, store):
        """get() returns the title and description passed to create()."""
        before = datetime.now()
        job = store.create("software engineer", "Build things")

        fetched = store.get(job.id)
        assert fetched.title == "software engineer"
        assert fetched.description == "Build things"
        assert fetched.created_at >= before

    def test_description_defaults_to_empty(self, store):
        job = store.create("engineer")
        assert job.description == ""

    def test_none_description_stored_as_empty(self, store):
        job = store.create("engineer", None)
        assert store.get(job.id).description == ""

    @pytest.mark.parametrize("title", ["", "   ", None, 42])
    def test_invalid_title_rejected(self, store, title):
        """Empty or non-string titles raise ValidationError."""
        with pytest.raises(ValidationError) as exc:
            store.create(title, "desc")
        assert any("title" in err for err in exc.value.errors)
        assert store.count() == 0

    def test_non_string_description_rejected(self, store):
        with pytest.raises(ValidationError):
            store.create("engineer", ["not", "text"])

    @pytest.mark.parametrize("title,description", [
        (json.loads('"\\ud800x"'), ""),
        ("engineer", "bad byte \udcff"),
    ])
    def test_unencodable_text_rejected(self, store, title, description):
        """Lone surrogates are refused so later exports keep working."""
        with pytest.raises(ValidationError) as exc:
            store.create(title, description)
        assert any("valid UTF-8" in err for err in exc.value.errors)
        assert store.count() == 0

        store.create("engineer", "fine")
        result = export_snapshot(store, {"format": "json"})
        assert result.count == 1

    def test_failed_create_does_not_consume_id(self, store):
        first = store.create("one")
        with pytest.raises(ValidationError):
            store.create("")
        second = store.create("two")
        assert second.id == first.id + 1

    def test_returned_job_is_read_only(self, store):
        job = store.create("engineer")
        with pytest.raises(AttributeError):
            job.title = "changed"
        assert store.get(job.id).title == "engineer"


class TestIdentifiers:
    """Test identifier assignment."""

    def test_ids_are_sequential(self, store):
        ids = [store.create(f"job {i}").id for i in range(5)]
        assert ids == [1, 2, 3, 4, 5]

    def test_ids_never_reused_after_delete(self, store):
        """Deleting the newest job does not free its id."""
        job = store.create("temp")
        store.delete(job.id)
        again = store.create("temp")
        assert again.id > job.id

    def test_ids_not_reset_by_clear(self, store):
        store.create("a")
        last = store.create("b")
        store.clear()
        assert store.create("c").id > last.id

    def test_concurrent_creates_get_unique_ids(self, store):
        """Parallel creates all succeed with distinct ids."""
        results = []
        lock = threading.Lock()

        def worker(n):
            for i in range(50):
                job = store.create(f"job {n}-{i}")
                with lock:
                    results.append(job.id)

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 400
        assert len(set(results)) == 400
        assert [j.id for j in store.list()] == sorted(results)


class TestReadAndDelete:
    """Test get, list and delete."""

    def test_get_missing_raises(self, store):
        with pytest.raises(NotFoundError) as exc:
            store.get(99)
        assert exc.value.job_id == 99
        assert exc.value.status == 404

    def test_list_empty(self, store):
        assert store.list() == []

    def test_list_ordered_by_id(self, populated_store):
        jobs = populated_store.list()
        assert [j.id for j in jobs] == [1, 3]
        assert all(isinstance(j, Job) for j in jobs)

    def test_list_is_stable(self, populated_store):
        assert populated_store.list() == populated_store.list()

    def test_list_count_after_creates_and_deletes(self, store):
        """N creates and M deletes leave N-M jobs."""
        created = [store.create(f"job {i}") for i in range(10)]
        for job in created[::3]:
            store.delete(job.id)

        jobs = store.list()
        assert len(jobs) == 10 - len(created[::3])
        assert [j.id for j in jobs] == sorted(j.id for j in jobs)

    def test_list_returns_copy(self, store):
        store.create("engineer")
        snapshot = store.list()
        snapshot.clear()
        assert store.count() == 1

    def test_delete_removes_job(self, store):
        job = store.create("engineer")
        store.delete(job.id)
        with pytest.raises(NotFoundError):
            store.get(job.id)

    def test_delete_missing_leaves_store_unchanged(self, populated_store):
        before = populated_store.list()
        with pytest.raises(NotFoundError):
            populated_store.delete(2)
        assert populated_store.list() == before
        assert len(populated_store) == 2

    def test_clear_returns_removed_count(self, populated_store):
        assert populated_store.clear() == 2
        assert populated_store.list() == []


class TestStoreMetrics:
    """Test that store activity is reported to the logger."""

    def test_metrics_recorded(self, store, quiet_logger):
        job = store.create("engineer")
        store.delete(job.id)
        with pytest.raises(NotFoundError):
            store.delete(job.id)
        with pytest.raises(ValidationError):
            store.create("")

        metrics = quiet_logger.get_metrics()
        assert metrics["jobs_created"] == 1
        assert metrics["jobs_deleted"] == 1
        assert metrics["errors_by_type"] == {"NotFoundError": 1, "ValidationError": 1}

    def test_default_logger_writes_no_files(self, tmp_path, monkeypatch):
        """A store built without a configured logger leaves the working directory alone."""
        monkeypatch.chdir(tmp_path)
        reset_logger()

        store = JobStore()
        store.create("engineer")

        assert not (tmp_path / "logs").exists()
        assert store.logger.get_metrics()["jobs_created"] == 1
