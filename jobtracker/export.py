"""
Export encoder: serializes a job snapshot to JSON or CSV bytes.

Encoding is a pure transform over an ordered list of Job snapshots; it
never touches the store. export_snapshot() and export_to_file() are the
entry points for the HTTP layer and the CLI.
"""

import csv
import io
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Sequence, Union

from .errors import UnsupportedFormatError, ValidationError
from .logger import get_logger
from .models import FIELDS, ExportFormat, Job
from .schema import parse_export_request, validate_job

ENCODING = "utf-8"


@dataclass(frozen=True)
class ExportResult:
    """Encoded snapshot plus the metadata needed to send it as a download."""

    content: bytes
    format: ExportFormat
    count: int

    @property
    def content_type(self) -> str:
        return self.format.content_type

    @property
    def filename(self) -> str:
        return self.format.filename


def _encode_json(jobs: Sequence[Job]) -> bytes:
    payload = [job.to_dict() for job in jobs]
    return json.dumps(payload, indent=2, ensure_ascii=False).encode(ENCODING)


def _encode_csv(jobs: Sequence[Job]) -> bytes:
    buf = io.StringIO(newline="")
    writer = csv.DictWriter(buf, fieldnames=FIELDS, quoting=csv.QUOTE_MINIMAL)
    writer.writeheader()
    for job in jobs:
        writer.writerow(job.to_dict())
    return buf.getvalue().encode(ENCODING)


def _decode_json(text: str) -> List[Dict[str, Any]]:
    rows = json.loads(text)
    if not isinstance(rows, list):
        raise ValueError("expected a JSON array of jobs")
    return rows


def _decode_csv(text: str) -> List[Dict[str, Any]]:
    reader = csv.DictReader(io.StringIO(text, newline=""))
    if reader.fieldnames != FIELDS:
        raise ValueError(f"unexpected CSV header: {reader.fieldnames}")
    return list(reader)


_ENCODERS: Dict[ExportFormat, Callable[[Sequence[Job]], bytes]] = {
    ExportFormat.JSON: _encode_json,
    ExportFormat.CSV: _encode_csv,
}

_DECODERS: Dict[ExportFormat, Callable[[str], List[Dict[str, Any]]]] = {
    ExportFormat.JSON: _decode_json,
    ExportFormat.CSV: _decode_csv,
}


def encode(jobs: Sequence[Job], fmt: Union[ExportFormat, str]) -> bytes:
    """
    Serialize jobs in the given order.

    Args:
        jobs: Ordered snapshot, usually store.list()
        fmt: ExportFormat or a tag such as "json" / "csv"

    Returns:
        UTF-8 encoded document

    Raises:
        UnsupportedFormatError: If fmt is not json or csv
    """
    fmt = ExportFormat.parse(fmt)
    return _ENCODERS[fmt](jobs)


def decode(data: bytes, fmt: Union[ExportFormat, str]) -> List[Job]:
    """
    Parse a document produced by encode() back into Job snapshots.

    Raises:
        UnsupportedFormatError: If fmt is not json or csv
        ValidationError: If the document is malformed
    """
    fmt = ExportFormat.parse(fmt)
    try:
        rows = _DECODERS[fmt](data.decode(ENCODING))
    except (ValueError, AttributeError, csv.Error) as e:
        raise ValidationError([f"Malformed {fmt.value} export: {e}"]) from e

    jobs: List[Job] = []
    for n, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            raise ValidationError([f"Row {n}: expected an object, got {type(row).__name__}"])
        errors = validate_job(row)
        if row.get("description") is None:
            errors.append("Field 'description' must be a string, not null")
        if errors:
            raise ValidationError([f"Row {n}: {err}" for err in errors])
        try:
            job = Job.from_dict(row)
        except (ValueError, KeyError, TypeError) as e:
            raise ValidationError([f"Row {n}: malformed {fmt.value} job: {e}"]) from e
        # Snapshots are strictly ordered by id
        if jobs and job.id <= jobs[-1].id:
            raise ValidationError([f"Row {n}: id {job.id} is duplicate or out of order"])
        jobs.append(job)
    return jobs


def export_snapshot(store, request: Union[Mapping[str, Any], str, bytes]) -> ExportResult:
    """
    Handle an export request of the form {"format": "json"}.

    The format is checked before the store is read, so a bad request
    never touches stored data.

    Raises:
        ValidationError: If the request body is malformed
        UnsupportedFormatError: If the requested format is unknown
    """
    logger = get_logger(enable_file=False)
    try:
        fmt = parse_export_request(request)
    except (ValidationError, UnsupportedFormatError) as e:
        logger.record_error(e)
        logger.warning("Rejected export request", error=e.message)
        raise

    jobs = store.list()
    content = encode(jobs, fmt)
    logger.record_export(fmt.value)
    logger.info("Exported jobs", format=fmt.value, count=len(jobs), size=len(content))
    return ExportResult(content=content, format=fmt, count=len(jobs))


def export_to_file(store, fmt: Union[ExportFormat, str], path: Path) -> Path:
    """
    Write the store's snapshot to disk.

    Args:
        store: JobStore or SqliteJobStore
        fmt: Export format
        path: Destination file; parent directories are created

    Returns:
        The written path
    """
    fmt = ExportFormat.parse(fmt)
    jobs = store.list()
    content = encode(jobs, fmt)
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    logger = get_logger(enable_file=False)
    logger.record_export(fmt.value)
    logger.info("Exported jobs to file", format=fmt.value, count=len(jobs), path=str(path))
    return path
