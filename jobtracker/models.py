"""
Domain types: the Job record and the closed set of export formats.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from .errors import UnsupportedFormatError

# Column order for every export format
FIELDS = ["id", "title", "description", "created_at"]


@dataclass(frozen=True)
class Job:
    """Read-only snapshot of a stored job."""

    id: int
    title: str
    description: str
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Job":
        """
        Build a Job from its exported mapping.

        Raises:
            KeyError, ValueError, TypeError: If a field is missing or malformed
        """
        return cls(
            id=int(data["id"]),
            title=data["title"],
            description=data.get("description") or "",
            created_at=datetime.fromisoformat(data["created_at"]),
        )


class ExportFormat(Enum):
    """Wire formats accepted by the export encoder."""

    JSON = "json"
    CSV = "csv"

    @classmethod
    def parse(cls, tag: Any) -> "ExportFormat":
        """
        Resolve a format tag such as ``"json"`` or ``"CSV"``.

        Raises:
            UnsupportedFormatError: If the tag is not a known format
        """
        if isinstance(tag, cls):
            return tag
        if not isinstance(tag, str):
            raise UnsupportedFormatError(tag)
        try:
            return cls(tag.strip().lower())
        except ValueError:
            raise UnsupportedFormatError(tag) from None

    @property
    def content_type(self) -> str:
        return _CONTENT_TYPES[self]

    @property
    def filename(self) -> str:
        return f"jobs.{self.value}"


_CONTENT_TYPES = {
    ExportFormat.JSON: "application/json",
    ExportFormat.CSV: "text/csv",
}
