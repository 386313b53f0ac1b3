import json
from typing import Any, Dict, List, Mapping, Union

from .errors import ValidationError
from .models import ExportFormat

REQUIRED_STR_FIELDS = ["title"]
OPTIONAL_STR_FIELDS = ["description"]


def _is_non_empty_str(v: Any) -> bool:
    return isinstance(v, str) and v.strip() != ""


def _is_utf8(v: str) -> bool:
    # Lone surrogates (JSON "\ud800" escapes, undecodable argv bytes) cannot be exported
    try:
        v.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def validate_job(data: Dict[str, Any]) -> List[str]:
    """
    Returns a list of validation error messages. Empty list means valid.
    """
    errors: List[str] = []

    for f in REQUIRED_STR_FIELDS:
        if f not in data or data[f] is None:
            errors.append(f"Missing required field: {f}")
        elif not _is_non_empty_str(data[f]):
            errors.append(f"Field '{f}' must be a non-empty string")
        elif not _is_utf8(data[f]):
            errors.append(f"Field '{f}' must be valid UTF-8 text")

    # Optional strings may be empty, but must be strings when present
    for f in OPTIONAL_STR_FIELDS:
        if data.get(f) is None:
            continue
        if not isinstance(data[f], str):
            errors.append(f"Field '{f}' must be a string if provided")
        elif not _is_utf8(data[f]):
            errors.append(f"Field '{f}' must be valid UTF-8 text")

    return errors


def parse_export_request(request: Union[Mapping[str, Any], str, bytes]) -> ExportFormat:
    """
    Resolve the export format from a request body of the form ``{"format": "csv"}``.

    The body may already be decoded or still be raw JSON text.

    Raises:
        ValidationError: If the body is not a JSON object with a ``format`` field
        UnsupportedFormatError: If ``format`` is neither json nor csv
    """
    if isinstance(request, (str, bytes)):
        try:
            request = json.loads(request)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError([f"Export request is not valid JSON: {e}"]) from e

    if not isinstance(request, Mapping):
        raise ValidationError(["Export request must be an object"])
    if "format" not in request:
        raise ValidationError(["Missing required field: format"])

    return ExportFormat.parse(request["format"])
