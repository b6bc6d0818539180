"""
Structural decoding of API response bodies.

- `decode_record`: `{"id", "fields", "createdTime"}` -> Record
- `decode_page`: `{"records": [...], "offset"?}` -> Page
- `find_error`: detects `{"error": {...}}` / `{"error": "TYPE"}` envelopes

No field mapping happens here; `fields` is handed on untouched.
"""
from __future__ import annotations
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .errors import DecodeError


@dataclass(frozen=True)
class Record:
    id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    created_time: str = ""


@dataclass(frozen=True)
class Page:
    records: List[Record]
    offset: Optional[str] = None


def _load(body: bytes) -> Any:
    try:
        return json.loads(body)
    except ValueError as e:
        raise DecodeError(f"response is not valid JSON: {e}") from e


def _record_from(obj: Any, where: str = "response") -> Record:
    if not isinstance(obj, dict):
        raise DecodeError(f"{where}: expected a JSON object, got {type(obj).__name__}")
    rec_id = obj.get("id")
    if not isinstance(rec_id, str):
        raise DecodeError(f"{where}: 'id' must be a string")
    fields = obj.get("fields")
    if fields is None:
        fields = {}
    if not isinstance(fields, dict):
        raise DecodeError(f"{where}: 'fields' must be an object")
    created = obj.get("createdTime")
    if created is None:
        created = ""
    if not isinstance(created, str):
        raise DecodeError(f"{where}: 'createdTime' must be a string")
    return Record(id=rec_id, fields=fields, created_time=created)


def decode_record(body: bytes) -> Record:
    return _record_from(_load(body))


def decode_page(body: bytes) -> Page:
    obj = _load(body)
    if not isinstance(obj, dict):
        raise DecodeError(f"response: expected a JSON object, got {type(obj).__name__}")
    raw_records = obj.get("records")
    if not isinstance(raw_records, list):
        raise DecodeError("response: 'records' must be an array")
    offset = obj.get("offset")
    if offset is not None and not isinstance(offset, str):
        raise DecodeError("response: 'offset' must be a string")
    records = [_record_from(r, f"records[{i}]") for i, r in enumerate(raw_records)]
    return Page(records=records, offset=offset or None)


def find_error(body: bytes) -> Optional[Tuple[str, str]]:
    """Return (type, message) when body is an API error envelope, else None."""
    try:
        obj = json.loads(body)
    except ValueError:
        return None
    if not isinstance(obj, dict):
        return None
    err = obj.get("error")
    if isinstance(err, str) and err:
        return err, err
    if isinstance(err, dict):
        err_type = err.get("type")
        if isinstance(err_type, str) and err_type:
            message = err.get("message")
            return err_type, message if isinstance(message, str) and message else err_type
    return None
