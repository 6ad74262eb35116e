"""
Loader — reads the file-record set and the request list.

Record set format (JSON)::

    {"files": [{"id": 1, "file": "src/app.py", "status": "modified",
                "type": "normal", "content": "```diff\\n...", "additions": 3,
                "deletions": 1}]}
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from ..hunks.models import Side
from .errors import InvalidRequest, SourceReadFailure
from .models import AnnotationRequest, FileDiff, FileKind, FileStatus

logger = logging.getLogger(__name__)

_REQUEST_KEYS = {"id", "file_id", "start_line", "end_line", "side"}


def load_file_records(path: str) -> list[FileDiff]:
    """Read and validate the record set at *path*.

    Raises
    ------
    SourceReadFailure
        If the file is unreadable, is not JSON, or any record is malformed.
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as exc:
        raise SourceReadFailure(f"Failed to read data file: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SourceReadFailure(f"Data file is not valid JSON: {exc}") from exc

    return parse_file_records(data)


def parse_file_records(data: Any) -> list[FileDiff]:
    """Validate an already-decoded record set (``{"files": [...]}`` or a list)."""
    if isinstance(data, dict):
        data = data.get("files")
    if not isinstance(data, list):
        raise SourceReadFailure("Data file has no 'files' list")

    records: list[FileDiff] = []
    seen: set = set()
    for index, item in enumerate(data):
        record = _parse_record(item, index)
        if record.id in seen:
            raise SourceReadFailure(f"Duplicate file id {record.id!r}")
        seen.add(record.id)
        records.append(record)

    logger.debug("[Reconcile] Loaded %d file records", len(records))
    return records


def _parse_record(item: Any, index: int) -> FileDiff:
    if not isinstance(item, dict):
        raise SourceReadFailure(f"File record #{index} is not an object")

    for key in ("id", "file", "content"):
        if key not in item:
            raise SourceReadFailure(f"File record #{index} is missing '{key}'")
    if not isinstance(item["id"], (int, str)):
        raise SourceReadFailure(f"File record #{index} has an invalid 'id'")
    if not isinstance(item["content"], str):
        raise SourceReadFailure(f"File record #{index} has non-text 'content'")

    try:
        additions = int(item.get("additions") or 0)
        deletions = int(item.get("deletions") or 0)
    except (TypeError, ValueError) as exc:
        raise SourceReadFailure(
            f"File record #{index} has invalid line counts: {exc}"
        ) from exc

    return FileDiff(
        id=item["id"],
        path=str(item["file"]),
        raw_diff_text=item["content"],
        status=_enum_or_default(FileStatus, item.get("status"),
                                FileStatus.MODIFIED, index),
        kind=_enum_or_default(FileKind, item.get("type"),
                              FileKind.NORMAL, index),
        additions=additions,
        deletions=deletions,
    )


def _enum_or_default(enum_cls, value, default, index: int):
    if value is None:
        return default
    try:
        return enum_cls(value)
    except ValueError:
        logger.warning(
            "[Reconcile] File record #%d: unknown %s %r, using %r",
            index, enum_cls.__name__, value, default.value,
        )
        return default


def load_requests(
    path: str,
    default_side: Side = Side.RIGHT,
) -> list[AnnotationRequest]:
    """Read a JSON array of request objects from *path*."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidRequest(f"Failed to read requests: {exc}") from exc
    if isinstance(data, dict):
        data = data.get("packets")
    if not isinstance(data, list):
        raise InvalidRequest("Requests must be a JSON array")
    return parse_requests(data, default_side)


def parse_requests(
    items: Iterable[Any],
    default_side: Side = Side.RIGHT,
) -> list[AnnotationRequest]:
    """Build requests from dicts; unrecognised keys become metadata.

    A missing ``side`` falls back to *default_side*; any value other than
    ``LEFT`` means the new file.
    """
    try:
        items = list(items)
    except TypeError as exc:
        raise InvalidRequest(
            f"Requests must be a list, got {type(items).__name__}"
        ) from exc

    requests: list[AnnotationRequest] = []
    for index, item in enumerate(items):
        if isinstance(item, AnnotationRequest):
            requests.append(item)
            continue
        if not isinstance(item, dict):
            raise InvalidRequest(f"Request #{index} is not an object")
        if "file_id" not in item:
            raise InvalidRequest(f"Request #{index} is missing 'file_id'")
        try:
            start = int(item["start_line"])
            end = int(item["end_line"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidRequest(
                f"Request #{index} has no valid line range: {exc!r}"
            ) from exc

        requests.append(AnnotationRequest(
            id=item.get("id", index + 1),
            file_id=item["file_id"],
            start_line=start,
            end_line=end,
            side=Side.coerce(item.get("side") or default_side),
            metadata={k: v for k, v in item.items() if k not in _REQUEST_KEYS},
        ))
    return requests
