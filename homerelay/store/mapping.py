"""Fold streamed put/patch events into a mirror of the watched record."""

import copy
import time
from typing import Any

from homerelay.config import MESSAGE_FIELD


def split_path(path: str) -> list[str]:
    """'/a/b/' -> ['a', 'b']; '/' or '' -> []."""
    return [p for p in (path or "").split("/") if p]


def _set_at(record: Any, segments: list[str], value: Any) -> Any:
    """Return record with value stored at segments; None deletes the node."""
    if not segments:
        return copy.deepcopy(value)
    root = record if isinstance(record, dict) else {}
    node = root
    for key in segments[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            if value is None:
                return root or None
            child = {}
            node[key] = child
        node = child
    if value is None:
        node.pop(segments[-1], None)
    else:
        node[segments[-1]] = copy.deepcopy(value)
    return root or None


def apply_event(record: Any, event_type: str, path: str, data: Any) -> Any:
    """Apply one stream event to the mirrored record and return the new record.

    put replaces the node at path; patch merges each child of data into the
    node at path. Unknown event types leave the record unchanged.
    """
    segments = split_path(path)
    if event_type == "put":
        return _set_at(record, segments, data)
    if event_type == "patch":
        if not isinstance(data, dict):
            return record
        for key, value in data.items():
            record = _set_at(record, segments + split_path(key), value)
        return record
    return record


def build_record(text: str, message_field: str = MESSAGE_FIELD, now: float | None = None) -> dict[str, str]:
    """Record shape written by the bot side: message plus unix-seconds timestamp as a string."""
    ts = int(now if now is not None else time.time())
    return {message_field: text, "timestamp": str(ts)}
