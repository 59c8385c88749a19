"""Lenient accessors for the nested dicts returned by ``CustomObjectsApi``.

Every getter returns a default instead of raising when the key is absent or
holds a value of the wrong type.
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional


def get_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def get_bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key)
    return value if isinstance(value, bool) else False


def get_int(data: Dict[str, Any], key: str) -> Optional[int]:
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value


def get_map(data: Dict[str, Any], key: str) -> Optional[Dict[str, Any]]:
    value = data.get(key)
    return value if isinstance(value, dict) else None


def get_str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def get_str_map(data: Dict[str, Any], key: str) -> Dict[str, str]:
    value = data.get(key)
    if not isinstance(value, dict):
        return {}
    return {k: v for k, v in value.items() if isinstance(v, str)}


def split_object(obj: Any, kind: str):
    """Return ``(metadata, spec, status)`` of an untyped object.

    Raises ValueError only when ``obj`` itself is not a mapping; a ``spec`` or
    ``status`` of the wrong type decodes as empty.
    """
    if not isinstance(obj, dict):
        raise ValueError(f"cannot decode {kind}: expected an object, got {type(obj).__name__}")
    metadata = get_map(obj, "metadata") or {}
    spec = get_map(obj, "spec") or {}
    status = get_map(obj, "status") or {}
    return metadata, spec, status


def parse_rfc3339(value: str) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return None
    return parsed


def format_rfc3339(value: datetime) -> str:
    if value.utcoffset() == timedelta(0):
        return value.strftime("%Y-%m-%dT%H:%M:%SZ")
    return value.isoformat(timespec="seconds")
