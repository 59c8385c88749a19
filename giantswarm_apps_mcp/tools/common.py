"""Helpers shared by the tool modules."""

import logging
from typing import Any, Dict

from giantswarm_apps_mcp.errors import is_not_found

logger = logging.getLogger("mcp-server")


def error_result(doing: str, e: Exception, hint: str = "") -> Dict[str, Any]:
    """Failure payload; not-found errors carry a hint instead of being logged."""
    error_msg = str(e)
    if hint and is_not_found(e):
        return {"success": False, "error": error_msg, "hint": hint}
    logger.error(f"Error {doing}: {e}")
    return {"success": False, "error": error_msg}


def parse_key_values(text: str, what: str = "data") -> Dict[str, str]:
    """Parse ``key1=value1,key2=value2``; values may themselves contain ``=``."""
    result: Dict[str, str] = {}
    if not text:
        return result
    for pair in text.split(","):
        key, sep, value = pair.partition("=")
        if not sep:
            raise ValueError(f"invalid {what} format: {pair} (expected key=value)")
        result[key.strip()] = value.strip()
    return result


def split_list(text: str) -> list:
    """Comma-separated names, blanks dropped."""
    return [item.strip() for item in text.split(",") if item.strip()]
