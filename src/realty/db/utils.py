"""
Database Utilities

Helper functions for pagination, JSON payload handling and exports.
"""
import json
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterable, List, Optional

from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100


def parse_json(value: Any, default: Any = None) -> Any:
    """
    Safely parse a JSON payload.

    Already-decoded values (dicts, lists) are returned unchanged so that
    callers can pass either the raw request body or a stored column value.

    Args:
        value: JSON string or decoded value
        default: Value returned for empty or malformed input

    Returns:
        Decoded value or default
    """
    if value is None or value == "":
        return default
    if not isinstance(value, (str, bytes)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError):
        logger.debug("json_parse_failed")
        return default


def _to_int(value: Any, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


def paginate(page: Any = 1, limit: Any = DEFAULT_PAGE_LIMIT) -> Dict[str, int]:
    """
    Normalize pagination parameters.

    Args:
        page: Requested page (1-based); invalid values fall back to 1
        limit: Requested page size, clamped to 1..100

    Returns:
        Dictionary with page, limit and offset
    """
    page_num = max(1, _to_int(page, 1) or 1)
    limit_num = max(1, min(MAX_PAGE_LIMIT, _to_int(limit, DEFAULT_PAGE_LIMIT) or DEFAULT_PAGE_LIMIT))
    return {
        "page": page_num,
        "limit": limit_num,
        "offset": (page_num - 1) * limit_num,
    }


def pagination_meta(page: int, limit: int, total: int) -> Dict[str, int]:
    """
    Build the pagination block returned with list responses.
    """
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "pages": math.ceil(total / limit) if limit else 0,
    }


def generate_csv(rows: Iterable[Dict[str, Any]], headers: Optional[List[str]] = None) -> str:
    """
    Render rows as CSV with every value quoted.

    Args:
        rows: Row dictionaries
        headers: Column order (defaults to the first row's keys)

    Returns:
        CSV text, or an empty string when there are no rows
    """
    rows = list(rows)
    if not rows:
        return ""

    columns = headers or list(rows[0].keys())
    lines = [",".join(columns)]

    for row in rows:
        values = []
        for column in columns:
            value = row.get(column)
            if value is None:
                values.append("")
                continue
            if isinstance(value, datetime):
                value = value.isoformat()
            escaped = str(value).replace('"', '""')
            values.append(f'"{escaped}"')
        lines.append(",".join(values))

    return "\n".join(lines)


def days_ago(days: int) -> datetime:
    """
    UTC timestamp for a number of days before now.
    """
    return datetime.now(timezone.utc) - timedelta(days=days)
