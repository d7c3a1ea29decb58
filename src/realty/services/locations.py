"""
Location Autocomplete Service

Builds city and locality suggestions from the location block of active
listings.
"""
from typing import Any, Dict, Iterable, List

MIN_QUERY_LENGTH = 2
MAX_SUGGESTIONS = 10


def _display(city: str, state: str, locality: str = "") -> str:
    parts = [locality, city] if locality else [city]
    if state:
        parts.append(state)
    return ", ".join(parts)


def collect_locations(payloads: Iterable[Dict[str, Any]]) -> List[Dict[str, str]]:
    """
    Unique city and locality entries in first-seen order.

    Args:
        payloads: Decoded listing payloads

    Returns:
        List of location dictionaries with city, state, locality, display, type
    """
    seen: Dict[str, Dict[str, str]] = {}

    for payload in payloads:
        location = (payload or {}).get("location") or {}
        if not isinstance(location, dict):
            continue

        city = location.get("city") or ""
        state = location.get("state") or ""
        locality = location.get("locality") or ""
        if not city:
            continue

        city_key = city.lower()
        if city_key not in seen:
            seen[city_key] = {
                "city": city,
                "state": state,
                "locality": "",
                "display": _display(city, state),
                "type": "city",
            }

        if locality:
            locality_key = f"{locality.lower()}-{city_key}"
            if locality_key not in seen:
                seen[locality_key] = {
                    "city": city,
                    "state": state,
                    "locality": locality,
                    "display": _display(city, state, locality),
                    "type": "locality",
                }

    return list(seen.values())


def suggest_locations(payloads: Iterable[Dict[str, Any]], query: str) -> List[Dict[str, str]]:
    """
    Suggest locations whose city, locality or display text contains the query.

    Queries shorter than two characters (after trimming) give no suggestions.

    Args:
        payloads: Decoded payloads of active listings
        query: Text typed by the user

    Returns:
        At most ten matching location entries
    """
    if not query or len(query.strip()) < MIN_QUERY_LENGTH:
        return []

    needle = query.lower()
    matches = [
        entry for entry in collect_locations(payloads)
        if needle in entry["city"].lower()
        or needle in entry["locality"].lower()
        or needle in entry["display"].lower()
    ]
    return matches[:MAX_SUGGESTIONS]
