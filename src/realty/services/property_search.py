"""
Property Search Service

In-memory filtering and sorting of listings over their JSON payload.
Listings of one status are loaded from the database and every filter is a
predicate over the decoded payload.
"""
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field

from src.realty.db.models import Property
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

SORT_OPTIONS = ("price_asc", "price_desc", "views", "newest")

# Filters accepted by the POST /search body
SEARCH_BODY_FIELDS = (
    "category", "purpose", "minPrice", "maxPrice", "minArea", "maxArea",
    "bhk", "furnishing", "city", "locality", "state", "amenities",
    "reraApproved", "ageOfProperty", "possessionStatus", "facing", "parking",
    "search", "sortBy", "status",
)

LIST_FIELDS = ("availableFor", "investmentType", "businessType", "amenities")
FLOAT_FIELDS = ("minPrice", "maxPrice", "minArea", "maxArea")
INT_FIELDS = ("bathrooms", "cabins", "washrooms")
BOOL_FIELDS = ("meetingRooms", "pantry", "conferenceRoom", "reraApproved")

# filter attribute -> payload key, compared with ==
EXACT_FIELDS = {
    "category": "category",
    "purpose": "purpose",
    "subtype": "subtype",
    "bhk": "bhk",
    "bathrooms": "bathrooms",
    "furnishing": "furnishing",
    "available_from": "availableFrom",
    "construction_status": "constructionStatus",
    "power_capacity": "powerCapacity",
    "cabins": "cabins",
    "washrooms": "bathrooms",
    "floor_preference": "floorPreference",
    "located_on": "locatedOn",
    "office_spread": "officeSpread",
    "situated_in": "situatedIn",
    "age_of_property": "ageOfProperty",
    "possession_status": "possessionStatus",
    "facing": "facing",
    "parking": "parking",
}

FLAG_FIELDS = {
    "meeting_rooms": "meetingRooms",
    "pantry": "pantry",
    "conference_room": "conferenceRoom",
    "rera_approved": "reraApproved",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _lower(value: Any) -> str:
    return str(value).lower() if value is not None else ""


def _parse_float(value: Optional[str]) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_int(value: Optional[str]) -> Optional[int]:
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


class PropertyFilters(BaseModel):
    """
    Search filters over the listing payload.

    Field aliases are the camelCase names used by the frontend. Numeric and
    text filters left empty (None, "" or 0) do not constrain the result.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    search: Optional[str] = None
    category: Optional[str] = None
    purpose: Optional[str] = None
    subtype: Optional[str] = None
    min_price: Optional[float] = Field(None, alias="minPrice")
    max_price: Optional[float] = Field(None, alias="maxPrice")
    min_area: Optional[float] = Field(None, alias="minArea")
    max_area: Optional[float] = Field(None, alias="maxArea")
    bhk: Optional[str] = None
    bathrooms: Optional[int] = None
    furnishing: Optional[str] = None
    available_for: List[str] = Field(default_factory=list, alias="availableFor")
    available_from: Optional[str] = Field(None, alias="availableFrom")
    construction_status: Optional[str] = Field(None, alias="constructionStatus")
    investment_type: List[str] = Field(default_factory=list, alias="investmentType")
    power_capacity: Optional[str] = Field(None, alias="powerCapacity")
    meeting_rooms: Optional[bool] = Field(None, alias="meetingRooms")
    pantry: Optional[bool] = None
    conference_room: Optional[bool] = Field(None, alias="conferenceRoom")
    cabins: Optional[int] = None
    washrooms: Optional[int] = None
    floor_preference: Optional[str] = Field(None, alias="floorPreference")
    located_on: Optional[str] = Field(None, alias="locatedOn")
    office_spread: Optional[str] = Field(None, alias="officeSpread")
    situated_in: Optional[str] = Field(None, alias="situatedIn")
    business_type: List[str] = Field(default_factory=list, alias="businessType")
    city: Optional[str] = None
    state: Optional[str] = None
    locality: Optional[str] = None
    amenities: List[str] = Field(default_factory=list)
    rera_approved: Optional[bool] = Field(None, alias="reraApproved")
    age_of_property: Optional[str] = Field(None, alias="ageOfProperty")
    possession_status: Optional[str] = Field(None, alias="possessionStatus")
    facing: Optional[str] = None
    parking: Optional[str] = None
    sort_by: Optional[str] = Field(None, alias="sortBy")
    status: Optional[str] = None

    # Whether free-text search also looks at the listing city
    search_city: bool = Field(True, exclude=True)

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "PropertyFilters":
        """
        Build filters from URL query parameters.

        List filters accept repeated keys in both the plain (``amenities=a``)
        and bracketed (``amenities[]=a``) forms. Flags are true only for the
        literal string ``true``.

        Args:
            params: Starlette QueryParams (or any mapping with optional getlist)

        Returns:
            PropertyFilters
        """
        def get_list(key: str) -> List[str]:
            if hasattr(params, "getlist"):
                values = list(params.getlist(key)) + list(params.getlist(f"{key}[]"))
            else:
                raw = params.get(key) or params.get(f"{key}[]")
                values = raw if isinstance(raw, list) else ([raw] if raw else [])
            return [value for value in values if value]

        data: Dict[str, Any] = {}
        for key, value in params.items():
            if key.endswith("[]") or key in LIST_FIELDS:
                continue
            if key in BOOL_FIELDS:
                # Present flags always filter, even when empty
                data[key] = str(value).lower() == "true"
                continue
            if value in (None, ""):
                continue
            if key in FLOAT_FIELDS:
                data[key] = _parse_float(value)
            elif key in INT_FIELDS:
                data[key] = _parse_int(value)
            else:
                data[key] = value

        for key in LIST_FIELDS:
            values = get_list(key)
            if values:
                data[key] = values

        return cls.model_validate(data)

    @classmethod
    def from_search_body(cls, filters: Optional[Mapping[str, Any]]) -> "PropertyFilters":
        """
        Build filters from a POST /search body, keeping the supported keys.

        Text search in this mode matches title and description only.
        """
        filters = filters or {}
        data = {key: filters[key] for key in SEARCH_BODY_FIELDS if key in filters and filters[key] is not None}
        if isinstance(data.get("amenities"), str):
            data["amenities"] = [data["amenities"]]
        instance = cls.model_validate(data)
        instance.search_city = False
        return instance

    def has_payload_filters(self) -> bool:
        """
        True when any filter other than status and sort order is set.
        """
        values = self.model_dump(exclude={"status", "sort_by", "search_city"})
        return any(value is False or value not in (None, "", 0, []) for value in values.values())

    def matches(self, title: str, payload: Dict[str, Any]) -> bool:
        """
        Check one listing against every filter.

        Args:
            title: Listing title
            payload: Decoded listing payload

        Returns:
            True if the listing passes all filters
        """
        payload = payload or {}
        location = payload.get("location") or {}
        if not isinstance(location, dict):
            location = {}

        for attr, key in EXACT_FIELDS.items():
            expected = getattr(self, attr)
            if expected in (None, "", 0):
                continue
            if payload.get(key) != expected:
                return False

        for attr, key in FLAG_FIELDS.items():
            expected = getattr(self, attr)
            if expected is not None and payload.get(key) is not expected:
                return False

        price = payload.get("price")
        if self.min_price and _is_number(price) and price < self.min_price:
            return False
        if self.max_price and _is_number(price) and price > self.max_price:
            return False

        area = payload.get("area")
        if self.min_area and _is_number(area) and area < self.min_area:
            return False
        if self.max_area and _is_number(area) and area > self.max_area:
            return False

        for attr in ("city", "locality", "state"):
            expected = getattr(self, attr)
            if not expected:
                continue
            actual = location.get(attr)
            if actual is None or _lower(actual) != expected.lower():
                return False

        if self.available_for and not self._any_exact(self.available_for, payload.get("availableFor")):
            return False
        if self.amenities and not self._any_exact(self.amenities, payload.get("amenities")):
            return False
        if self.investment_type and not self._any_substring(self.investment_type, payload.get("investmentType")):
            return False
        if self.business_type and not self._any_substring(self.business_type, payload.get("businessType")):
            return False

        if self.search:
            needle = self.search.lower()
            haystacks = [title or "", payload.get("description") or ""]
            if self.search_city:
                haystacks.append(location.get("city") or "")
            if not any(needle in _lower(text) for text in haystacks):
                return False

        return True

    @staticmethod
    def _any_exact(wanted: Iterable[str], actual: Any) -> bool:
        """At least one wanted value equals (case-insensitively) an item of actual."""
        if not isinstance(actual, list):
            return False
        actual_lower = {_lower(item) for item in actual}
        return any(_lower(value) in actual_lower for value in wanted)

    @staticmethod
    def _any_substring(wanted: Iterable[str], actual: Any) -> bool:
        """At least one wanted value is contained (case-insensitively) in actual."""
        haystack = _lower(actual) if actual else ""
        return any(_lower(value) in haystack for value in wanted)


def _price_of(property_obj: Property) -> float:
    price = (property_obj.payload or {}).get("price")
    return price if _is_number(price) else 0


def sort_properties(properties: List[Property], sort_by: Optional[str]) -> List[Property]:
    """
    Order listings by price, views or recency (default newest first).
    """
    if sort_by == "price_asc":
        return sorted(properties, key=_price_of)
    if sort_by == "price_desc":
        return sorted(properties, key=_price_of, reverse=True)
    if sort_by == "views":
        return sorted(properties, key=lambda p: p.views or 0, reverse=True)
    return sorted(properties, key=lambda p: p.created_at, reverse=True)


def filter_properties(properties: Iterable[Property], filters: PropertyFilters) -> List[Property]:
    """
    Apply filters and ordering to a set of listings.

    Args:
        properties: Candidate listings (already restricted by status)
        filters: Search filters

    Returns:
        Matching listings in the requested order
    """
    candidates = list(properties)
    matched = [p for p in candidates if filters.matches(p.title, p.payload or {})]
    logger.debug(
        "properties_filtered",
        candidates=len(candidates),
        matched=len(matched),
        sort_by=filters.sort_by,
    )
    return sort_properties(matched, filters.sort_by)


def find_similar(reference: Property, candidates: Iterable[Property], limit: int = 4) -> List[Property]:
    """
    Listings sharing category, purpose and city with the reference, most viewed first.

    Args:
        reference: Listing to compare against
        candidates: Active listings
        limit: Maximum results

    Returns:
        Similar listings (never the reference itself)
    """
    payload = reference.payload or {}
    city = (payload.get("location") or {}).get("city") or ""

    def is_similar(other: Property) -> bool:
        other_payload = other.payload or {}
        other_city = (other_payload.get("location") or {}).get("city") or ""
        return (
            other.id != reference.id
            and other_payload.get("category") == payload.get("category")
            and other_payload.get("purpose") == payload.get("purpose")
            and other_city == city
        )

    similar = [p for p in candidates if is_similar(p)]
    similar.sort(key=lambda p: p.views or 0, reverse=True)
    return similar[:limit]
