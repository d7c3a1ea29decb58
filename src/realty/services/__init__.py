"""
Services Module

Listing search and location autocomplete over property payloads.
"""
from src.realty.services.property_search import (
    PropertyFilters,
    filter_properties,
    find_similar,
    sort_properties,
)
from src.realty.services.locations import suggest_locations

__all__ = [
    "PropertyFilters",
    "filter_properties",
    "find_similar",
    "sort_properties",
    "suggest_locations",
]
