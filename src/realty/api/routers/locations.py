"""
Locations Router

City and locality autocomplete built from active listings.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from src.realty.api.dependencies import get_db
from src.realty.db.repository import PropertyRepository
from src.realty.db.utils import parse_json
from src.realty.services.locations import MIN_QUERY_LENGTH, suggest_locations

router = APIRouter(prefix="/api/locations", tags=["locations"])

properties = PropertyRepository()


@router.get("")
def get_locations(
    query: Optional[str] = Query(None, description="Text to match against cities and localities"),
    db: Session = Depends(get_db),
):
    if not query or len(query.strip()) < MIN_QUERY_LENGTH:
        return {"locations": []}

    payloads = [parse_json(p.payload, {}) or {} for p in properties.get_by_status(db, "Active")]
    return {"locations": suggest_locations(payloads, query)}
