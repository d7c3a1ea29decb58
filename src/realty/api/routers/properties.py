"""
Properties Router

Endpoints for browsing, searching and managing listings.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from src.realty.api.auth import TokenUser, get_optional_user, require_admin
from src.realty.api.dependencies import get_db, get_media_client
from src.realty.api.schemas import (
    PropertyCreate, PropertyOut, PropertySearchRequest, PropertyUpdate, ValidationErrorResponse,
)
from src.realty.db.base import utcnow
from src.realty.db.repository import PropertyRepository
from src.realty.db.utils import paginate, pagination_meta
from src.realty.media.imagekit import ImageKitClient, collect_media_file_ids
from src.realty.services.property_search import PropertyFilters, filter_properties, find_similar
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/properties", tags=["properties"])

properties = PropertyRepository()


def _visible_status(current_user: Optional[TokenUser], requested: Optional[str]) -> str:
    """Admins may ask for any status; everyone else only sees Active listings."""
    if current_user is not None and current_user.is_admin and requested:
        return requested
    return "Active"


def _search_page(db: Session, filters: PropertyFilters, status_filter: str, page, limit):
    paging = paginate(page, limit)
    matched = filter_properties(properties.get_by_status(db, status_filter), filters)
    offset, size = paging["offset"], paging["limit"]
    return {
        "properties": [PropertyOut.model_validate(p) for p in matched[offset:offset + size]],
        "pagination": pagination_meta(paging["page"], size, len(matched)),
    }


@router.get("")
def list_properties(
    request: Request,
    page: str = Query("1", description="Page number (1-based)"),
    limit: str = Query("12", description="Page size (max 100)"),
    status_param: Optional[str] = Query(None, alias="status", description="Listing status (admins only)"),
    current_user: Optional[TokenUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    List listings with optional payload filters and sorting.

    Filters are read from the query string; see PropertyFilters for the
    accepted keys. Without filters the page is read straight from the
    database, newest first.

    Returns:
        Listings and pagination block
    """
    filters = PropertyFilters.from_query_params(request.query_params)
    status_filter = _visible_status(current_user, status_param)

    if filters.has_payload_filters() or filters.sort_by:
        return _search_page(db, filters, status_filter, page, limit)

    paging = paginate(page, limit)
    rows, total = properties.get_page_by_status(db, status_filter, paging["limit"], paging["offset"])
    return {
        "properties": [PropertyOut.model_validate(p) for p in rows],
        "pagination": pagination_meta(paging["page"], paging["limit"], total),
    }


@router.post("/search")
def search_properties(
    body: PropertySearchRequest,
    current_user: Optional[TokenUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Advanced search with filters sent in the request body.
    """
    try:
        filters = PropertyFilters.from_search_body(body.filters)
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=ValidationErrorResponse.from_errors(e.errors()).model_dump(),
        ) from e

    status_filter = _visible_status(current_user, filters.status)
    return _search_page(db, filters, status_filter, body.page, body.limit)


@router.get("/{property_id}")
def get_property(
    property_id: str,
    current_user: Optional[TokenUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Get a listing and record the view.

    Non-admin callers only see Active listings.
    """
    include_inactive = current_user is not None and current_user.is_admin
    property_obj = properties.get_visible(db, property_id, include_inactive=include_inactive)
    if not property_obj:
        raise HTTPException(status_code=404, detail="Property not found")

    properties.record_view(db, property_obj, user_id=current_user.id if current_user else None)
    db.commit()

    return {"property": PropertyOut.model_validate(property_obj)}


@router.get("/{property_id}/similar")
def get_similar_properties(
    property_id: str,
    limit: str = Query("4", description="Maximum number of listings"),
    db: Session = Depends(get_db),
):
    """
    Active listings with the same category, purpose and city.
    """
    property_obj = properties.get_visible(db, property_id)
    if not property_obj:
        raise HTTPException(status_code=404, detail="Property not found")

    try:
        limit_num = int(limit) or 4
    except ValueError:
        limit_num = 4

    similar = find_similar(property_obj, properties.get_by_status(db, "Active"), limit=limit_num)
    return {"properties": [PropertyOut.model_validate(p) for p in similar]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_property(
    body: PropertyCreate,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Create a listing with zeroed analytics.
    """
    property_obj = properties.create_listing(db, title=body.title, payload=body.payload)
    db.commit()
    logger.info("property_created", property_id=property_obj.id, admin_id=admin.id)

    return {"message": "Property created successfully", "property": PropertyOut.model_validate(property_obj)}


@router.put("/{property_id}")
def update_property(
    property_id: str,
    body: PropertyUpdate,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Update title, payload and/or status of a listing.
    """
    property_obj = properties.get_by_id(db, property_id)
    if not property_obj:
        raise HTTPException(status_code=404, detail="Property not found")

    changes = {key: value for key, value in body.model_dump(exclude_unset=True).items() if value is not None}
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    property_obj = properties.update(db, property_id, **changes, updated_at=utcnow())
    db.commit()
    logger.info("property_updated", property_id=property_id, fields=sorted(changes), admin_id=admin.id)

    return {"message": "Property updated successfully", "property": PropertyOut.model_validate(property_obj)}


@router.delete("/{property_id}")
def delete_property(
    property_id: str,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
    media: ImageKitClient = Depends(get_media_client),
):
    """
    Delete a listing, its media on ImageKit and its dependent rows.

    Media deletion failures are reported but never block the deletion.
    """
    property_obj = properties.get_by_id(db, property_id)
    if not property_obj:
        raise HTTPException(status_code=404, detail="Property not found")

    file_ids = collect_media_file_ids(property_obj.payload or {})
    media_result = media.delete_files(file_ids)
    if media_result["failed"]:
        logger.warning(
            "property_media_delete_incomplete",
            property_id=property_id,
            failed=media_result["failed"],
        )

    properties.delete_listing(db, property_obj)
    db.commit()
    logger.info("property_removed", property_id=property_id, admin_id=admin.id)

    return {
        "message": "Property deleted successfully",
        "deletedMedia": {
            "total": media_result["total"],
            "successful": media_result["successful"],
            "failed": media_result["failed"],
        },
    }
