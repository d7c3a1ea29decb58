"""
Amenities Router

Endpoints for the amenity catalogue used by listing forms and filters.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.realty.api.auth import TokenUser, require_admin
from src.realty.api.dependencies import get_db
from src.realty.api.schemas import AmenityIn, AmenityOut
from src.realty.db.base import utcnow
from src.realty.db.repository import AmenityRepository

router = APIRouter(prefix="/api/amenities", tags=["amenities"])

amenities = AmenityRepository()


def _required_name(body: AmenityIn) -> str:
    name = (body.name or "").strip()
    if not name:
        raise HTTPException(status_code=400, detail="Amenity name is required")
    return name


@router.get("")
def list_amenities(db: Session = Depends(get_db)):
    """
    All amenities sorted by name.
    """
    return {"amenities": [AmenityOut.model_validate(a) for a in amenities.get_all_sorted(db)]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_amenity(body: AmenityIn, admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """
    Add an amenity; names are unique regardless of case.
    """
    name = _required_name(body)
    if amenities.find_by_name(db, name):
        raise HTTPException(status_code=400, detail="Amenity already exists")

    amenity = amenities.create(db, name=name, category=body.category or None)
    db.commit()

    return {"message": "Amenity created successfully", "amenity": AmenityOut.model_validate(amenity)}


@router.put("/{amenity_id}")
def update_amenity(
    amenity_id: str,
    body: AmenityIn,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    name = _required_name(body)

    amenity = amenities.get_by_id(db, amenity_id)
    if not amenity:
        raise HTTPException(status_code=404, detail="Amenity not found")

    if amenities.find_by_name(db, name, exclude_id=amenity_id):
        raise HTTPException(status_code=400, detail="Amenity name already exists")

    amenity = amenities.update(
        db, amenity_id, name=name, category=body.category or None, updated_at=utcnow()
    )
    db.commit()

    return {"message": "Amenity updated successfully", "amenity": AmenityOut.model_validate(amenity)}


@router.delete("/{amenity_id}")
def delete_amenity(amenity_id: str, admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    if not amenities.delete(db, amenity_id):
        raise HTTPException(status_code=404, detail="Amenity not found")
    db.commit()
    return {"message": "Amenity deleted successfully"}
