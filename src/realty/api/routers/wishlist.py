"""
Wishlist Router

Endpoints for a user's saved listings.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.realty.api.auth import TokenUser, get_current_user
from src.realty.api.dependencies import get_db
from src.realty.api.schemas import PropertyOut, WishlistAdd, WishlistEntry
from src.realty.db.repository import PropertyRepository, WishlistRepository
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])

wishlist = WishlistRepository()
properties = PropertyRepository()


@router.get("")
def get_wishlist(current_user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Saved Active listings, most recently saved first.
    """
    entries = [
        WishlistEntry(**PropertyOut.model_validate(property_obj).model_dump(), added_at=item.added_at)
        for item, property_obj in wishlist.list_active_for_user(db, current_user.id)
    ]
    return {"properties": entries}


@router.post("", status_code=status.HTTP_201_CREATED)
def add_to_wishlist(
    body: WishlistAdd,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Save an Active listing.
    """
    if not body.property_id:
        raise HTTPException(status_code=400, detail="Property ID is required")

    if not properties.get_visible(db, body.property_id):
        raise HTTPException(status_code=404, detail="Property not found")

    if wishlist.get_item(db, current_user.id, body.property_id):
        raise HTTPException(status_code=400, detail="Property already in wishlist")

    wishlist.create(db, user_id=current_user.id, property_id=body.property_id)
    db.commit()

    return {"message": "Property added to wishlist"}


@router.delete("/{property_id}")
def remove_from_wishlist(
    property_id: str,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    item = wishlist.get_item(db, current_user.id, property_id)
    if not item:
        raise HTTPException(status_code=404, detail="Property not in wishlist")

    db.delete(item)
    db.commit()
    logger.info("wishlist_item_removed", user_id=current_user.id, property_id=property_id)

    return {"message": "Property removed from wishlist"}
