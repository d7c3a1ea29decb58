"""
Reviews Router

Endpoints for listing reviews and their moderation.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.realty.api.auth import TokenUser, get_current_user, require_admin
from src.realty.api.dependencies import get_db
from src.realty.api.schemas import ReviewCreate, ReviewOut
from src.realty.db.repository import PropertyRepository, ReviewRepository, UserRepository
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/reviews", tags=["reviews"])

reviews = ReviewRepository()
properties = PropertyRepository()
users = UserRepository()


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(
    body: ReviewCreate,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Review a listing. Reviews stay hidden until approved, one per user and listing.
    """
    if not properties.get_by_id(db, body.property_id):
        raise HTTPException(status_code=404, detail="Property not found")

    if reviews.get_by_property_and_user(db, body.property_id, current_user.id):
        raise HTTPException(status_code=400, detail="You have already reviewed this property")

    user = users.get_by_id(db, current_user.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    review = reviews.create(
        db,
        property_id=body.property_id,
        user_id=user.id,
        user_name=user.name,
        rating=body.rating,
        comment=body.comment or None,
    )
    db.commit()

    return {"message": "Review submitted successfully", "review": ReviewOut.model_validate(review)}


@router.get("/property/{property_id}")
def get_property_reviews(property_id: str, db: Session = Depends(get_db)):
    """
    Approved reviews of a listing, newest first, with rating statistics.
    """
    approved = reviews.approved_for_property(db, property_id)
    return {
        "reviews": [ReviewOut.model_validate(review) for review in approved],
        "stats": ReviewRepository.rating_stats(approved),
    }


@router.put("/{review_id}/approve")
def approve_review(review_id: str, admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    review = reviews.get_by_id(db, review_id)
    if not review:
        raise HTTPException(status_code=404, detail="Review not found")

    review.is_approved = True
    db.commit()
    logger.info("review_approved", review_id=review_id, admin_id=admin.id)

    return {"message": "Review approved successfully", "review": ReviewOut.model_validate(review)}


@router.delete("/{review_id}")
def delete_review(review_id: str, admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    if not reviews.delete(db, review_id):
        raise HTTPException(status_code=404, detail="Review not found")
    db.commit()
    return {"message": "Review deleted successfully"}
