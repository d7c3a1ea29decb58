"""
Drafts Router

Endpoints for saving unfinished listing forms. Every draft is private to
the user who saved it.
"""
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from src.realty.api.auth import TokenUser, get_current_user
from src.realty.api.dependencies import get_db
from src.realty.api.schemas import DraftIn, DraftOut
from src.realty.db.base import utcnow
from src.realty.db.repository import DraftRepository
from src.realty.db.utils import parse_json

router = APIRouter(prefix="/api/drafts", tags=["drafts"])

drafts = DraftRepository()


def _decode(payload: Any) -> Dict[str, Any]:
    decoded = parse_json(payload, {})
    return decoded if isinstance(decoded, dict) else {}


def _owned_draft(db: Session, draft_id: str, user_id: str):
    draft = drafts.get_owned(db, draft_id, user_id)
    if not draft:
        raise HTTPException(status_code=404, detail="Draft not found")
    return draft


@router.get("")
def list_drafts(current_user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    The caller's drafts, most recently updated first.
    """
    return {"drafts": [DraftOut.model_validate(d) for d in drafts.list_for_user(db, current_user.id)]}


@router.post("", status_code=status.HTTP_201_CREATED)
def create_draft(
    body: DraftIn,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    draft = drafts.create(
        db,
        user_id=current_user.id,
        title=body.title or None,
        payload=_decode(body.payload),
    )
    db.commit()
    return {"message": "Draft saved successfully", "draft": DraftOut.model_validate(draft)}


@router.put("/{draft_id}")
def update_draft(
    draft_id: str,
    body: DraftIn,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Replace the title and/or payload of a draft.
    """
    draft = _owned_draft(db, draft_id, current_user.id)

    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    if "payload" in changes:
        changes["payload"] = _decode(changes["payload"])
    draft = drafts.update(db, draft.id, **changes, updated_at=utcnow())
    db.commit()

    return {"message": "Draft updated successfully", "draft": DraftOut.model_validate(draft)}


@router.delete("/{draft_id}")
def delete_draft(
    draft_id: str,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    draft = _owned_draft(db, draft_id, current_user.id)
    db.delete(draft)
    db.commit()
    return {"message": "Draft deleted successfully"}
