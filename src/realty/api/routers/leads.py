"""
Leads Router

Endpoints for submitting inquiries and managing them as an admin.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from config.settings import settings
from src.realty.api.auth import TokenUser, get_optional_user, require_admin
from src.realty.api.dependencies import get_db
from src.realty.api.rate_limit import lead_rate_limit
from src.realty.api.schemas import LeadCreate, LeadOut, LeadStatusUpdate
from src.realty.db.models import LEAD_STATUSES
from src.realty.db.repository import LeadRepository, PropertyRepository
from src.realty.db.utils import generate_csv, paginate, pagination_meta
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/leads", tags=["leads"])

leads = LeadRepository()
properties = PropertyRepository()

CSV_COLUMNS = ["id", "name", "email", "phone", "message", "status", "property_id", "created_at"]


@router.post("", status_code=status.HTTP_201_CREATED, dependencies=[Depends(lead_rate_limit)])
def create_lead(
    body: LeadCreate,
    current_user: Optional[TokenUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Submit an inquiry, optionally about a listing.

    Returns:
        Message, the stored lead and the WhatsApp number for follow-up
    """
    if body.property_id and not properties.get_by_id(db, body.property_id):
        raise HTTPException(status_code=404, detail="Property not found")

    lead = leads.create_lead(
        db,
        user_id=current_user.id if current_user else None,
        property_id=body.property_id or None,
        name=body.name,
        email=body.email,
        phone=body.phone,
        message=body.message or None,
    )
    db.commit()
    logger.info("lead_submitted", lead_id=lead.id, property_id=lead.property_id)

    return {
        "message": "Inquiry submitted successfully",
        "lead": {
            "id": lead.id,
            "name": lead.name,
            "email": lead.email,
            "phone": lead.phone,
            "message": lead.message,
        },
        "whatsappNumber": settings.whatsapp_number,
    }


@router.get("")
def list_leads(
    page: str = Query("1", description="Page number (1-based)"),
    limit: str = Query("20", description="Page size (max 100)"),
    status_filter: Optional[str] = Query(None, alias="status", description="Filter by lead status"),
    search: Optional[str] = Query(None, description="Match name, email or phone"),
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    List leads newest first with optional status and text filters.
    """
    paging = paginate(page, limit)
    rows, total = leads.search(
        db,
        status=status_filter,
        search=search,
        limit=paging["limit"],
        offset=paging["offset"],
    )
    return {
        "leads": [LeadOut.model_validate(lead) for lead in rows],
        "pagination": pagination_meta(paging["page"], paging["limit"], total),
    }


@router.get("/export/csv")
def export_leads_csv(admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """
    Download every lead as a CSV attachment.
    """
    rows = [
        {column: getattr(lead, column) for column in CSV_COLUMNS}
        for lead in leads.get_all_newest_first(db)
    ]
    logger.info("leads_exported", count=len(rows), admin_id=admin.id)

    return Response(
        content=generate_csv(rows, CSV_COLUMNS),
        media_type="text/csv",
        headers={"Content-Disposition": "attachment; filename=leads.csv"},
    )


@router.get("/{lead_id}")
def get_lead(lead_id: str, admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    lead = leads.get_by_id(db, lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")
    return {"lead": LeadOut.model_validate(lead)}


@router.put("/{lead_id}/status")
def update_lead_status(
    lead_id: str,
    body: LeadStatusUpdate,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Move a lead through Pending, Contacted, Converted or Lost.

    Converting a lead counts a conversion on its listing.
    """
    if body.status not in LEAD_STATUSES:
        raise HTTPException(status_code=400, detail="Invalid status")

    lead = leads.get_by_id(db, lead_id)
    if not lead:
        raise HTTPException(status_code=404, detail="Lead not found")

    leads.set_status(db, lead, body.status)
    db.commit()

    return {"message": "Lead status updated successfully", "lead": LeadOut.model_validate(lead)}


@router.delete("/{lead_id}")
def delete_lead(lead_id: str, admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    if not leads.delete(db, lead_id):
        raise HTTPException(status_code=404, detail="Lead not found")
    db.commit()
    return {"message": "Lead deleted successfully"}
