"""
Admin Router

Dashboard statistics, analytics, user management and site settings.
"""
from collections import Counter
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from src.realty.api.auth import TokenUser, require_admin
from src.realty.api.dependencies import get_db
from src.realty.api.schemas import SettingsUpdate, UserOut, UserRoleUpdate, UserStatusUpdate
from src.realty.db.base import utcnow
from src.realty.db.models import USER_ROLES, Lead, Property, PropertyAnalytics, PropertyView, User
from src.realty.db.repository import (
    PUBLIC_SETTING_KEYS,
    LeadRepository,
    PropertyRepository,
    SettingRepository,
    UserRepository,
)
from src.realty.db.utils import days_ago, paginate, pagination_meta, parse_json
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/admin", tags=["admin"])

users = UserRepository()
properties = PropertyRepository()
leads = LeadRepository()
site_settings = SettingRepository()

DATE_RANGES = {"7d": 7, "30d": 30, "90d": 90, "all": None}


@router.get("/dashboard")
def get_dashboard(admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    """
    Headline counts and the five most viewed listings.
    """
    def count(query) -> int:
        return db.scalar(query) or 0

    stats = {
        "totalUsers": users.count(db),
        "totalProperties": properties.count(db),
        "activeProperties": count(
            select(func.count()).select_from(Property).where(Property.status == "Active")
        ),
        "totalLeads": leads.count(db),
        "pendingLeads": count(
            select(func.count()).select_from(Lead).where(Lead.status == "Pending")
        ),
        "totalViews": count(select(func.sum(Property.views))),
        "recentLeads": count(
            select(func.count()).select_from(Lead).where(Lead.created_at >= days_ago(7))
        ),
    }

    top_properties = [
        {"id": p.id, "title": p.title, "views": p.views}
        for p in properties.top_by_views(db, limit=5)
    ]

    return {"stats": stats, "topProperties": top_properties}


@router.get("/users")
def list_users(
    page: str = Query("1", description="Page number (1-based)"),
    limit: str = Query("20", description="Page size (max 100)"),
    role: Optional[str] = Query(None, description="Filter by role"),
    search: Optional[str] = Query(None, description="Match name or email"),
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    paging = paginate(page, limit)
    rows, total = users.search(db, role=role, search=search, limit=paging["limit"], offset=paging["offset"])
    return {
        "users": [UserOut.model_validate(user) for user in rows],
        "pagination": pagination_meta(paging["page"], paging["limit"], total),
    }


@router.put("/users/{user_id}/status")
def update_user_status(
    user_id: str,
    body: UserStatusUpdate,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Activate or deactivate an account.
    """
    if not isinstance(body.is_active, bool):
        raise HTTPException(status_code=400, detail="is_active must be a boolean")

    user = users.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.is_active = body.is_active
    user.updated_at = utcnow()
    db.commit()
    logger.info("user_status_updated", user_id=user_id, is_active=body.is_active, admin_id=admin.id)

    return {"message": "User status updated successfully", "user": UserOut.model_validate(user)}


@router.put("/users/{user_id}/role")
def update_user_role(
    user_id: str,
    body: UserRoleUpdate,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Promote or demote an account.
    """
    if body.role not in USER_ROLES:
        raise HTTPException(status_code=400, detail="Invalid role")

    user = users.get_by_id(db, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")

    user.role = body.role
    user.updated_at = utcnow()
    db.commit()
    logger.info("user_role_updated", user_id=user_id, role=body.role, admin_id=admin.id)

    return {"message": "User role updated successfully", "user": UserOut.model_validate(user)}


@router.delete("/users/{user_id}")
def delete_user(user_id: str, admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    if not users.delete(db, user_id):
        raise HTTPException(status_code=404, detail="User not found")
    db.commit()
    return {"message": "User deleted successfully"}


def _daily_counts(db: Session, column, since):
    day = func.date(column)
    query = select(day.label("date"), func.count().label("count")).group_by(day).order_by(day)
    if since is not None:
        query = query.where(column >= since)
    return [{"date": str(row.date), "count": row.count} for row in db.execute(query)]


@router.get("/analytics")
def get_analytics(
    date_range: str = Query("30d", alias="dateRange", description="7d, 30d, 90d or all"),
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Trends and breakdowns for the analytics page.

    Unknown ranges fall back to 30 days.

    Returns:
        Daily views and leads, lead status breakdown, top listings by
        analytics views and Active listing counts per city
    """
    days = DATE_RANGES.get(date_range, 30)
    since = days_ago(days) if days else None

    status_rows = db.execute(
        select(Lead.status, func.count().label("count")).group_by(Lead.status)
    )
    lead_status_breakdown = [{"status": row.status, "count": row.count} for row in status_rows]

    top_rows = db.execute(
        select(Property, PropertyAnalytics)
        .join(PropertyAnalytics, PropertyAnalytics.property_id == Property.id)
        .order_by(PropertyAnalytics.views.desc())
        .limit(10)
    ).all()
    top_properties = [
        {
            "id": property_obj.id,
            "title": property_obj.title,
            "payload": parse_json(property_obj.payload, {}),
            "views": analytics.views,
            "inquiries": analytics.inquiries,
            "conversions": analytics.conversions,
        }
        for property_obj, analytics in top_rows
    ]

    cities = Counter()
    for property_obj in properties.get_by_status(db, "Active"):
        payload = parse_json(property_obj.payload, {}) or {}
        location = payload.get("location") or {}
        cities[location.get("city") or payload.get("city") or "Unknown"] += 1

    return {
        "viewsTrend": _daily_counts(db, PropertyView.viewed_at, since),
        "leadsTrend": _daily_counts(db, Lead.created_at, since),
        "leadStatusBreakdown": lead_status_breakdown,
        "topPropertiesByViews": top_properties,
        "locationStats": dict(cities),
    }


@router.get("/settings/public")
def get_public_settings(db: Session = Depends(get_db)):
    """
    Branding settings readable without authentication.
    """
    return {"settings": site_settings.as_dict(db, keys=PUBLIC_SETTING_KEYS)}


@router.get("/settings")
def get_settings(admin: TokenUser = Depends(require_admin), db: Session = Depends(get_db)):
    return {"settings": site_settings.as_dict(db)}


@router.put("/settings")
def update_settings(
    body: SettingsUpdate,
    admin: TokenUser = Depends(require_admin),
    db: Session = Depends(get_db),
):
    """
    Store the logo and company name; keys not sent are left unchanged.
    """
    sent = body.model_dump(by_alias=True, exclude_unset=True)
    for key in PUBLIC_SETTING_KEYS:
        if key in sent and sent[key] is not None:
            site_settings.upsert(db, key, sent[key])
    db.commit()

    return {"message": "Settings updated successfully", "settings": site_settings.as_dict(db)}
