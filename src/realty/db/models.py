"""
SQLAlchemy ORM Models

Relational tables for the listing marketplace. Property and draft details
live in a JSON payload column; everything else is plain columns.
"""
from datetime import datetime
from typing import Any, Optional

from sqlalchemy import (
    JSON, Boolean, CheckConstraint, ForeignKey, Index, Integer,
    String, Text, UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column

from src.realty.db.base import (
    Base, TimestampMixin, UTCDateTime, UUIDPrimaryKeyMixin, generate_id, utcnow,
)

USER_ROLES = ("user", "admin")
PROPERTY_STATUSES = ("Active", "Sold", "Rented", "Inactive")
LEAD_STATUSES = ("Pending", "Contacted", "Converted", "Lost")


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Registered account. Admins manage listings, leads and settings.
    """
    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        comment="Lower-cased login email"
    )
    phone: Mapped[Optional[str]] = mapped_column(String(32), nullable=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), default="user", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    email_verified: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    __table_args__ = (
        CheckConstraint("role IN ('user', 'admin')", name="check_user_role"),
        Index("idx_users_email", "email"),
        Index("idx_users_role", "role"),
    )

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role})>"


class Property(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """
    Listing. Category, price, area, location and media are stored in payload.
    """
    __tablename__ = "properties"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    payload: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="Listing details (category, purpose, price, area, location, media)"
    )
    status: Mapped[str] = mapped_column(String(16), default="Active", nullable=False)
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Active', 'Sold', 'Rented', 'Inactive')",
            name="check_property_status"
        ),
        Index("idx_properties_status", "status"),
        Index("idx_properties_views", "views"),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, title={self.title}, status={self.status})>"


class Lead(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Inquiry submitted for a listing (or a general inquiry)."""
    __tablename__ = "leads"

    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    property_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("properties.id", ondelete="SET NULL"),
        nullable=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(32), nullable=False)
    message: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(16), default="Pending", nullable=False)

    __table_args__ = (
        CheckConstraint(
            "status IN ('Pending', 'Contacted', 'Converted', 'Lost')",
            name="check_lead_status"
        ),
        Index("idx_leads_property_id", "property_id"),
        Index("idx_leads_user_id", "user_id"),
        Index("idx_leads_status", "status"),
    )

    def __repr__(self) -> str:
        return f"<Lead(id={self.id}, email={self.email}, status={self.status})>"


class WishlistItem(Base, UUIDPrimaryKeyMixin):
    """Property saved by a user."""
    __tablename__ = "wishlist"

    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    property_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    added_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("user_id", "property_id", name="uq_wishlist_user_property"),
        Index("idx_wishlist_user_id", "user_id"),
    )


class PropertyAnalytics(Base):
    """Per-listing view, inquiry and conversion counters."""
    __tablename__ = "analytics"

    property_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("properties.id", ondelete="CASCADE"),
        primary_key=True,
    )
    views: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    inquiries: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    conversions: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )


class Amenity(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Selectable amenity shown in listing forms and search filters."""
    __tablename__ = "amenities"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    __table_args__ = (
        Index("idx_amenities_name", "name"),
        Index("idx_amenities_category", "category"),
    )


class PropertyView(Base, UUIDPrimaryKeyMixin):
    """Single detail-page view, used for the analytics trend."""
    __tablename__ = "property_views"

    property_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    viewed_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_property_views_property_id", "property_id"),
        Index("idx_property_views_viewed_at", "viewed_at"),
    )


class PropertyDraft(Base):
    """Unpublished listing form state owned by a user."""
    __tablename__ = "property_drafts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_id)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    title: Mapped[Optional[str]] = mapped_column(String(200), nullable=True)
    payload: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=True, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_property_drafts_user_id", "user_id"),
    )


class Review(Base, UUIDPrimaryKeyMixin):
    """Star rating left by a user; hidden until an admin approves it."""
    __tablename__ = "reviews"

    property_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("properties.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    user_name: Mapped[str] = mapped_column(String(100), nullable=False)
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    is_approved: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        nullable=False,
    )

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="check_review_rating_range"),
        Index("idx_reviews_property_id", "property_id"),
        Index("idx_reviews_user_id", "user_id"),
        Index("idx_reviews_is_approved", "is_approved"),
    )


class Setting(Base, UUIDPrimaryKeyMixin):
    """Site-wide key/value setting (logo, company name)."""
    __tablename__ = "settings"

    key: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(),
        default=utcnow,
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        Index("idx_settings_key", "key"),
    )
