"""
Pydantic Schemas for API Request/Response Models

These schemas define the JSON structure for API endpoints. Request models
carry the field rules; response models read straight from ORM rows.
"""
import json
import re
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from src.realty.db.models import PROPERTY_STATUSES
from src.realty.db.utils import parse_json

PHONE_PATTERN = re.compile(r"^[+]?[(]?[0-9]{1,4}[)]?[-\s.]?[(]?[0-9]{1,4}[)]?[-\s.]?[0-9]{1,9}$")
PASSWORD_PATTERN = re.compile(r"^(?=.*[a-z])(?=.*[A-Z])(?=.*\d)")

CATEGORIES = ("Residential", "Commercial")
PURPOSES = ("Buy", "Rent", "Lease")
AREA_UNITS = ("sq.ft", "sq.yd", "sq.m", "acres", "marla", "cents")
FURNISHING_OPTIONS = ("Furnished", "Semi-Furnished", "Unfurnished")
CONSTRUCTION_STATUSES = ("New Launch", "Under Construction", "Ready to Move")
INVESTMENT_TYPES = ("Assured Returns", "Rental Yield", "Lease Guarantee", "ROI")


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _check_name(value: str) -> str:
    if not value:
        raise ValueError("Name is required")
    if not 2 <= len(value) <= 100:
        raise ValueError("Name must be between 2 and 100 characters")
    return value


def _check_phone(value: str) -> str:
    if not PHONE_PATTERN.match(value):
        raise ValueError("Invalid phone number format")
    return value


def _check_payload_rules(payload: Dict[str, Any]) -> None:
    category = payload.get("category")
    if category not in CATEGORIES:
        raise ValueError("Category must be Residential or Commercial")
    if payload.get("purpose") not in PURPOSES:
        raise ValueError("Purpose must be Buy, Rent, or Lease")

    subtype = payload.get("subtype")
    if not isinstance(subtype, str) or not subtype.strip():
        raise ValueError("Property type is required")

    price = payload.get("price")
    if not _is_number(price) or not price or price < 0:
        raise ValueError("Valid price is required")
    area = payload.get("area")
    if not _is_number(area) or area <= 0:
        raise ValueError("Valid area is required")

    location = payload.get("location")
    city = location.get("city") if isinstance(location, dict) else None
    if not isinstance(city, str) or not city.strip():
        raise ValueError("Location with city is required")

    area_unit = payload.get("areaUnit")
    if area_unit and area_unit not in AREA_UNITS:
        raise ValueError(f"Area unit must be one of: {', '.join(AREA_UNITS)}")

    if category == "Residential":
        bhk = payload.get("bhk")
        if bhk and not isinstance(bhk, str):
            raise ValueError("BHK must be a string")
        bathrooms = payload.get("bathrooms")
        if bathrooms and (not _is_number(bathrooms) or bathrooms < 0):
            raise ValueError("Bathrooms must be a non-negative number")
        furnishing = payload.get("furnishing")
        if furnishing and furnishing not in FURNISHING_OPTIONS:
            raise ValueError("Furnishing must be Furnished, Semi-Furnished, or Unfurnished")

    if category == "Commercial":
        construction_status = payload.get("constructionStatus")
        if construction_status and construction_status not in CONSTRUCTION_STATUSES:
            raise ValueError("Invalid construction status")
        investment_type = payload.get("investmentType")
        if investment_type and investment_type not in INVESTMENT_TYPES:
            raise ValueError("Invalid investment type")

    for key, label in (("amenities", "Amenities"), ("features", "Features"),
                       ("images", "Images"), ("videos", "Videos")):
        value = payload.get(key)
        if value and not isinstance(value, list):
            raise ValueError(f"{label} must be an array")


def validate_property_payload(value: Any) -> Dict[str, Any]:
    """
    Validate a listing payload sent as an object or a JSON string.

    Args:
        value: Raw payload from the request body

    Returns:
        Decoded payload dictionary

    Raises:
        ValueError: With an ``Invalid payload: `` prefixed message
    """
    if value is None or value == "":
        raise ValueError("Property payload is required")

    try:
        payload = json.loads(value) if isinstance(value, str) else value
        if not isinstance(payload, dict):
            raise ValueError("Payload must be an object")
        _check_payload_rules(payload)
    except ValueError as e:
        raise ValueError(f"Invalid payload: {e}") from e

    return payload


def validate_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValueError("Title is required")
    value = value.strip()
    if not 5 <= len(value) <= 200:
        raise ValueError("Title must be between 5 and 200 characters")
    return value


# Auth

class RegisterRequest(BaseModel):
    """New account details."""
    name: str
    email: EmailStr
    phone: Optional[str] = None
    password: str

    @field_validator("name", "email", "phone", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: Optional[str]) -> Optional[str]:
        return _check_phone(v) if v is not None else v

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        if len(v) < 8:
            raise ValueError("Password must be at least 8 characters")
        if not PASSWORD_PATTERN.match(v):
            raise ValueError(
                "Password must contain at least one uppercase letter, one lowercase letter, and one number"
            )
        return v


class LoginRequest(BaseModel):
    """Login credentials."""
    email: EmailStr
    password: str

    @field_validator("email", mode="before")
    @classmethod
    def strip_email(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("password")
    @classmethod
    def check_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class ProfileUpdate(BaseModel):
    """Profile fields a user may change; only sent fields are applied."""
    name: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name", "phone", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: Optional[str]) -> str:
        return _check_name(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: Optional[str]) -> Optional[str]:
        # An empty phone clears it
        return _check_phone(v) if v else None


# Properties

class PropertyCreate(BaseModel):
    """New listing."""
    title: str
    payload: Any

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> str:
        return validate_title(v)

    @field_validator("payload")
    @classmethod
    def check_payload(cls, v: Any) -> Dict[str, Any]:
        return validate_property_payload(v)


class PropertyUpdate(BaseModel):
    """Listing changes; each sent field is validated like on create."""
    title: Optional[str] = None
    payload: Optional[Any] = None
    status: Optional[str] = None

    @field_validator("title", mode="before")
    @classmethod
    def check_title(cls, v: Any) -> Optional[str]:
        return validate_title(v) if v is not None else v

    @field_validator("payload")
    @classmethod
    def check_payload(cls, v: Any) -> Optional[Dict[str, Any]]:
        return validate_property_payload(v) if v is not None else v

    @field_validator("status")
    @classmethod
    def check_status(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and v not in PROPERTY_STATUSES:
            raise ValueError("Invalid status")
        return v


class PropertySearchRequest(BaseModel):
    """Body of the advanced search endpoint."""
    filters: Dict[str, Any] = Field(default_factory=dict)
    page: Any = 1
    limit: Any = 12


class PropertyOut(BaseModel):
    """Listing with its decoded payload."""
    id: str
    title: str
    payload: Dict[str, Any] = Field(default_factory=dict)
    status: str
    views: int = 0
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @field_validator("payload", mode="before")
    @classmethod
    def decode_payload(cls, v: Any) -> Dict[str, Any]:
        return parse_json(v, {}) or {}


# Leads

class LeadCreate(BaseModel):
    """Inquiry form."""
    name: str
    email: EmailStr
    phone: str
    property_id: Optional[str] = None
    message: Optional[str] = None

    @field_validator("name", "email", "phone", "property_id", "message", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return _check_name(v)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        if not v:
            raise ValueError("Phone is required")
        return _check_phone(v)

    @field_validator("property_id")
    @classmethod
    def check_property_id(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v:
            raise ValueError("Property ID is required if provided")
        return v

    @field_validator("message")
    @classmethod
    def check_message(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 1000:
            raise ValueError("Message must be less than 1000 characters")
        return v


class LeadStatusUpdate(BaseModel):
    status: Optional[str] = None


class LeadOut(BaseModel):
    """Stored inquiry."""
    id: str
    user_id: Optional[str] = None
    property_id: Optional[str] = None
    name: str
    email: str
    phone: str
    message: Optional[str] = None
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


# Users and admin

class UserOut(BaseModel):
    """Account without credentials."""
    id: str
    name: str
    email: str
    phone: Optional[str] = None
    role: str
    is_active: bool
    email_verified: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserStatusUpdate(BaseModel):
    # Checked for a real boolean in the handler
    is_active: Any = None


class UserRoleUpdate(BaseModel):
    role: Optional[str] = None


class SettingsUpdate(BaseModel):
    """Site settings; only sent keys are stored."""
    logo: Optional[str] = None
    company_name: Optional[str] = Field(None, alias="companyName")

    model_config = ConfigDict(populate_by_name=True)


# Wishlist, amenities, reviews, drafts

class WishlistAdd(BaseModel):
    property_id: Optional[str] = None


class WishlistEntry(PropertyOut):
    """Saved listing with the time it was saved."""
    added_at: datetime


class AmenityIn(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None


class AmenityOut(BaseModel):
    id: str
    name: str
    category: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class ReviewCreate(BaseModel):
    """Star rating for a listing."""
    property_id: str
    rating: Any
    comment: Optional[str] = None

    @field_validator("property_id", "comment", mode="before")
    @classmethod
    def strip_strings(cls, v: Any) -> Any:
        return _strip(v)

    @field_validator("property_id")
    @classmethod
    def check_property_id(cls, v: str) -> str:
        if not v:
            raise ValueError("Property ID is required")
        return v

    @field_validator("rating")
    @classmethod
    def check_rating(cls, v: Any) -> int:
        if isinstance(v, bool) or not re.fullmatch(r"[+-]?\d+", str(v).strip()):
            raise ValueError("Rating must be between 1 and 5")
        rating = int(str(v).strip())
        if not 1 <= rating <= 5:
            raise ValueError("Rating must be between 1 and 5")
        return rating

    @field_validator("comment")
    @classmethod
    def check_comment(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and len(v) > 1000:
            raise ValueError("Comment must be less than 1000 characters")
        return v


class ReviewOut(BaseModel):
    id: str
    property_id: str
    user_id: str
    user_name: str
    rating: int
    comment: Optional[str] = None
    is_approved: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DraftIn(BaseModel):
    """Draft form state; only sent fields are applied on update."""
    title: Optional[str] = None
    payload: Optional[Any] = None


class DraftOut(BaseModel):
    id: str
    user_id: str
    title: Optional[str] = None
    payload: Dict[str, Any] = Field(default_factory=dict)
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("payload", mode="before")
    @classmethod
    def decode_payload(cls, v: Any) -> Dict[str, Any]:
        decoded = parse_json(v, {})
        return decoded if isinstance(decoded, dict) else {}


# Media and health

class OptimizeRequest(BaseModel):
    """Transformation options for an ImageKit URL."""
    url: Optional[str] = None
    width: Optional[Union[int, str]] = None
    height: Optional[Union[int, str]] = None
    quality: Optional[Union[int, str]] = "auto"
    format: Optional[str] = "auto"
    crop: Optional[str] = None


class UploadResult(BaseModel):
    secure_url: Optional[str] = None
    public_id: Optional[str] = None
    format: Optional[str] = None
    resource_type: str
    file_size: int
    width: Optional[int] = None
    height: Optional[int] = None


class HealthCheck(BaseModel):
    """Health check response."""
    status: str
    timestamp: datetime
    database: str


class ValidationErrorItem(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    error: str = "Validation failed"
    errors: List[ValidationErrorItem] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[Dict[str, Any]]) -> "ValidationErrorResponse":
        """
        Flatten pydantic errors into field/message pairs.

        Request location prefixes (body, query, path) are dropped from the
        field name and the "Value error, " prefix from messages.
        """
        items = []
        for error in errors:
            parts = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
            items.append(ValidationErrorItem(
                field=".".join(parts) or "body",
                message=error.get("msg", "").removeprefix("Value error, "),
            ))
        return cls(errors=items)
