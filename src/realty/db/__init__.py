"""
Database Package

Database models, connection management, and data persistence layer.
"""
from src.realty.db.base import Base
from src.realty.db.session import (
    engine,
    SessionLocal,
    get_db_session,
    health_check,
    close_connections,
    create_all_tables,
    drop_all_tables,
)
from src.realty.db.models import (
    User,
    Property,
    Lead,
    WishlistItem,
    PropertyAnalytics,
    Amenity,
    PropertyView,
    PropertyDraft,
    Review,
    Setting,
)
from src.realty.db.repository import (
    BaseRepository,
    UserRepository,
    PropertyRepository,
    AnalyticsRepository,
    LeadRepository,
    WishlistRepository,
    AmenityRepository,
    DraftRepository,
    ReviewRepository,
    SettingRepository,
)
from src.realty.db import utils as db_utils

__all__ = [
    # Base
    "Base",
    # Session management
    "engine",
    "SessionLocal",
    "get_db_session",
    "health_check",
    "close_connections",
    "create_all_tables",
    "drop_all_tables",
    # Models
    "User",
    "Property",
    "Lead",
    "WishlistItem",
    "PropertyAnalytics",
    "Amenity",
    "PropertyView",
    "PropertyDraft",
    "Review",
    "Setting",
    # Repositories
    "BaseRepository",
    "UserRepository",
    "PropertyRepository",
    "AnalyticsRepository",
    "LeadRepository",
    "WishlistRepository",
    "AmenityRepository",
    "DraftRepository",
    "ReviewRepository",
    "SettingRepository",
    # Utilities
    "db_utils",
]
