"""
Repository Pattern for Data Access

Provides CRUD operations and domain-specific queries for all models.
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple, Type, TypeVar

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.orm import Session

from src.realty.db.base import utcnow
from src.realty.db.models import (
    Amenity,
    Lead,
    Property,
    PropertyAnalytics,
    PropertyDraft,
    PropertyView,
    Review,
    Setting,
    User,
    WishlistItem,
)
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar('T')

DEFAULT_AMENITIES = [
    ("Lift", "Common"),
    ("Vaastu Compliant", "Common"),
    ("Security Personnel", "Common"),
    ("Power Backup", "Common"),
    ("Parking", "Common"),
    ("Gym", "Common"),
    ("Club House", "Common"),
    ("Park", "Common"),
    ("Swimming Pool", "Common"),
    ("Gas Pipeline", "Common"),
    ("Fire Hydrant", "Common"),
    ("Fire Sprinkler", "Common"),
    ("Fire NOC", "Common"),
    ("AC Room", "Residential"),
    ("Pet Friendly", "Residential"),
    ("Wheelchair Friendly", "Residential"),
    ("Wi-Fi", "Residential"),
    ("Laundry Available", "Residential"),
    ("Food Service", "Residential"),
    ("Near Bank", "Commercial"),
    ("ATM", "Commercial"),
    ("Waste Disposal", "Commercial"),
    ("DG Availability", "Commercial"),
    ("Wheelchair Access", "Commercial"),
]

PUBLIC_SETTING_KEYS = ("logo", "companyName")


class BaseRepository:
    """
    Base repository with common CRUD operations.

    Generic repository that can be extended for specific models.
    """

    def __init__(self, model: Type[T]):
        """
        Initialize repository with model class.

        Args:
            model: SQLAlchemy model class
        """
        self.model = model

    def get_by_id(self, session: Session, id_value: Any) -> Optional[T]:
        """
        Get single record by primary key.

        Args:
            session: Database session
            id_value: Primary key value

        Returns:
            Model instance or None
        """
        result = session.get(self.model, id_value)
        logger.debug(
            "repository_get_by_id",
            model=self.model.__name__,
            id=id_value,
            found=result is not None
        )
        return result

    def create(self, session: Session, **kwargs) -> T:
        """
        Create new record.

        Args:
            session: Database session
            **kwargs: Model field values

        Returns:
            Created model instance
        """
        instance = self.model(**kwargs)
        session.add(instance)
        session.flush()
        logger.info("repository_created", model=self.model.__name__, id=getattr(instance, 'id', None))
        return instance

    def update(self, session: Session, id_value: Any, **kwargs) -> Optional[T]:
        """
        Update existing record.

        Args:
            session: Database session
            id_value: Primary key value
            **kwargs: Fields to update

        Returns:
            Updated model instance or None
        """
        instance = self.get_by_id(session, id_value)
        if not instance:
            logger.warning("repository_update_not_found", model=self.model.__name__, id=id_value)
            return None

        for key, value in kwargs.items():
            setattr(instance, key, value)

        session.flush()
        logger.info("repository_updated", model=self.model.__name__, id=id_value)
        return instance

    def delete(self, session: Session, id_value: Any) -> bool:
        """
        Delete record (hard delete).

        Args:
            session: Database session
            id_value: Primary key value

        Returns:
            True if deleted, False if not found
        """
        instance = self.get_by_id(session, id_value)
        if not instance:
            logger.warning("repository_delete_not_found", model=self.model.__name__, id=id_value)
            return False

        session.delete(instance)
        session.flush()
        logger.info("repository_deleted", model=self.model.__name__, id=id_value)
        return True

    def count(self, session: Session) -> int:
        """
        Count total records.

        Args:
            session: Database session

        Returns:
            Total count
        """
        return session.scalar(select(func.count()).select_from(self.model)) or 0

    def _page(self, session: Session, query, order_by, limit: int, offset: int) -> Tuple[List[T], int]:
        """Run a filtered select returning one page of rows and the total count."""
        total = session.scalar(select(func.count()).select_from(query.subquery())) or 0
        rows = session.execute(
            query.order_by(order_by).limit(limit).offset(offset)
        ).scalars().all()
        return list(rows), total


class UserRepository(BaseRepository):
    """Repository for User model."""

    def __init__(self):
        super().__init__(User)

    def get_by_email(self, session: Session, email: str) -> Optional[User]:
        """
        Get user by (lower-cased) email.
        """
        return session.execute(
            select(User).where(User.email == email.lower())
        ).scalar_one_or_none()

    def search(
        self,
        session: Session,
        role: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        """
        List users newest first, optionally filtered by role and name/email.

        Returns:
            Tuple of (users, total matching)
        """
        query = select(User)
        if role:
            query = query.where(User.role == role)
        if search:
            term = f"%{search}%"
            query = query.where(or_(User.name.like(term), User.email.like(term)))

        return self._page(session, query, User.created_at.desc(), limit, offset)


class PropertyRepository(BaseRepository):
    """Repository for Property model with specialized queries."""

    def __init__(self):
        super().__init__(Property)

    def get_visible(self, session: Session, property_id: str, include_inactive: bool = False) -> Optional[Property]:
        """
        Get a property, hiding non-Active listings unless include_inactive is set.
        """
        query = select(Property).where(Property.id == property_id)
        if not include_inactive:
            query = query.where(Property.status == "Active")
        return session.execute(query).scalar_one_or_none()

    def get_by_status(self, session: Session, status: str) -> List[Property]:
        """
        Get every property with the given status (input for in-memory search).
        """
        return list(session.execute(
            select(Property).where(Property.status == status)
        ).scalars().all())

    def get_page_by_status(
        self, session: Session, status: str, limit: int, offset: int
    ) -> Tuple[List[Property], int]:
        """
        Get one page of properties with the given status, newest first.
        """
        query = select(Property).where(Property.status == status)
        return self._page(session, query, Property.created_at.desc(), limit, offset)

    def create_listing(self, session: Session, title: str, payload: Dict[str, Any]) -> Property:
        """
        Create a property together with its zeroed analytics row.
        """
        property_obj = self.create(session, title=title, payload=payload)
        session.add(PropertyAnalytics(property_id=property_obj.id))
        session.flush()
        return property_obj

    def record_view(self, session: Session, property_obj: Property, user_id: Optional[str] = None) -> None:
        """
        Count a detail-page view: property counter, view log and analytics.
        """
        session.execute(
            update(Property)
            .where(Property.id == property_obj.id)
            .values(views=Property.views + 1)
            .execution_options(synchronize_session=False)
        )
        session.add(PropertyView(property_id=property_obj.id, user_id=user_id))
        AnalyticsRepository().increment(session, property_obj.id, "views", create=True)
        session.flush()
        session.refresh(property_obj)

    def delete_listing(self, session: Session, property_obj: Property) -> None:
        """
        Delete a property and its dependent rows.

        Leads are kept with their property reference cleared.
        """
        property_id = property_obj.id
        session.execute(
            update(Lead)
            .where(Lead.property_id == property_id)
            .values(property_id=None)
            .execution_options(synchronize_session=False)
        )
        for model in (PropertyAnalytics, PropertyView, Review, WishlistItem):
            session.execute(
                delete(model)
                .where(model.property_id == property_id)
                .execution_options(synchronize_session=False)
            )
        session.delete(property_obj)
        session.flush()
        logger.info("property_deleted", property_id=property_id)

    def top_by_views(self, session: Session, limit: int = 5) -> List[Property]:
        """
        Get the most viewed properties regardless of status.
        """
        return list(session.execute(
            select(Property).order_by(Property.views.desc()).limit(limit)
        ).scalars().all())


class AnalyticsRepository(BaseRepository):
    """Repository for per-property analytics counters."""

    COUNTERS = ("views", "inquiries", "conversions")

    def __init__(self):
        super().__init__(PropertyAnalytics)

    def increment(self, session: Session, property_id: str, counter: str, create: bool = False) -> None:
        """
        Increment one analytics counter.

        Args:
            session: Database session
            property_id: Property whose counters change
            counter: One of views, inquiries, conversions
            create: Insert the analytics row when missing
        """
        if counter not in self.COUNTERS:
            raise ValueError(f"Unknown analytics counter: {counter}")

        row = session.get(PropertyAnalytics, property_id)
        if row is None:
            if not create:
                logger.debug("analytics_row_missing", property_id=property_id, counter=counter)
                return
            row = PropertyAnalytics(property_id=property_id, views=0, inquiries=0, conversions=0)
            session.add(row)

        setattr(row, counter, (getattr(row, counter) or 0) + 1)
        row.updated_at = utcnow()
        session.flush()


class LeadRepository(BaseRepository):
    """Repository for Lead model."""

    def __init__(self):
        super().__init__(Lead)

    def create_lead(self, session: Session, **kwargs) -> Lead:
        """
        Create a lead and count it as an inquiry on its property.
        """
        lead = self.create(session, **kwargs)
        if lead.property_id:
            AnalyticsRepository().increment(session, lead.property_id, "inquiries")
        return lead

    def search(
        self,
        session: Session,
        status: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[Lead], int]:
        """
        List leads newest first, optionally filtered by status and contact text.
        """
        query = select(Lead)
        if status:
            query = query.where(Lead.status == status)
        if search:
            term = f"%{search}%"
            query = query.where(or_(
                Lead.name.like(term),
                Lead.email.like(term),
                Lead.phone.like(term),
            ))

        return self._page(session, query, Lead.created_at.desc(), limit, offset)

    def set_status(self, session: Session, lead: Lead, status: str) -> Lead:
        """
        Change a lead's status; conversions are counted on the property.
        """
        lead.status = status
        lead.updated_at = utcnow()
        session.flush()
        if status == "Converted" and lead.property_id:
            AnalyticsRepository().increment(session, lead.property_id, "conversions")
        logger.info("lead_status_updated", lead_id=lead.id, status=status)
        return lead

    def get_all_newest_first(self, session: Session) -> List[Lead]:
        return list(session.execute(
            select(Lead).order_by(Lead.created_at.desc())
        ).scalars().all())


class WishlistRepository(BaseRepository):
    """Repository for WishlistItem model."""

    def __init__(self):
        super().__init__(WishlistItem)

    def get_item(self, session: Session, user_id: str, property_id: str) -> Optional[WishlistItem]:
        return session.execute(
            select(WishlistItem).where(
                WishlistItem.user_id == user_id,
                WishlistItem.property_id == property_id,
            )
        ).scalar_one_or_none()

    def list_active_for_user(self, session: Session, user_id: str) -> List[Tuple[WishlistItem, Property]]:
        """
        Get a user's saved Active properties, most recently added first.
        """
        rows = session.execute(
            select(WishlistItem, Property)
            .join(Property, WishlistItem.property_id == Property.id)
            .where(WishlistItem.user_id == user_id, Property.status == "Active")
            .order_by(WishlistItem.added_at.desc())
        ).all()
        return [(item, property_obj) for item, property_obj in rows]


class AmenityRepository(BaseRepository):
    """Repository for Amenity model."""

    def __init__(self):
        super().__init__(Amenity)

    def get_all_sorted(self, session: Session) -> List[Amenity]:
        return list(session.execute(select(Amenity).order_by(Amenity.name.asc())).scalars().all())

    def find_by_name(self, session: Session, name: str, exclude_id: Optional[str] = None) -> Optional[Amenity]:
        """
        Case-insensitive name lookup, optionally ignoring one amenity.
        """
        query = select(Amenity).where(func.lower(Amenity.name) == name.lower())
        if exclude_id:
            query = query.where(Amenity.id != exclude_id)
        return session.execute(query).scalars().first()

    def seed_defaults(self, session: Session) -> int:
        """
        Insert the default amenities when the table is empty.

        Returns:
            Number of amenities inserted
        """
        if self.count(session) > 0:
            return 0

        for name, category in DEFAULT_AMENITIES:
            session.add(Amenity(name=name, category=category))
        session.flush()
        logger.info("default_amenities_seeded", count=len(DEFAULT_AMENITIES))
        return len(DEFAULT_AMENITIES)


class DraftRepository(BaseRepository):
    """Repository for PropertyDraft model."""

    def __init__(self):
        super().__init__(PropertyDraft)

    def list_for_user(self, session: Session, user_id: str) -> List[PropertyDraft]:
        return list(session.execute(
            select(PropertyDraft)
            .where(PropertyDraft.user_id == user_id)
            .order_by(PropertyDraft.updated_at.desc())
        ).scalars().all())

    def get_owned(self, session: Session, draft_id: str, user_id: str) -> Optional[PropertyDraft]:
        """
        Get a draft only if it belongs to the user.
        """
        return session.execute(
            select(PropertyDraft).where(
                PropertyDraft.id == draft_id,
                PropertyDraft.user_id == user_id,
            )
        ).scalar_one_or_none()


class ReviewRepository(BaseRepository):
    """Repository for Review model."""

    def __init__(self):
        super().__init__(Review)

    def get_by_property_and_user(self, session: Session, property_id: str, user_id: str) -> Optional[Review]:
        return session.execute(
            select(Review).where(Review.property_id == property_id, Review.user_id == user_id)
        ).scalars().first()

    def approved_for_property(self, session: Session, property_id: str) -> List[Review]:
        return list(session.execute(
            select(Review)
            .where(Review.property_id == property_id, Review.is_approved.is_(True))
            .order_by(Review.created_at.desc())
        ).scalars().all())

    @staticmethod
    def rating_stats(reviews: Iterable[Review]) -> Dict[str, Any]:
        """
        Summarize approved reviews.

        Returns:
            average_rating (one decimal, 0 when none), total_reviews and a
            per-star breakdown keyed 5..1
        """
        ratings = [review.rating for review in reviews]
        breakdown = {star: ratings.count(star) for star in (5, 4, 3, 2, 1)}
        average = round(sum(ratings) / len(ratings), 1) if ratings else 0
        return {
            "average_rating": average,
            "total_reviews": len(ratings),
            "rating_breakdown": breakdown,
        }


class SettingRepository(BaseRepository):
    """Repository for site settings."""

    def __init__(self):
        super().__init__(Setting)

    def as_dict(self, session: Session, keys: Optional[Iterable[str]] = None) -> Dict[str, str]:
        """
        Get settings as a key -> value mapping, optionally limited to keys.
        """
        query = select(Setting)
        if keys is not None:
            query = query.where(Setting.key.in_(list(keys)))
        return {row.key: row.value for row in session.execute(query).scalars().all()}

    def upsert(self, session: Session, key: str, value: str) -> Setting:
        """
        Insert or update a setting by key.
        """
        setting = session.execute(select(Setting).where(Setting.key == key)).scalar_one_or_none()
        if setting is None:
            setting = Setting(key=key, value=value)
            session.add(setting)
        else:
            setting.value = value
            setting.updated_at = utcnow()
        session.flush()
        logger.info("setting_upserted", key=key)
        return setting
