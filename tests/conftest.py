"""
Shared fixtures: in-memory database, API client and seeded accounts.
"""
import copy
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.settings import settings
from src.realty.api.auth import create_access_token, get_password_hash
from src.realty.api.dependencies import get_db, get_media_client
from src.realty.api.main import app
from src.realty.api.rate_limit import limiter
from src.realty.db.base import Base, import_all_models
from src.realty.db.models import User
from src.realty.db.repository import PropertyRepository
from src.realty.db.session import build_engine
from src.realty.media.imagekit import ImageKitClient

TEST_PASSWORD = "Secret123"

LISTING_PAYLOAD = {
    "category": "Residential",
    "purpose": "Buy",
    "subtype": "Apartment",
    "price": 5000000,
    "area": 1200,
    "areaUnit": "sq.ft",
    "bhk": "2 BHK",
    "bathrooms": 2,
    "furnishing": "Furnished",
    "description": "Sunny flat close to the IT park",
    "location": {"city": "Pune", "locality": "Baner", "state": "Maharashtra"},
    "amenities": ["Gym", "Parking"],
    "images": [{"url": "https://ik.imagekit.io/demo/a.jpg", "fileId": "img-1"}],
}


@pytest.fixture(scope="session")
def password_hash():
    """Hash the shared test password once; bcrypt is slow."""
    return get_password_hash(TEST_PASSWORD)


@pytest.fixture(scope="function")
def engine():
    """Single-connection in-memory SQLite database."""
    test_engine = build_engine("sqlite://", poolclass=StaticPool)
    import_all_models()
    Base.metadata.create_all(test_engine)

    yield test_engine

    Base.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture(scope="function")
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture(scope="function")
def test_db(session_factory):
    """Database session for direct repository access."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def media_client():
    """ImageKit client double; no network calls."""
    client = MagicMock(spec=ImageKitClient)
    client.delete_files.return_value = {"total": 0, "successful": 0, "failed": 0, "results": []}
    return client


@pytest.fixture(scope="function")
def client(session_factory, media_client, monkeypatch):
    """API client bound to the test database with rate limiting off."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    monkeypatch.setattr(settings, "rate_limit_enabled", False)
    limiter.reset()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_media_client] = lambda: media_client

    yield TestClient(app, raise_server_exceptions=False)

    app.dependency_overrides.clear()
    limiter.reset()


@pytest.fixture
def make_user(test_db, password_hash):
    """Create a user; keyword arguments override the defaults."""
    counter = {"n": 0}

    def _make_user(**kwargs):
        counter["n"] += 1
        values = {
            "name": f"Test User {counter['n']}",
            "email": f"user{counter['n']}@example.com",
            "phone": "+91 9876543210",
            "password_hash": password_hash,
            "role": "user",
        }
        values.update(kwargs)
        user = User(**values)
        test_db.add(user)
        test_db.commit()
        return user

    return _make_user


@pytest.fixture
def admin_user(make_user):
    return make_user(name="Site Admin", email="admin@example.com", role="admin")


@pytest.fixture
def regular_user(make_user):
    return make_user(name="Priya Shah", email="priya@example.com")


def _headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id, user.email, user.role)}"}


@pytest.fixture
def admin_headers(admin_user):
    return _headers(admin_user)


@pytest.fixture
def user_headers(regular_user):
    return _headers(regular_user)


@pytest.fixture
def listing_payload():
    """Factory for a valid listing payload with overrides."""
    def _payload(**overrides):
        payload = copy.deepcopy(LISTING_PAYLOAD)
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def make_property(test_db, listing_payload):
    """Create a listing with analytics row; payload keys may be overridden."""
    repo = PropertyRepository()

    def _make_property(title="Two bedroom flat in Baner", status="Active", views=0, **payload_overrides):
        property_obj = repo.create_listing(test_db, title=title, payload=listing_payload(**payload_overrides))
        property_obj.status = status
        property_obj.views = views
        test_db.commit()
        return property_obj

    return _make_property
