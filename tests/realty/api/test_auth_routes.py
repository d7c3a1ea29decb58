"""
Tests for Authentication API

Tests registration, login, profile access and token verification.
"""
from datetime import timedelta

from config.settings import settings
from src.realty.api.auth import create_access_token, decode_access_token, verify_password
from src.realty.db.models import User

REGISTRATION = {
    "name": "Asha Rao",
    "email": "Asha@Example.com",
    "phone": "+91 9876543210",
    "password": "Secret123",
}


class TestRegister:
    """Tests for POST /api/auth/register."""

    def test_register_creates_user(self, client, test_db):
        """Emails are stored lower-cased and passwords hashed."""
        response = client.post("/api/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "User registered successfully"
        assert body["user"]["email"] == "asha@example.com"

        user = test_db.query(User).filter_by(email="asha@example.com").one()
        assert user.role == "user"
        assert user.password_hash != "Secret123"
        assert verify_password("Secret123", user.password_hash)

    def test_duplicate_email_rejected(self, client, regular_user):
        response = client.post("/api/auth/register", json={**REGISTRATION, "email": regular_user.email})

        assert response.status_code == 400
        assert response.json() == {"error": "User with this email already exists"}

    def test_weak_password_rejected(self, client):
        """Validation failures list each field with a readable message."""
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "short"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Validation failed"
        assert {"field": "password", "message": "Password must be at least 8 characters"} in body["errors"]

    def test_password_needs_mixed_characters(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "password": "alllowercase1"})

        assert response.status_code == 400
        assert response.json()["errors"][0]["message"].startswith("Password must contain")

    def test_invalid_phone_rejected(self, client):
        response = client.post("/api/auth/register", json={**REGISTRATION, "phone": "call me maybe"})

        assert response.status_code == 400
        assert response.json()["errors"][0] == {"field": "phone", "message": "Invalid phone number format"}


class TestLogin:
    """Tests for POST /api/auth/login."""

    def test_login_returns_token(self, client, regular_user):
        response = client.post("/api/auth/login", json={"email": "PRIYA@example.com", "password": "Secret123"})

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Login successful"
        assert body["user"]["role"] == "user"

        identity = decode_access_token(body["token"])
        assert identity.id == regular_user.id
        assert identity.email == "priya@example.com"

    def test_wrong_password(self, client, regular_user):
        response = client.post("/api/auth/login", json={"email": regular_user.email, "password": "Wrong1234"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid email or password"}

    def test_unknown_email(self, client):
        response = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": "Secret123"})

        assert response.status_code == 401

    def test_deactivated_account(self, client, make_user):
        user = make_user(is_active=False)

        response = client.post("/api/auth/login", json={"email": user.email, "password": "Secret123"})

        assert response.status_code == 403
        assert response.json() == {"error": "Account is deactivated"}

    def test_login_attempts_are_rate_limited(self, client, regular_user, monkeypatch):
        """The auth limiter answers 429 with Retry-After once exhausted."""
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "redis_url", None)
        monkeypatch.setattr(settings, "auth_rate_limit", 2)
        credentials = {"email": regular_user.email, "password": "Wrong1234"}

        statuses = [client.post("/api/auth/login", json=credentials).status_code for _ in range(3)]

        assert statuses == [401, 401, 429]
        response = client.post("/api/auth/login", json=credentials)
        assert response.json() == {"error": "Too many authentication attempts, please try again later"}
        assert int(response.headers["Retry-After"]) >= 1

    def test_forwarded_header_does_not_reset_limit(self, client, regular_user, monkeypatch):
        """Clients cannot pick a fresh bucket by rotating X-Forwarded-For."""
        monkeypatch.setattr(settings, "rate_limit_enabled", True)
        monkeypatch.setattr(settings, "redis_url", None)
        monkeypatch.setattr(settings, "auth_rate_limit", 5)
        credentials = {"email": regular_user.email, "password": "Wrong1234"}

        statuses = [
            client.post(
                "/api/auth/login", json=credentials, headers={"X-Forwarded-For": f"10.0.0.{i}"}
            ).status_code
            for i in range(8)
        ]

        assert statuses == [401] * 5 + [429] * 3


class TestProfile:
    """Tests for the profile endpoints."""

    def test_requires_token(self, client):
        response = client.get("/api/auth/profile")

        assert response.status_code == 401
        assert response.json() == {"error": "No token provided"}

    def test_invalid_token(self, client):
        response = client.get("/api/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid token"}

    def test_expired_token(self, client, regular_user):
        token = create_access_token(regular_user.id, regular_user.email, "user", expires_delta=timedelta(seconds=-10))

        response = client.get("/api/auth/profile", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 401
        assert response.json() == {"error": "Token expired"}

    def test_get_profile(self, client, regular_user, user_headers):
        response = client.get("/api/auth/profile", headers=user_headers)

        assert response.status_code == 200
        user = response.json()["user"]
        assert user["email"] == regular_user.email
        assert "password_hash" not in user

    def test_update_profile(self, client, user_headers):
        response = client.put("/api/auth/profile", json={"name": "Priya S."}, headers=user_headers)

        assert response.status_code == 200
        assert response.json()["user"]["name"] == "Priya S."
        assert response.json()["user"]["phone"] == "+91 9876543210"

    def test_update_without_fields(self, client, user_headers):
        response = client.put("/api/auth/profile", json={}, headers=user_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "No fields to update"}

    def test_update_name_validated(self, client, user_headers):
        cleared = client.put("/api/auth/profile", json={"name": None}, headers=user_headers)
        too_long = client.put("/api/auth/profile", json={"name": "x" * 500}, headers=user_headers)

        assert cleared.status_code == 400
        assert cleared.json()["errors"] == [{"field": "name", "message": "Name is required"}]
        assert too_long.status_code == 400
        assert too_long.json()["errors"] == [
            {"field": "name", "message": "Name must be between 2 and 100 characters"}
        ]

    def test_update_phone(self, client, user_headers):
        invalid = client.put("/api/auth/profile", json={"phone": "call me"}, headers=user_headers)
        cleared = client.put("/api/auth/profile", json={"phone": "  "}, headers=user_headers)
        trimmed = client.put("/api/auth/profile", json={"name": "  Priya  "}, headers=user_headers)

        assert invalid.json()["errors"] == [{"field": "phone", "message": "Invalid phone number format"}]
        assert cleared.json()["user"]["phone"] is None
        assert trimmed.json()["user"]["name"] == "Priya"


class TestVerify:
    """Tests for GET /api/auth/verify."""

    def test_valid_token(self, client, regular_user, user_headers):
        response = client.get("/api/auth/verify", headers=user_headers)

        assert response.status_code == 200
        assert response.json()["valid"] is True
        assert response.json()["user"]["id"] == regular_user.id

    def test_missing_or_bad_token(self, client):
        assert client.get("/api/auth/verify").json() == {"valid": False}
        assert client.get("/api/auth/verify", headers={"Authorization": "Bearer junk"}).status_code == 401

    def test_deactivated_user(self, client, test_db, regular_user, user_headers):
        regular_user.is_active = False
        test_db.commit()

        response = client.get("/api/auth/verify", headers=user_headers)

        assert response.status_code == 401
        assert response.json() == {"valid": False}
