"""
Authentication Router

Endpoints for registration, login and the caller's own profile.
"""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.realty.api.auth import (
    TokenUser,
    create_access_token,
    get_current_user,
    get_optional_user,
    get_password_hash,
    verify_password,
)
from src.realty.api.dependencies import get_db
from src.realty.api.rate_limit import auth_rate_limit
from src.realty.api.schemas import LoginRequest, ProfileUpdate, RegisterRequest, UserOut
from src.realty.db.base import utcnow
from src.realty.db.repository import UserRepository
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/api/auth", tags=["authentication"])

users = UserRepository()


@router.post("/register", status_code=status.HTTP_201_CREATED, dependencies=[Depends(auth_rate_limit)])
def register(body: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user account.

    Returns:
        Message and the new user's id, name and email

    Raises:
        HTTPException: If the email is already registered
    """
    if users.get_by_email(db, body.email):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    user = users.create(
        db,
        name=body.name,
        email=body.email,
        phone=body.phone or None,
        password_hash=get_password_hash(body.password),
        email_verified=True,
    )
    db.commit()
    logger.info("user_registered", user_id=user.id)

    return {
        "message": "User registered successfully",
        "user": {"id": user.id, "name": user.name, "email": user.email},
    }


@router.post("/login", dependencies=[Depends(auth_rate_limit)])
def login(body: LoginRequest, db: Session = Depends(get_db)):
    """
    Login and get a JWT access token.

    Returns:
        Message, token and the user's public details

    Raises:
        HTTPException: 401 on bad credentials, 403 for deactivated accounts
    """
    user = users.get_by_email(db, body.email)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    if not verify_password(body.password, user.password_hash):
        logger.info("login_failed", user_id=user.id)
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = create_access_token(user.id, user.email, user.role)
    logger.info("user_logged_in", user_id=user.id, role=user.role)

    return {
        "message": "Login successful",
        "token": token,
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "email_verified": user.email_verified,
        },
    }


@router.get("/profile")
def get_profile(current_user: TokenUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Get the current user's profile.
    """
    user = users.get_by_id(db, current_user.id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"user": UserOut.model_validate(user)}


@router.put("/profile")
def update_profile(
    body: ProfileUpdate,
    current_user: TokenUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Update name and/or phone of the current user.
    """
    changes = body.model_dump(exclude_unset=True)
    if not changes:
        raise HTTPException(status_code=400, detail="No fields to update")

    user = users.update(db, current_user.id, **changes, updated_at=utcnow())
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    db.commit()

    return {"message": "Profile updated successfully", "user": UserOut.model_validate(user)}


@router.get("/verify")
def verify_token(
    current_user: Optional[TokenUser] = Depends(get_optional_user),
    db: Session = Depends(get_db),
):
    """
    Check that the caller's token belongs to an active account.
    """
    if current_user is None:
        return JSONResponse(status_code=401, content={"valid": False})

    user = users.get_by_id(db, current_user.id)
    if not user or not user.is_active:
        return JSONResponse(status_code=401, content={"valid": False})

    return {
        "valid": True,
        "user": {
            "id": user.id,
            "name": user.name,
            "email": user.email,
            "role": user.role,
            "email_verified": user.email_verified,
        },
    }
