"""
FastAPI Dependencies

Provides dependency injection for database sessions and the
media client.
"""
from typing import Generator

from sqlalchemy.orm import Session

from src.realty.db.session import SessionLocal
from src.realty.media.imagekit import ImageKitClient, get_imagekit_client


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency.

    Handlers commit their own writes; anything left pending when a handler
    raises is rolled back.

    Yields:
        SQLAlchemy database session
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()




def get_media_client() -> ImageKitClient:
    """
    ImageKit client dependency.
    """
    return get_imagekit_client()
