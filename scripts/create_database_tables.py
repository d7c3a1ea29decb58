"""
Create Database Tables Using SQLAlchemy

This script creates all database tables directly using SQLAlchemy's create_all()
method and seeds the default amenities. This bypasses Alembic migrations and is
useful for local SQLite setups.
"""
import argparse
import sys
from pathlib import Path

# Add parent directory to Python path
sys.path.insert(0, str(Path(__file__).parent.parent))

import sqlalchemy as sa

from src.realty.db.repository import AmenityRepository
from src.realty.db.session import create_all_tables, drop_all_tables, engine, get_db_session
from src.realty.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def main():
    """Create all database tables."""
    parser = argparse.ArgumentParser(description="Create the database schema and seed amenities")
    parser.add_argument(
        '--reset',
        action='store_true',
        help='Drop existing tables first (deletes all data)'
    )
    args = parser.parse_args()

    setup_logging()
    logger.info("Starting database table creation...")

    if args.reset:
        logger.warning("Dropping existing tables for clean setup...")
        drop_all_tables()

    create_all_tables()

    with get_db_session() as session:
        seeded = AmenityRepository().seed_defaults(session)
    logger.info(f"Seeded {seeded} default amenities")

    # Verify tables were created
    tables = sorted(sa.inspect(engine).get_table_names())
    logger.info(f"Database has {len(tables)} tables:")
    for table in tables:
        logger.info(f"  - {table}")

    logger.info("Database setup complete!")


if __name__ == "__main__":
    main()
