"""Migration: Add resolved_at field to feedback table."""

import asyncio
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from app.config import load_env_file, get_database_url


async def migrate():
    """Add resolved_at column to feedback table."""
    load_env_file()
    database_url = get_database_url()

    engine = create_async_engine(database_url, echo=False)
    async_session = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with async_session() as session:
            try:
                result = await session.execute(text("""
                    SELECT column_name
                    FROM information_schema.columns
                    WHERE table_name='feedback' AND column_name='resolved_at'
                """))
                if result.scalar_one_or_none() is not None:
                    print("Column 'resolved_at' already exists in 'feedback' table. Skipping migration.")
                    return

                await session.execute(text("""
                    ALTER TABLE feedback
                    ADD COLUMN resolved_at TIMESTAMP WITH TIME ZONE
                """))

                await session.commit()
                print("✓ Successfully added 'resolved_at' column to 'feedback' table")
            except Exception as e:
                await session.rollback()
                print(f"✗ Migration failed: {e}")
                raise
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(migrate())
