"""Migration: Add feedback table."""

import asyncio
import sys
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from sqlalchemy import text
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker

from app.config import load_env_file, get_database_url

CREATE_TABLE = """
    CREATE TABLE feedback (
        id SERIAL PRIMARY KEY,
        source VARCHAR(20) NOT NULL CHECK (source IN ('discord', 'twitter', 'github', 'support')),
        source_id VARCHAR(200),
        author VARCHAR(200) NOT NULL,
        content TEXT NOT NULL,
        created_at TIMESTAMP WITH TIME ZONE NOT NULL DEFAULT NOW(),

        -- Enrichment fields
        urgency VARCHAR(20) CHECK (urgency IN ('low', 'medium', 'high', 'critical')),
        sentiment VARCHAR(20) CHECK (sentiment IN ('positive', 'neutral', 'negative')),
        category VARCHAR(20) CHECK (category IN ('bug', 'feature_request', 'question', 'complaint', 'praise', 'other')),

        -- Triage fields
        triage_status VARCHAR(20) CHECK (triage_status IN ('escalate', 'backlog', 'duplicate', 'noise')),
        triaged_at TIMESTAMP WITH TIME ZONE,

        CONSTRAINT uq_feedback_source_source_id UNIQUE (source, source_id)
    );
"""

INDEXES = [
    "CREATE INDEX IF NOT EXISTS ix_feedback_triage_status ON feedback(triage_status);",
    "CREATE INDEX IF NOT EXISTS ix_feedback_source ON feedback(source);",
    "CREATE INDEX IF NOT EXISTS ix_feedback_urgency ON feedback(urgency);",
    "CREATE INDEX IF NOT EXISTS ix_feedback_created_at ON feedback(created_at);",
]


async def main():
    """Run migration to add feedback table."""
    load_env_file()
    database_url = get_database_url()

    engine = create_async_engine(database_url, echo=False)
    async_session = async_sessionmaker(engine, expire_on_commit=False)

    try:
        async with async_session() as session:
            try:
                # Check if feedback table already exists
                result = await session.execute(text("""
                    SELECT EXISTS (
                        SELECT FROM information_schema.tables
                        WHERE table_schema = 'public'
                        AND table_name = 'feedback'
                    );
                """))
                if result.scalar():
                    print("✓ Feedback table already exists, skipping migration")
                    return

                print("Creating feedback table...")
                await session.execute(text(CREATE_TABLE))
                for stmt in INDEXES:
                    await session.execute(text(stmt))

                await session.commit()
                print("✓ Feedback table created successfully")
            except Exception as e:
                await session.rollback()
                print(f"✗ Error during migration: {e}")
                raise
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
