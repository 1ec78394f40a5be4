"""Script to create every table directly from the model metadata."""

import asyncio

from sqlalchemy import text

from doutor_agenda.database import engine, is_sqlite_url
from doutor_agenda.models import metadata


async def init_db() -> None:
    """Initialize the database by creating all tables."""
    async with engine.begin() as conn:
        if not is_sqlite_url(str(engine.url)):
            await conn.execute(text('CREATE EXTENSION IF NOT EXISTS "pgcrypto"'))

        await conn.run_sync(metadata.create_all)

    await engine.dispose()
    print("✓ Database initialized successfully!")


if __name__ == "__main__":
    asyncio.run(init_db())
