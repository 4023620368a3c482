"""
Database setup script.

Creates the MongoDB indexes and loads the demo events, news and members
into collections that are still empty. Safe to run repeatedly.

Usage:
    python -m scripts.setup_db
"""

import asyncio
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from core.config import settings
from core.storage.mongodb import MongoDBStorage
from core.storage.seed import demo_seed


async def setup_database():
    """Create indexes and seed empty collections."""

    print("Connecting to MongoDB...")
    print(f"Database: {settings.mongodb_database}")

    storage = MongoDBStorage(
        connection_string=settings.mongodb_url,
        database_name=settings.mongodb_database,
        connect_timeout_ms=settings.mongodb_connect_timeout_ms,
    )

    # setup() also creates the unique and sort indexes
    await storage.setup()
    print("Indexes ensured")

    try:
        collections = storage.context().collections()
        for name, documents in demo_seed().items():
            collection = collections[name]
            if await collection.count() > 0:
                print(f"Collection already populated: {name}")
                continue
            for document in documents:
                await collection.insert(document)
            print(f"Seeded {len(documents)} documents into {name}")

        print("Database setup complete!")
    finally:
        await storage.close()


if __name__ == "__main__":
    asyncio.run(setup_database())
