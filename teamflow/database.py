"""
TEAMFLOW Core API - Database Module

MongoDB connection management using Motor (async driver).
"""

import logging

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase

from fastapi import Request

from teamflow.config import Settings

logger = logging.getLogger(__name__)


class Database:
    """MongoDB database connection manager."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: AsyncIOMotorClient | None = None
        self.db: AsyncIOMotorDatabase | None = None

    async def connect(self) -> None:
        """Connect to MongoDB."""
        self.client = AsyncIOMotorClient(self.settings.MONGODB_URI)
        self.db = self.client[self.settings.MONGODB_DATABASE]
        logger.info("Connected to MongoDB database %s", self.settings.MONGODB_DATABASE)

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            self.client = None
            self.db = None
            logger.info("Disconnected from MongoDB")

    def get_database(self) -> AsyncIOMotorDatabase:
        """Get the database instance."""
        if self.db is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self.db


async def get_database(request: Request) -> AsyncIOMotorDatabase:
    """Dependency to get the database instance of the running application."""
    return request.app.state.database.get_database()
