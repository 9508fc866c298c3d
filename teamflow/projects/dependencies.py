from typing import Annotated

from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamflow.database import get_database
from teamflow.projects.repository import ProjectRepository, ProjectRepositoryInterface


async def get_project_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> ProjectRepositoryInterface:
    """Dependency to get project repository instance."""
    return ProjectRepository(db)
