"""
TEAMFLOW Core API - Project Repository

Repository pattern for project data access.
Includes MongoDB implementation for runtime and an in-memory one for tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import List, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from teamflow.projects.models import Project


class ProjectRepositoryInterface(ABC):
    """
    Abstract interface for project repository.

    All operations are scoped by owner_id to enforce ownership isolation.
    """

    @abstractmethod
    async def create(self, project: Project) -> Project:
        pass

    @abstractmethod
    async def get_by_id(self, project_id: str, owner_id: str) -> Optional[Project]:
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> List[Project]:
        """List projects for owner, newest first."""
        pass

    @abstractmethod
    async def update(self, project_id: str, owner_id: str, updates: dict) -> Optional[Project]:
        pass

    @abstractmethod
    async def delete(self, project_id: str, owner_id: str) -> bool:
        pass


class ProjectRepository(ProjectRepositoryInterface):
    """MongoDB implementation of the project repository."""

    COLLECTION_NAME = "projects"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("owner_id", 1), ("created_at", -1)])

    async def create(self, project: Project) -> Project:
        await self.collection.insert_one(project.to_dict())
        return project

    async def get_by_id(self, project_id: str, owner_id: str) -> Optional[Project]:
        doc = await self.collection.find_one({"_id": project_id, "owner_id": owner_id})
        if doc is None:
            return None
        return Project.from_dict(doc)

    async def list_by_owner(self, owner_id: str) -> List[Project]:
        cursor = self.collection.find({"owner_id": owner_id}).sort("created_at", -1)
        projects: List[Project] = []
        async for doc in cursor:
            projects.append(Project.from_dict(doc))
        return projects

    async def update(self, project_id: str, owner_id: str, updates: dict) -> Optional[Project]:
        updates["updated_at"] = datetime.now(timezone.utc)

        result = await self.collection.find_one_and_update(
            {"_id": project_id, "owner_id": owner_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if result is None:
            return None
        return Project.from_dict(result)

    async def delete(self, project_id: str, owner_id: str) -> bool:
        result = await self.collection.delete_one({"_id": project_id, "owner_id": owner_id})
        return result.deleted_count > 0


class InMemoryProjectRepository(ProjectRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._projects: dict[str, Project] = {}

    def clear(self) -> None:
        self._projects.clear()

    async def create(self, project: Project) -> Project:
        self._projects[project.id] = project
        return project

    async def get_by_id(self, project_id: str, owner_id: str) -> Optional[Project]:
        project = self._projects.get(project_id)
        if project is None or project.owner_id != owner_id:
            return None
        return project

    async def list_by_owner(self, owner_id: str) -> List[Project]:
        results = [p for p in self._projects.values() if p.owner_id == owner_id]
        results.sort(key=lambda p: p.created_at, reverse=True)
        return results

    async def update(self, project_id: str, owner_id: str, updates: dict) -> Optional[Project]:
        project = await self.get_by_id(project_id, owner_id)
        if project is None:
            return None

        for key, value in updates.items():
            if hasattr(project, key):
                setattr(project, key, value)

        project.updated_at = datetime.now(timezone.utc)
        return project

    async def delete(self, project_id: str, owner_id: str) -> bool:
        if await self.get_by_id(project_id, owner_id) is None:
            return False
        del self._projects[project_id]
        return True
