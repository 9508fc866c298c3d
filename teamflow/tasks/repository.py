"""
TEAMFLOW Core API - Task Repository

Repository pattern for task data access.
Includes MongoDB implementation for runtime and interface for testing.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Optional, List

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import ReturnDocument

from teamflow.tasks.enums import TaskStatus
from teamflow.tasks.models import Task


class TaskRepositoryInterface(ABC):
    """
    Abstract interface for task repository.

    Enables swapping implementations (MongoDB for runtime, in-memory for tests).
    All operations are scoped by owner_id to enforce ownership isolation.
    """

    @abstractmethod
    async def create(self, task: Task) -> Task:
        pass

    @abstractmethod
    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        pass

    @abstractmethod
    async def list_by_project(self, project_id: str, owner_id: str) -> List[Task]:
        """List tasks of one project for owner, newest first."""
        pass

    @abstractmethod
    async def update(self, task_id: str, owner_id: str, updates: dict) -> Optional[Task]:
        pass

    @abstractmethod
    async def delete(self, task_id: str, owner_id: str) -> bool:
        pass

    @abstractmethod
    async def delete_by_project(self, project_id: str, owner_id: str) -> int:
        """Delete every task of a project. Returns the number removed."""
        pass


class TaskRepository(TaskRepositoryInterface):
    """
    MongoDB implementation of the task repository.

    All queries are scoped by owner_id to enforce ownership isolation.
    """

    COLLECTION_NAME = "tasks"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def ensure_indexes(self) -> None:
        await self.collection.create_index([("project_id", 1), ("owner_id", 1), ("created_at", -1)])

    async def create(self, task: Task) -> Task:
        await self.collection.insert_one(task.to_dict())
        return task

    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        doc = await self.collection.find_one({"_id": task_id, "owner_id": owner_id})
        if doc is None:
            return None
        return Task.from_dict(doc)

    async def list_by_project(self, project_id: str, owner_id: str) -> List[Task]:
        query = {"project_id": project_id, "owner_id": owner_id}
        cursor = self.collection.find(query).sort("created_at", -1)
        tasks: List[Task] = []
        async for doc in cursor:
            tasks.append(Task.from_dict(doc))
        return tasks

    async def update(self, task_id: str, owner_id: str, updates: dict) -> Optional[Task]:
        updates = dict(updates)
        if "status" in updates:
            updates["status"] = TaskStatus(updates["status"]).value
        updates["updated_at"] = datetime.now(timezone.utc)

        result = await self.collection.find_one_and_update(
            {"_id": task_id, "owner_id": owner_id},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if result is None:
            return None
        return Task.from_dict(result)

    async def delete(self, task_id: str, owner_id: str) -> bool:
        result = await self.collection.delete_one({"_id": task_id, "owner_id": owner_id})
        return result.deleted_count > 0

    async def delete_by_project(self, project_id: str, owner_id: str) -> int:
        result = await self.collection.delete_many({"project_id": project_id, "owner_id": owner_id})
        return result.deleted_count


class InMemoryTaskRepository(TaskRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.
    """

    def __init__(self):
        self._tasks: dict[str, Task] = {}

    def clear(self) -> None:
        self._tasks.clear()

    def count(self) -> int:
        return len(self._tasks)

    async def create(self, task: Task) -> Task:
        self._tasks[task.id] = task
        return task

    async def get_by_id(self, task_id: str, owner_id: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is None or task.owner_id != owner_id:
            return None
        return task

    async def list_by_project(self, project_id: str, owner_id: str) -> List[Task]:
        results = [
            task for task in self._tasks.values()
            if task.project_id == project_id and task.owner_id == owner_id
        ]
        results.sort(key=lambda t: t.created_at, reverse=True)
        return results

    async def update(self, task_id: str, owner_id: str, updates: dict) -> Optional[Task]:
        task = await self.get_by_id(task_id, owner_id)
        if task is None:
            return None

        for key, value in updates.items():
            if key == "status":
                value = TaskStatus(value)
            if hasattr(task, key):
                setattr(task, key, value)

        task.updated_at = datetime.now(timezone.utc)
        return task

    async def delete(self, task_id: str, owner_id: str) -> bool:
        if await self.get_by_id(task_id, owner_id) is None:
            return False
        del self._tasks[task_id]
        return True

    async def delete_by_project(self, project_id: str, owner_id: str) -> int:
        doomed = [
            task_id for task_id, task in self._tasks.items()
            if task.project_id == project_id and task.owner_id == owner_id
        ]
        for task_id in doomed:
            del self._tasks[task_id]
        return len(doomed)
