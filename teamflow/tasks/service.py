"""
TEAMFLOW Core API - Task Service

Business logic for task operations. Tasks are always scoped to the requesting
identity, and operations naming a project re-check that the project is theirs.
"""

import logging
from typing import Any, List, Mapping, Optional

from teamflow.auth.identity import RequestIdentity, require_identity
from teamflow.errors import NotFound, ValidationError
from teamflow.projects.repository import ProjectRepositoryInterface
from teamflow.tasks.enums import TaskStatus
from teamflow.tasks.models import Task
from teamflow.tasks.repository import TaskRepositoryInterface

logger = logging.getLogger(__name__)


def _clean_title(title: Any) -> str:
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("Task title is required")
    return title.strip()


def _clean_description(description: Any) -> Optional[str]:
    if description is not None and not isinstance(description, str):
        raise ValidationError("Task description must be a string")
    return description


def parse_status(value: Any) -> TaskStatus:
    """Accept a TaskStatus or one of its string values."""
    try:
        return TaskStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in TaskStatus)
        raise ValidationError(f"Invalid task status {value!r}; expected one of {allowed}")


class TaskService:
    """Service layer for task business logic."""

    def __init__(
        self,
        repository: TaskRepositoryInterface,
        project_repository: ProjectRepositoryInterface,
    ):
        self.repository = repository
        self.project_repository = project_repository

    async def _require_project(self, project_id: str, owner_id: str) -> None:
        if await self.project_repository.get_by_id(project_id, owner_id) is None:
            raise NotFound("Project not found")

    async def list_tasks(self, identity: RequestIdentity, project_id: str) -> List[Task]:
        """List the tasks of a project owned by the caller."""
        user = require_identity(identity)
        await self._require_project(project_id, user.id)
        return await self.repository.list_by_project(project_id, user.id)

    async def get_task(self, identity: RequestIdentity, task_id: str) -> Task:
        user = require_identity(identity)
        task = await self.repository.get_by_id(task_id, user.id)
        if task is None:
            raise NotFound("Task not found")
        return task

    async def create_task(
        self,
        identity: RequestIdentity,
        project_id: str,
        title: str,
        description: Optional[str] = None,
    ) -> Task:
        """Create a task in the BACKLOG column of one of the caller's projects."""
        user = require_identity(identity)
        task = Task.create(
            owner_id=user.id,
            project_id=project_id,
            title=_clean_title(title),
            description=_clean_description(description),
        )
        await self._require_project(project_id, user.id)
        await self.repository.create(task)
        logger.info("Created task id=%s project=%s", task.id, project_id)
        return task

    async def update_task(
        self,
        identity: RequestIdentity,
        task_id: str,
        changes: Mapping[str, Any],
    ) -> Task:
        """
        Apply only the fields present in ``changes``.

        Any status may be set from any other status.
        """
        user = require_identity(identity)

        updates: dict = {}
        for key, value in changes.items():
            if key == "title":
                updates["title"] = _clean_title(value)
            elif key == "description":
                updates["description"] = _clean_description(value)
            elif key == "status":
                updates["status"] = parse_status(value)
            else:
                raise ValidationError(f"Unknown task field: {key}")

        if not updates:
            return await self.get_task(identity, task_id)

        task = await self.repository.update(task_id, user.id, updates)
        if task is None:
            raise NotFound("Task not found")
        return task

    async def delete_task(self, identity: RequestIdentity, task_id: str) -> bool:
        user = require_identity(identity)
        if not await self.repository.delete(task_id, user.id):
            raise NotFound("Task not found")
        return True
