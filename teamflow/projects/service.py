"""
TEAMFLOW Core API - Project Service

Business logic for projects. Every operation is scoped to the requesting
identity; another user's project is reported exactly like a missing one.
"""

import logging
from typing import Any, List, Mapping, Optional

from teamflow.auth.identity import RequestIdentity, require_identity
from teamflow.errors import NotFound, ValidationError
from teamflow.projects.models import Project
from teamflow.projects.repository import ProjectRepositoryInterface
from teamflow.tasks.repository import TaskRepositoryInterface

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ("name", "description")


def _clean_name(name: Any) -> str:
    if not isinstance(name, str) or not name.strip():
        raise ValidationError("Project name is required")
    return name.strip()


def _clean_description(description: Any) -> Optional[str]:
    if description is not None and not isinstance(description, str):
        raise ValidationError("Project description must be a string")
    return description


class ProjectService:
    """Service layer for project business logic."""

    def __init__(
        self,
        repository: ProjectRepositoryInterface,
        task_repository: TaskRepositoryInterface,
    ):
        self.repository = repository
        self.task_repository = task_repository

    async def list_projects(self, identity: RequestIdentity) -> List[Project]:
        user = require_identity(identity)
        return await self.repository.list_by_owner(user.id)

    async def get_project(self, identity: RequestIdentity, project_id: str) -> Project:
        user = require_identity(identity)
        project = await self.repository.get_by_id(project_id, user.id)
        if project is None:
            raise NotFound("Project not found")
        return project

    async def create_project(
        self,
        identity: RequestIdentity,
        name: str,
        description: Optional[str] = None,
    ) -> Project:
        user = require_identity(identity)
        project = Project.create(
            owner_id=user.id,
            name=_clean_name(name),
            description=_clean_description(description),
        )
        await self.repository.create(project)
        logger.info("Created project id=%s owner=%s", project.id, user.id)
        return project

    async def update_project(
        self,
        identity: RequestIdentity,
        project_id: str,
        changes: Mapping[str, Any],
    ) -> Project:
        """Apply only the fields present in ``changes``."""
        user = require_identity(identity)

        updates: dict = {}
        for key, value in changes.items():
            if key not in UPDATABLE_FIELDS:
                raise ValidationError(f"Unknown project field: {key}")
            if key == "name":
                updates["name"] = _clean_name(value)
            else:
                updates["description"] = _clean_description(value)

        if not updates:
            return await self.get_project(identity, project_id)

        project = await self.repository.update(project_id, user.id, updates)
        if project is None:
            raise NotFound("Project not found")
        return project

    async def delete_project(self, identity: RequestIdentity, project_id: str) -> bool:
        """
        Delete a project together with its tasks.

        Tasks are removed before the project, so no task outlives its project.
        """
        user = require_identity(identity)
        if await self.repository.get_by_id(project_id, user.id) is None:
            raise NotFound("Project not found")
        removed = await self.task_repository.delete_by_project(project_id, user.id)
        if not await self.repository.delete(project_id, user.id):
            raise NotFound("Project not found")
        logger.info("Deleted project id=%s with %d task(s)", project_id, removed)
        return True
