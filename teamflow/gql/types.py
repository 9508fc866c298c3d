"""
TEAMFLOW Core API - GraphQL Types

Object and input types for projects and tasks.
"""

from datetime import datetime
from typing import Any, List, Optional

import strawberry
from strawberry.types import Info

from teamflow.projects.models import Project
from teamflow.tasks.enums import TaskStatus
from teamflow.tasks.models import Task

TaskStatusEnum = strawberry.enum(TaskStatus, name="TaskStatus")


@strawberry.type(name="Task")
class TaskType:
    id: strawberry.ID
    title: str
    description: Optional[str]
    status: TaskStatusEnum
    user_id: str
    project_id: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, task: Task) -> "TaskType":
        return cls(
            id=strawberry.ID(task.id),
            title=task.title,
            description=task.description,
            status=task.status,
            user_id=task.owner_id,
            project_id=task.project_id,
            created_at=task.created_at,
            updated_at=task.updated_at,
        )


@strawberry.type(name="Project")
class ProjectType:
    id: strawberry.ID
    name: str
    description: Optional[str]
    user_id: str
    created_at: datetime
    updated_at: datetime

    @strawberry.field
    async def tasks(self, info: Info) -> List[TaskType]:
        tasks = await info.context.task_service.list_tasks(info.context.identity, str(self.id))
        return [TaskType.from_model(task) for task in tasks]

    @classmethod
    def from_model(cls, project: Project) -> "ProjectType":
        return cls(
            id=strawberry.ID(project.id),
            name=project.name,
            description=project.description,
            user_id=project.owner_id,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )


@strawberry.input
class CreateProjectInput:
    name: str
    description: Optional[str] = None


@strawberry.input
class UpdateProjectInput:
    id: strawberry.ID
    name: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET


@strawberry.input
class CreateTaskInput:
    title: str
    project_id: strawberry.ID
    description: Optional[str] = None


@strawberry.input
class UpdateTaskInput:
    id: strawberry.ID
    title: Optional[str] = strawberry.UNSET
    description: Optional[str] = strawberry.UNSET
    status: Optional[TaskStatusEnum] = strawberry.UNSET


def provided_fields(data: Any, *names: str) -> dict:
    """Fields of an input object that the client actually sent."""
    return {
        name: getattr(data, name)
        for name in names
        if getattr(data, name) is not strawberry.UNSET
    }
