"""
TEAMFLOW Core API - GraphQL Context

Per-request context handed to every resolver. The bearer token is resolved
leniently here; each resolver's service call decides whether an anonymous
caller is acceptable.
"""

from typing import Annotated

from fastapi import Depends
from strawberry.fastapi import BaseContext

from teamflow.auth.dependencies import CurrentIdentity
from teamflow.auth.identity import RequestIdentity
from teamflow.projects.dependencies import get_project_repository
from teamflow.projects.repository import ProjectRepositoryInterface
from teamflow.projects.service import ProjectService
from teamflow.tasks.dependencies import get_task_repository
from teamflow.tasks.repository import TaskRepositoryInterface
from teamflow.tasks.service import TaskService


class GraphQLContext(BaseContext):
    def __init__(
        self,
        identity: RequestIdentity,
        project_service: ProjectService,
        task_service: TaskService,
    ):
        super().__init__()
        self.identity = identity
        self.project_service = project_service
        self.task_service = task_service


async def get_project_service(
    repository: Annotated[ProjectRepositoryInterface, Depends(get_project_repository)],
    task_repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
) -> ProjectService:
    """Dependency to get project service instance."""
    return ProjectService(repository, task_repository)


async def get_task_service(
    repository: Annotated[TaskRepositoryInterface, Depends(get_task_repository)],
    project_repository: Annotated[ProjectRepositoryInterface, Depends(get_project_repository)],
) -> TaskService:
    """Dependency to get task service instance."""
    return TaskService(repository, project_repository)


async def get_context(
    identity: CurrentIdentity,
    project_service: Annotated[ProjectService, Depends(get_project_service)],
    task_service: Annotated[TaskService, Depends(get_task_service)],
) -> GraphQLContext:
    return GraphQLContext(
        identity=identity,
        project_service=project_service,
        task_service=task_service,
    )
