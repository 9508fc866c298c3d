"""
TEAMFLOW Core API - GraphQL Schema

Resolvers are thin: they pass the request identity to the services, which
enforce authentication and ownership. Domain errors reach the client with
their kind in ``extensions.code``; anything else is masked.
"""

import logging
from typing import List, Optional

import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.types import ExecutionContext, Info

from teamflow.errors import AppError
from teamflow.gql.types import (
    CreateProjectInput,
    CreateTaskInput,
    ProjectType,
    TaskType,
    UpdateProjectInput,
    UpdateTaskInput,
    provided_fields,
)

logger = logging.getLogger(__name__)


@strawberry.type
class Query:
    @strawberry.field
    async def projects(self, info: Info) -> List[ProjectType]:
        projects = await info.context.project_service.list_projects(info.context.identity)
        return [ProjectType.from_model(project) for project in projects]

    @strawberry.field
    async def project(self, info: Info, id: strawberry.ID) -> Optional[ProjectType]:
        project = await info.context.project_service.get_project(info.context.identity, str(id))
        return ProjectType.from_model(project)

    @strawberry.field
    async def tasks(self, info: Info, project_id: strawberry.ID) -> List[TaskType]:
        tasks = await info.context.task_service.list_tasks(info.context.identity, str(project_id))
        return [TaskType.from_model(task) for task in tasks]

    @strawberry.field
    async def task(self, info: Info, id: strawberry.ID) -> Optional[TaskType]:
        task = await info.context.task_service.get_task(info.context.identity, str(id))
        return TaskType.from_model(task)


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_project(self, info: Info, input: CreateProjectInput) -> ProjectType:
        project = await info.context.project_service.create_project(
            info.context.identity,
            name=input.name,
            description=input.description,
        )
        return ProjectType.from_model(project)

    @strawberry.mutation
    async def update_project(self, info: Info, input: UpdateProjectInput) -> ProjectType:
        project = await info.context.project_service.update_project(
            info.context.identity,
            str(input.id),
            provided_fields(input, "name", "description"),
        )
        return ProjectType.from_model(project)

    @strawberry.mutation
    async def delete_project(self, info: Info, id: strawberry.ID) -> bool:
        return await info.context.project_service.delete_project(info.context.identity, str(id))

    @strawberry.mutation
    async def create_task(self, info: Info, input: CreateTaskInput) -> TaskType:
        task = await info.context.task_service.create_task(
            info.context.identity,
            project_id=str(input.project_id),
            title=input.title,
            description=input.description,
        )
        return TaskType.from_model(task)

    @strawberry.mutation
    async def update_task(self, info: Info, input: UpdateTaskInput) -> TaskType:
        task = await info.context.task_service.update_task(
            info.context.identity,
            str(input.id),
            provided_fields(input, "title", "description", "status"),
        )
        return TaskType.from_model(task)

    @strawberry.mutation
    async def delete_task(self, info: Info, id: strawberry.ID) -> bool:
        return await info.context.task_service.delete_task(info.context.identity, str(id))


def is_unexpected_error(error: GraphQLError) -> bool:
    """Mask resolver exceptions that are not domain errors."""
    original = error.original_error
    return original is not None and not isinstance(original, AppError)


class TeamFlowSchema(strawberry.Schema):
    def process_errors(
        self,
        errors: List[GraphQLError],
        execution_context: Optional[ExecutionContext] = None,
    ) -> None:
        for error in errors:
            if isinstance(error.original_error, AppError):
                logger.info("GraphQL %s: %s", error.original_error.kind.value, error.message)
            elif error.original_error is None:
                logger.info("GraphQL request error: %s", error.message)
            else:
                logger.error("Unhandled GraphQL error", exc_info=error.original_error)


schema = TeamFlowSchema(
    query=Query,
    mutation=Mutation,
    extensions=[MaskErrors(should_mask_error=is_unexpected_error, error_message="Internal server error")],
)
