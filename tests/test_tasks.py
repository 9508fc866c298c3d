"""
TEAMFLOW Core API - Task Tests

CI-safe tests for task queries, mutations and ownership rules without MongoDB.
"""

from datetime import datetime, timezone

import pytest

from teamflow.auth.identity import ANONYMOUS, AuthenticatedIdentity
from teamflow.errors import AuthenticationRequired, NotFound, ValidationError
from teamflow.projects.service import ProjectService
from teamflow.tasks.enums import TaskStatus
from teamflow.tasks.service import TaskService
from tests.conftest import error_code, gql, register
from tests.test_projects import create_project


TASK_FIELDS = "id title description status userId projectId createdAt updatedAt"

CREATE_TASK = f"""
mutation Create($input: CreateTaskInput!) {{
  createTask(input: $input) {{ {TASK_FIELDS} }}
}}
"""

UPDATE_TASK = f"""
mutation Update($input: UpdateTaskInput!) {{
  updateTask(input: $input) {{ {TASK_FIELDS} }}
}}
"""

DELETE_TASK = "mutation Delete($id: ID!) { deleteTask(id: $id) }"

GET_TASK = f"query Get($id: ID!) {{ task(id: $id) {{ {TASK_FIELDS} }} }}"

LIST_TASKS = f"query List($projectId: ID!) {{ tasks(projectId: $projectId) {{ {TASK_FIELDS} }} }}"


class FailingDeleteProjectRepository:
    """Delegates to a real repository but fails when deleting a project."""

    def __init__(self, inner):
        self.inner = inner

    def __getattr__(self, name):
        return getattr(self.inner, name)

    async def delete(self, project_id, owner_id):
        raise RuntimeError("connection reset by peer")


def create_task(client, headers, project_id, title="t1", description=None) -> dict:
    body = gql(
        client,
        CREATE_TASK,
        {"input": {"title": title, "projectId": project_id, "description": description}},
        headers,
    )
    assert "errors" not in body, body
    return body["data"]["createTask"]


@pytest.fixture
def project(client, auth_headers) -> dict:
    return create_project(client, auth_headers, name="Board")


class TestCreateTask:
    """Tests for the createTask mutation."""

    def test_create_task_starts_in_backlog(self, client, auth_headers, project):
        task = create_task(client, auth_headers, project["id"], title="t1", description="d")
        assert task["title"] == "t1"
        assert task["description"] == "d"
        assert task["status"] == "BACKLOG"
        assert task["projectId"] == project["id"]
        assert task["userId"] == project["userId"]

    def test_create_task_in_foreign_project(
        self, client, auth_headers, second_auth_headers, project, task_repository
    ):
        """A task cannot be created under somebody else's project."""
        body = gql(
            client,
            CREATE_TASK,
            {"input": {"title": "intruder", "projectId": project["id"]}},
            second_auth_headers,
        )
        assert error_code(body) == "NOT_FOUND"
        assert task_repository.count() == 0

    def test_create_task_in_missing_project(self, client, auth_headers, task_repository):
        body = gql(
            client,
            CREATE_TASK,
            {"input": {"title": "t1", "projectId": "missing"}},
            auth_headers,
        )
        assert error_code(body) == "NOT_FOUND"
        assert task_repository.count() == 0

    def test_create_task_requires_auth(self, client, project):
        body = gql(client, CREATE_TASK, {"input": {"title": "t1", "projectId": project["id"]}})
        assert error_code(body) == "AUTHENTICATION_REQUIRED"

    def test_create_task_blank_title(self, client, auth_headers, project):
        body = gql(
            client,
            CREATE_TASK,
            {"input": {"title": "", "projectId": project["id"]}},
            auth_headers,
        )
        assert error_code(body) == "VALIDATION_ERROR"


class TestReadTasks:
    """Tests for the tasks and task queries."""

    def test_list_tasks_of_project(self, client, auth_headers, project):
        other = create_project(client, auth_headers, name="Other")
        create_task(client, auth_headers, project["id"], title="first")
        create_task(client, auth_headers, project["id"], title="second")
        create_task(client, auth_headers, other["id"], title="elsewhere")

        body = gql(client, LIST_TASKS, {"projectId": project["id"]}, auth_headers)
        titles = [t["title"] for t in body["data"]["tasks"]]
        assert titles == ["second", "first"]

    def test_project_embeds_its_tasks(self, client, auth_headers, project):
        create_task(client, auth_headers, project["id"], title="t1")

        body = gql(
            client,
            "query($id: ID!) { project(id: $id) { tasks { title status } } }",
            {"id": project["id"]},
            auth_headers,
        )
        assert body["data"]["project"]["tasks"] == [{"title": "t1", "status": "BACKLOG"}]

    def test_list_tasks_of_foreign_project(self, client, auth_headers, second_auth_headers, project):
        create_task(client, auth_headers, project["id"])

        body = gql(client, LIST_TASKS, {"projectId": project["id"]}, second_auth_headers)
        assert error_code(body) == "NOT_FOUND"

    def test_get_task(self, client, auth_headers, project):
        task = create_task(client, auth_headers, project["id"])
        body = gql(client, GET_TASK, {"id": task["id"]}, auth_headers)
        assert body["data"]["task"] == task

    def test_get_foreign_task(self, client, auth_headers, second_auth_headers, project):
        task = create_task(client, auth_headers, project["id"])
        body = gql(client, GET_TASK, {"id": task["id"]}, second_auth_headers)
        assert error_code(body) == "NOT_FOUND"


class TestUpdateTask:
    """Tests for the updateTask mutation."""

    def test_status_only_update_keeps_other_fields(self, client, auth_headers, project):
        task = create_task(client, auth_headers, project["id"], title="t1", description="details")

        body = gql(client, UPDATE_TASK, {"input": {"id": task["id"], "status": "DONE"}}, auth_headers)
        updated = body["data"]["updateTask"]
        assert updated["status"] == "DONE"
        assert updated["title"] == "t1"
        assert updated["description"] == "details"

    @pytest.mark.parametrize(
        "path",
        [
            ["DONE", "BACKLOG"],
            ["IN_PROGRESS", "SELECTED", "BACKLOG"],
            ["BACKLOG", "DONE", "IN_PROGRESS"],
        ],
    )
    def test_any_status_transition_is_allowed(self, client, auth_headers, project, path):
        task = create_task(client, auth_headers, project["id"])

        for status in path:
            body = gql(client, UPDATE_TASK, {"input": {"id": task["id"], "status": status}}, auth_headers)
            assert "errors" not in body, body
            assert body["data"]["updateTask"]["status"] == status

    def test_update_title_and_description(self, client, auth_headers, project):
        task = create_task(client, auth_headers, project["id"], title="t1")

        body = gql(
            client,
            UPDATE_TASK,
            {"input": {"id": task["id"], "title": "renamed", "description": "now described"}},
            auth_headers,
        )
        updated = body["data"]["updateTask"]
        assert updated["title"] == "renamed"
        assert updated["description"] == "now described"
        assert updated["status"] == "BACKLOG"

    def test_update_foreign_task(self, client, auth_headers, second_auth_headers, project):
        task = create_task(client, auth_headers, project["id"], title="t1")

        body = gql(
            client,
            UPDATE_TASK,
            {"input": {"id": task["id"], "title": "hacked"}},
            second_auth_headers,
        )
        assert error_code(body) == "NOT_FOUND"

        body = gql(client, GET_TASK, {"id": task["id"]}, auth_headers)
        assert body["data"]["task"]["title"] == "t1"


class TestDeleteTask:
    """Tests for the deleteTask mutation."""

    def test_delete_task(self, client, auth_headers, project):
        task = create_task(client, auth_headers, project["id"])

        body = gql(client, DELETE_TASK, {"id": task["id"]}, auth_headers)
        assert body["data"]["deleteTask"] is True

        body = gql(client, GET_TASK, {"id": task["id"]}, auth_headers)
        assert error_code(body) == "NOT_FOUND"

        body = gql(client, DELETE_TASK, {"id": task["id"]}, auth_headers)
        assert error_code(body) == "NOT_FOUND"

    def test_delete_foreign_task(self, client, auth_headers, second_auth_headers, project):
        task = create_task(client, auth_headers, project["id"])

        body = gql(client, DELETE_TASK, {"id": task["id"]}, second_auth_headers)
        assert error_code(body) == "NOT_FOUND"

        body = gql(client, GET_TASK, {"id": task["id"]}, auth_headers)
        assert body["data"]["task"]["id"] == task["id"]


class TestTaskService:
    """Service-level checks that do not go through GraphQL input coercion."""

    @pytest.fixture
    def identity(self) -> AuthenticatedIdentity:
        now = datetime.now(timezone.utc)
        return AuthenticatedIdentity(
            id="user-1",
            email="u@example.com",
            username="u",
            created_at=now,
            updated_at=now,
        )

    @pytest.fixture
    def services(self, project_repository, task_repository):
        return (
            ProjectService(project_repository, task_repository),
            TaskService(task_repository, project_repository),
        )

    @pytest.mark.asyncio
    async def test_unknown_status_rejected(self, services, identity):
        projects, tasks = services
        project = await projects.create_project(identity, "Board")
        task = await tasks.create_task(identity, project.id, "t1")

        with pytest.raises(ValidationError):
            await tasks.update_task(identity, task.id, {"status": "ARCHIVED"})

    @pytest.mark.asyncio
    async def test_string_status_accepted(self, services, identity):
        projects, tasks = services
        project = await projects.create_project(identity, "Board")
        task = await tasks.create_task(identity, project.id, "t1")

        updated = await tasks.update_task(identity, task.id, {"status": "IN_PROGRESS"})
        assert updated.status is TaskStatus.IN_PROGRESS

    @pytest.mark.asyncio
    async def test_empty_update_returns_current_task(self, services, identity):
        projects, tasks = services
        project = await projects.create_project(identity, "Board")
        task = await tasks.create_task(identity, project.id, "t1")

        unchanged = await tasks.update_task(identity, task.id, {})
        assert unchanged.title == "t1"

    @pytest.mark.asyncio
    async def test_unknown_field_rejected(self, services, identity):
        projects, tasks = services
        project = await projects.create_project(identity, "Board")
        task = await tasks.create_task(identity, project.id, "t1")

        with pytest.raises(ValidationError):
            await tasks.update_task(identity, task.id, {"owner_id": "someone-else"})

    @pytest.mark.asyncio
    async def test_anonymous_rejected_everywhere(self, services):
        projects, tasks = services
        with pytest.raises(AuthenticationRequired):
            await projects.list_projects(ANONYMOUS)
        with pytest.raises(AuthenticationRequired):
            await tasks.get_task(ANONYMOUS, "anything")

    @pytest.mark.asyncio
    async def test_interrupted_project_delete_leaves_no_orphans(
        self, project_repository, task_repository, identity
    ):
        projects = ProjectService(FailingDeleteProjectRepository(project_repository), task_repository)
        tasks = TaskService(task_repository, project_repository)
        project = await projects.create_project(identity, "Board")
        task = await tasks.create_task(identity, project.id, "t1")

        with pytest.raises(RuntimeError):
            await projects.delete_project(identity, project.id)

        assert await project_repository.get_by_id(project.id, identity.id) is not None
        with pytest.raises(NotFound):
            await tasks.get_task(identity, task.id)

    @pytest.mark.asyncio
    async def test_missing_task(self, services, identity):
        _, tasks = services
        with pytest.raises(NotFound):
            await tasks.delete_task(identity, "missing")


class TestEndToEnd:
    """Register, create a board, and move a task across it."""

    def test_alice_flow(self, client):
        response = register(client, "alice@example.com", "alice", "pw123")
        assert response.status_code == 201
        headers = {"Authorization": f"Bearer {response.json()['data']['token']}"}

        project = create_project(client, headers, name="X")
        assert project["tasks"] == []

        task = create_task(client, headers, project["id"], title="t1")
        assert task["status"] == "BACKLOG"

        body = gql(client, UPDATE_TASK, {"input": {"id": task["id"], "status": "DONE"}}, headers)
        updated = body["data"]["updateTask"]
        assert updated["id"] == task["id"]
        assert updated["status"] == "DONE"
        assert updated["title"] == "t1"
