"""
TEAMFLOW Core API - Test Configuration

Shared fixtures for CI-safe testing without MongoDB.
"""

from typing import Optional

import pytest
from fastapi.testclient import TestClient

from teamflow.auth.dependencies import get_user_repository
from teamflow.auth.passwords import PasswordHasher
from teamflow.auth.repository import InMemoryUserRepository
from teamflow.auth.service import AuthService
from teamflow.auth.tokens import TokenService
from teamflow.config import Settings
from teamflow.main import create_app
from teamflow.projects.dependencies import get_project_repository
from teamflow.projects.repository import InMemoryProjectRepository
from teamflow.tasks.dependencies import get_task_repository
from teamflow.tasks.repository import InMemoryTaskRepository


TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"


@pytest.fixture
def settings() -> Settings:
    # Minimum bcrypt work factor keeps the suite fast
    return Settings(JWT_SECRET_KEY=TEST_SECRET, BCRYPT_ROUNDS=4)


@pytest.fixture
def token_service(settings) -> TokenService:
    return TokenService.from_settings(settings)


@pytest.fixture
def password_hasher(settings) -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


@pytest.fixture
def user_repository() -> InMemoryUserRepository:
    """Provide a fresh in-memory user repository for each test."""
    return InMemoryUserRepository()


@pytest.fixture
def project_repository() -> InMemoryProjectRepository:
    return InMemoryProjectRepository()


@pytest.fixture
def task_repository() -> InMemoryTaskRepository:
    return InMemoryTaskRepository()


@pytest.fixture
def auth_service(user_repository, password_hasher, token_service) -> AuthService:
    return AuthService(user_repository, password_hasher, token_service)


@pytest.fixture
def app(settings, user_repository, project_repository, task_repository):
    """Application wired to in-memory repositories."""
    application = create_app(settings)
    application.dependency_overrides[get_user_repository] = lambda: user_repository
    application.dependency_overrides[get_project_repository] = lambda: project_repository
    application.dependency_overrides[get_task_repository] = lambda: task_repository
    yield application
    application.dependency_overrides.clear()


@pytest.fixture
def client(app):
    """Create test client. The lifespan is not run, so MongoDB is never contacted."""
    return TestClient(app)


def register(client, email: str, username: str, password: str):
    return client.post(
        "/auth/register",
        json={"email": email, "username": username, "password": password},
    )


def gql(client, query: str, variables: Optional[dict] = None, headers: Optional[dict] = None) -> dict:
    """POST a GraphQL operation and return the decoded body."""
    response = client.post(
        "/graphql",
        json={"query": query, "variables": variables or {}},
        headers=headers or {},
    )
    assert response.status_code == 200, response.text
    return response.json()


def error_code(body: dict) -> Optional[str]:
    """Kind of the first GraphQL error, if any."""
    errors = body.get("errors") or []
    if not errors:
        return None
    return errors[0].get("extensions", {}).get("code")


@pytest.fixture
def registered_user(client):
    """Register a test user and return credentials."""
    credentials = {"email": "alice@example.com", "username": "alice", "password": "pw123"}
    response = register(client, **credentials)
    assert response.status_code == 201
    return credentials


@pytest.fixture
def auth_token(client, registered_user):
    """Get an auth token for the registered user."""
    response = client.post(
        "/auth/login",
        json={"email": registered_user["email"], "password": registered_user["password"]},
    )
    return response.json()["data"]["token"]


@pytest.fixture
def auth_headers(auth_token):
    """Create Authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def second_auth_headers(client):
    """Authorization headers for a second, unrelated user."""
    response = register(client, "bob@example.com", "bob", "bobpassword")
    return {"Authorization": f"Bearer {response.json()['data']['token']}"}
