import logging
from typing import Annotated, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from motor.motor_asyncio import AsyncIOMotorDatabase

from teamflow.database import get_database
from teamflow.auth.identity import ANONYMOUS, AuthenticatedIdentity, RequestIdentity
from teamflow.auth.passwords import PasswordHasher
from teamflow.auth.repository import MongoUserRepository, UserRepositoryInterface
from teamflow.auth.service import AuthService
from teamflow.auth.tokens import TokenService
from teamflow.errors import AuthenticationRequired, InvalidToken, NotFound

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme - auto_error=False to handle missing tokens ourselves
bearer_scheme = HTTPBearer(auto_error=False)


class RequestAuthenticator:
    """Resolves a bearer token to the identity of the current request."""

    def __init__(self, auth_service: AuthService, tokens: TokenService):
        self.auth_service = auth_service
        self.tokens = tokens

    async def authenticate(self, token: Optional[str]) -> AuthenticatedIdentity:
        """Strict mode: raise unless the token resolves to an existing user."""
        if not token:
            raise AuthenticationRequired("No token provided")

        claim = self.tokens.verify(token)
        try:
            user = await self.auth_service.get_by_id(claim.user_id)
        except NotFound:
            raise InvalidToken()
        return AuthenticatedIdentity.from_user(user)

    async def resolve(self, token: Optional[str]) -> RequestIdentity:
        """Lenient mode: fall back to ANONYMOUS and let the operation decide."""
        if not token:
            return ANONYMOUS
        try:
            return await self.authenticate(token)
        except AuthenticationRequired as exc:
            logger.info("Proceeding anonymously: %s", exc.message)
            return ANONYMOUS


def get_token_service(request: Request) -> TokenService:
    """Dependency to get the application's token service."""
    return request.app.state.token_service


def get_password_hasher(request: Request) -> PasswordHasher:
    """Dependency to get the application's password hasher."""
    return request.app.state.password_hasher


async def get_user_repository(
    db: Annotated[AsyncIOMotorDatabase, Depends(get_database)]
) -> UserRepositoryInterface:
    """Dependency to get user repository instance."""
    return MongoUserRepository(db)


def get_auth_service(
    repository: Annotated[UserRepositoryInterface, Depends(get_user_repository)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthService:
    """Dependency to get AuthService instance."""
    return AuthService(repository, hasher, tokens)


def get_request_authenticator(
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> RequestAuthenticator:
    return RequestAuthenticator(auth_service, tokens)


def _token_from(credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    return credentials.credentials if credentials is not None else None


async def get_request_identity(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    authenticator: Annotated[RequestAuthenticator, Depends(get_request_authenticator)],
) -> RequestIdentity:
    """Identity for this request, ANONYMOUS when no valid token was sent."""
    return await authenticator.resolve(_token_from(credentials))


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(bearer_scheme)],
    authenticator: Annotated[RequestAuthenticator, Depends(get_request_authenticator)],
) -> AuthenticatedIdentity:
    """Identity for this request; rejects the request when it has none."""
    return await authenticator.authenticate(_token_from(credentials))


# Type aliases for cleaner dependency injection
CurrentUser = Annotated[AuthenticatedIdentity, Depends(get_current_user)]
CurrentIdentity = Annotated[RequestIdentity, Depends(get_request_identity)]
