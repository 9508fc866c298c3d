"""
TEAMFLOW Core API - Authentication Router

Endpoints for user registration, login, and current user info.
Domain errors raised here are mapped to responses by the handlers in main.
"""

from typing import Annotated, Union

from fastapi import APIRouter, Depends, status

from teamflow.auth.dependencies import CurrentUser, get_auth_service
from teamflow.auth.identity import AuthenticatedIdentity
from teamflow.auth.models import User
from teamflow.auth.schemas import (
    AuthData,
    AuthResponse,
    ErrorResponse,
    MeResponse,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
)
from teamflow.auth.service import AuthResult, AuthService


router = APIRouter(prefix="/auth", tags=["Authentication"])


def _user_response(user: Union[User, AuthenticatedIdentity]) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        username=user.username,
        createdAt=user.created_at,
        updatedAt=user.updated_at,
    )


def _auth_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(data=AuthData(token=result.token, user=_user_response(result.user)))


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
    responses={400: {"model": ErrorResponse}},
)
async def register(
    request: UserRegisterRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """Register a new user with email, username and password and log them in."""
    result = await auth_service.register(
        email=request.email,
        username=request.username,
        password=request.password,
    )
    return _auth_response(result)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Login and get access token",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
async def login(
    request: UserLoginRequest,
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AuthResponse:
    """
    Authenticate user and return a JWT access token.

    Use the returned token in the Authorization header:
    `Authorization: Bearer <token>`
    """
    result = await auth_service.login(email=request.email, password=request.password)
    return _auth_response(result)


@router.get(
    "/me",
    response_model=MeResponse,
    summary="Get current user info",
    responses={401: {"model": ErrorResponse}},
)
async def get_me(current_user: CurrentUser) -> MeResponse:
    """Get the current authenticated user's public information."""
    return MeResponse(data=_user_response(current_user))
