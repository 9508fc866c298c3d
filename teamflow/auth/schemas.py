"""
TEAMFLOW Core API - Authentication Schemas

Pydantic models for authentication requests and responses.
Request fields are optional at the schema level so that missing values
reach the service and come back as a 400 validation error.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class UserRegisterRequest(BaseModel):
    """Request schema for user registration."""

    email: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


class UserLoginRequest(BaseModel):
    """Request schema for user login."""

    email: Optional[str] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    """Public user information response."""

    id: str
    email: str
    username: str
    createdAt: datetime
    updatedAt: datetime


class AuthData(BaseModel):
    token: str
    user: UserResponse


class AuthResponse(BaseModel):
    """Response schema for successful registration or login."""

    success: bool = True
    data: AuthData


class MeResponse(BaseModel):
    success: bool = True
    data: UserResponse


class ErrorResponse(BaseModel):
    """Error envelope returned by every REST endpoint."""

    success: bool = False
    message: str
    code: str
