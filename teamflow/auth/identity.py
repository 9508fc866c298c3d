"""
TEAMFLOW Core API - Request Identity

The identity attached to a single request: either an authenticated user
or the ANONYMOUS marker. Resource services check it with require_identity().
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from teamflow.auth.models import User
from teamflow.errors import AuthenticationRequired


@dataclass(frozen=True)
class AuthenticatedIdentity:
    """A user resolved from a verified token."""

    id: str
    email: str
    username: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedIdentity":
        return cls(
            id=user.id,
            email=user.email,
            username=user.username,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )


class Anonymous:
    """No valid identity was resolved for the request."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ANONYMOUS"


ANONYMOUS = Anonymous()

RequestIdentity = Union[AuthenticatedIdentity, Anonymous]


def require_identity(identity: RequestIdentity) -> AuthenticatedIdentity:
    """Return the authenticated identity or raise AuthenticationRequired."""
    if isinstance(identity, AuthenticatedIdentity):
        return identity
    raise AuthenticationRequired()
