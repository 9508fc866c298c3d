from dataclasses import dataclass
import logging
import re
from typing import Optional

from fastapi.concurrency import run_in_threadpool

from teamflow.auth.models import User
from teamflow.auth.passwords import MAX_PASSWORD_BYTES, PasswordHasher
from teamflow.auth.repository import UserRepositoryInterface
from teamflow.auth.tokens import TokenService
from teamflow.errors import DuplicateIdentity, InvalidCredentials, NotFound, ValidationError

logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


@dataclass
class AuthResult:
    """Token plus the identity it was issued for."""

    token: str
    user: User


def _normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class AuthService:
    """
    Registration, login and identity lookup.

    bcrypt work runs in the threadpool so it never stalls the event loop.
    """

    def __init__(
        self,
        repository: UserRepositoryInterface,
        hasher: PasswordHasher,
        tokens: TokenService,
    ):
        self.repository = repository
        self.hasher = hasher
        self.tokens = tokens

    async def register(
        self,
        email: Optional[str],
        username: Optional[str],
        password: Optional[str],
    ) -> AuthResult:
        """Register a new user and issue a token for it."""
        email = _normalize_email(email)
        username = (username or "").strip()
        if not email or not username or not password:
            raise ValidationError("Email, username, and password are required")
        if not _EMAIL_RE.match(email):
            raise ValidationError("Email address is malformed")
        if len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")

        if await self.repository.find_by_email_or_username(email, username) is not None:
            raise DuplicateIdentity()

        user = User.create(
            email=email,
            username=username,
            password_hash=await run_in_threadpool(self.hasher.hash, password),
        )
        # A concurrent registration can still win the race; the storage
        # constraint raises DuplicateIdentity in that case.
        await self.repository.create(user)
        logger.info("Registered user id=%s", user.id)

        return AuthResult(token=self.tokens.issue(user.id, user.email), user=user)

    async def login(self, email: Optional[str], password: Optional[str]) -> AuthResult:
        """Authenticate by email and password."""
        email = _normalize_email(email)
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.repository.get_by_email(email)
        if user is None:
            await run_in_threadpool(self.hasher.verify_dummy, password)
            logger.warning("Failed login attempt")
            raise InvalidCredentials()
        if not await run_in_threadpool(self.hasher.verify, password, user.password_hash):
            logger.warning("Failed login attempt")
            raise InvalidCredentials()

        return AuthResult(token=self.tokens.issue(user.id, user.email), user=user)

    async def get_by_id(self, user_id: str) -> User:
        """Get user by ID."""
        user = await self.repository.get_by_id(user_id)
        if user is None:
            raise NotFound("User not found")
        return user
