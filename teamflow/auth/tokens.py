"""
TEAMFLOW Core API - Session Tokens

Signed JWT access tokens carrying the user id and email.
Sessions are stateless: nothing about an issued token is stored server-side.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from jose import jwt, JWTError

from teamflow.config import Settings
from teamflow.errors import InvalidToken


@dataclass(frozen=True)
class SessionClaim:
    """Identity facts embedded in a signed token."""

    user_id: str
    email: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies signed session tokens."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = "HS256",
        expires_delta: timedelta = timedelta(days=7),
        clock: Optional[Callable[[], datetime]] = None,
    ):
        if not secret_key:
            raise ValueError("A signing secret is required")
        self._secret_key = secret_key
        self.algorithm = algorithm
        self.expires_delta = expires_delta
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def from_settings(cls, settings: Settings) -> "TokenService":
        return cls(
            secret_key=settings.JWT_SECRET_KEY,
            algorithm=settings.JWT_ALGORITHM,
            expires_delta=timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def issue(self, user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
        """Create a signed access token for the given identity."""
        if expires_delta is None:
            expires_delta = self.expires_delta

        # JWT timestamps have one-second resolution
        now = self._clock().replace(microsecond=0)
        to_encode = {
            "sub": user_id,
            "email": email,
            "iat": now,
            "exp": now + expires_delta,
        }
        return jwt.encode(to_encode, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> SessionClaim:
        """Decode and validate a token. Raises InvalidToken on any failure."""
        try:
            payload = jwt.decode(
                token,
                self._secret_key,
                algorithms=[self.algorithm],
                # Expiry is checked below against the service clock
                options={"verify_exp": False},
            )
        except JWTError as exc:
            raise InvalidToken() from exc

        user_id = payload.get("sub")
        email = payload.get("email")
        issued_at = payload.get("iat")
        expires_at = payload.get("exp")
        if not isinstance(user_id, str) or not isinstance(email, str):
            raise InvalidToken()
        if not isinstance(issued_at, int) or not isinstance(expires_at, int):
            raise InvalidToken()

        expires = datetime.fromtimestamp(expires_at, tz=timezone.utc)
        if self._clock() >= expires:
            raise InvalidToken()

        return SessionClaim(
            user_id=user_id,
            email=email,
            issued_at=datetime.fromtimestamp(issued_at, tz=timezone.utc),
            expires_at=expires,
        )
