from abc import ABC, abstractmethod
import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import DuplicateKeyError

from teamflow.auth.models import User
from teamflow.errors import DuplicateIdentity

logger = logging.getLogger(__name__)


class UserRepositoryInterface(ABC):
    """Abstract interface for user repository.

    This interface allows swapping implementations (in-memory -> MongoDB).
    Email and username uniqueness is enforced by create(), not by callers.
    """

    @abstractmethod
    async def create(self, user: User) -> User:
        """Create a new user. Raises DuplicateIdentity on email/username clash."""
        pass

    @abstractmethod
    async def get_by_id(self, user_id: str) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        pass

    @abstractmethod
    async def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        """Get any user holding either the email or the username."""
        pass


class MongoUserRepository(UserRepositoryInterface):
    """MongoDB implementation of the user repository."""

    COLLECTION_NAME = "users"

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.collection = db[self.COLLECTION_NAME]

    async def ensure_indexes(self) -> None:
        """Create the unique indexes that back identity uniqueness."""
        await self.collection.create_index("email", unique=True)
        await self.collection.create_index("username", unique=True)

    async def create(self, user: User) -> User:
        try:
            await self.collection.insert_one(user.to_dict())
        except DuplicateKeyError as exc:
            logger.warning("[MongoUserRepository] Duplicate identity rejected: id=%s", user.id)
            raise DuplicateIdentity() from exc
        logger.info("[MongoUserRepository] Created user id=%s", user.id)
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        doc = await self.collection.find_one({"_id": user_id})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def get_by_email(self, email: str) -> Optional[User]:
        doc = await self.collection.find_one({"email": email})
        if doc is None:
            return None
        return User.from_dict(doc)

    async def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        doc = await self.collection.find_one(
            {"$or": [{"email": email}, {"username": username}]}
        )
        if doc is None:
            return None
        return User.from_dict(doc)


class InMemoryUserRepository(UserRepositoryInterface):
    """
    In-memory implementation for CI-safe testing.

    create() checks and inserts without awaiting in between, so concurrent
    coroutines cannot both pass the uniqueness check.
    """

    def __init__(self):
        self._users: dict[str, User] = {}
        self._ids_by_email: dict[str, str] = {}
        self._ids_by_username: dict[str, str] = {}

    def clear(self) -> None:
        self._users.clear()
        self._ids_by_email.clear()
        self._ids_by_username.clear()

    def count(self) -> int:
        return len(self._users)

    async def create(self, user: User) -> User:
        if user.email in self._ids_by_email or user.username in self._ids_by_username:
            raise DuplicateIdentity()
        self._users[user.id] = user
        self._ids_by_email[user.email] = user.id
        self._ids_by_username[user.username] = user.id
        return user

    async def get_by_id(self, user_id: str) -> Optional[User]:
        return self._users.get(user_id)

    async def get_by_email(self, email: str) -> Optional[User]:
        user_id = self._ids_by_email.get(email)
        return self._users.get(user_id) if user_id else None

    async def find_by_email_or_username(self, email: str, username: str) -> Optional[User]:
        user_id = self._ids_by_email.get(email) or self._ids_by_username.get(username)
        return self._users.get(user_id) if user_id else None
