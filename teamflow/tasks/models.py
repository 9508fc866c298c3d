"""
TEAMFLOW Core API - Task Models

Internal task model for database operations.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
import uuid

from teamflow.tasks.enums import TaskStatus


def _utcnow() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


@dataclass
class Task:
    """Task entity for database storage."""

    id: str
    owner_id: str
    project_id: str
    title: str
    status: TaskStatus
    description: Optional[str] = None
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @classmethod
    def create(
        cls,
        owner_id: str,
        project_id: str,
        title: str,
        description: Optional[str] = None,
        status: TaskStatus = TaskStatus.BACKLOG,
    ) -> "Task":
        """Create a new task with generated ID."""
        now = _utcnow()
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            project_id=project_id,
            title=title,
            status=status,
            description=description,
            created_at=now,
            updated_at=now,
        )

    def to_dict(self) -> dict:
        """Convert task to dictionary for MongoDB storage."""
        return {
            "_id": self.id,
            "owner_id": self.owner_id,
            "project_id": self.project_id,
            "title": self.title,
            "status": self.status.value,
            "description": self.description,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        """Create task from MongoDB document."""
        return cls(
            id=data["_id"],
            owner_id=data["owner_id"],
            project_id=data["project_id"],
            title=data["title"],
            status=TaskStatus(data["status"]),
            description=data.get("description"),
            created_at=data["created_at"],
            updated_at=data["updated_at"],
        )
