"""
TEAMFLOW Core API - Task Enums
"""

from enum import Enum


class TaskStatus(str, Enum):
    """
    Kanban column of a task.

    The order below is the board's left-to-right layout only; a task may
    move from any status to any other.
    """
    BACKLOG = "BACKLOG"
    SELECTED = "SELECTED"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"
