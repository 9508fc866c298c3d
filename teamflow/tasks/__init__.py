"""
TEAMFLOW Core API - Tasks Module

Ownership-scoped Kanban task storage and business logic.
"""
