"""
TEAMFLOW Core API

Team task-management backend: REST authentication plus a GraphQL API
for per-user projects and Kanban tasks.
"""
