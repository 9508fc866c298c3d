"""
TEAMFLOW Core API - Projects Module

Ownership-scoped project storage and business logic.
"""
