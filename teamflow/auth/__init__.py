"""
TEAMFLOW Core API - Authentication Module

Register/login with JWT authentication and per-request identity resolution.
"""

from teamflow.auth.router import router as auth_router
from teamflow.auth.dependencies import get_current_user, get_request_identity

__all__ = ["auth_router", "get_current_user", "get_request_identity"]
