"""Authentication module."""

from planner.auth.service import AuthService, get_auth_service
from planner.auth.utils import (
    create_access_token,
    create_refresh_token,
    decode_access_token,
    get_password_hash,
    verify_password,
)

__all__ = [
    "AuthService",
    "get_auth_service",
    "create_access_token",
    "create_refresh_token",
    "decode_access_token",
    "verify_password",
    "get_password_hash",
]
