"""Utility modules."""

from .github_auth import generate_app_jwt, get_installation_token
from .logging import setup_logging
from .tokens import InvalidTokenError, create_access_token, decode_access_token

__all__ = [
    "InvalidTokenError",
    "create_access_token",
    "decode_access_token",
    "generate_app_jwt",
    "get_installation_token",
    "setup_logging",
]
