"""Authentication module"""

from recipe_organizer.auth.jwt import (
    create_access_token,
    get_current_user,
    get_current_user_optional,
    verify_token,
)
from recipe_organizer.auth.passwords import hash_password, verify_password

__all__ = [
    "create_access_token",
    "verify_token",
    "get_current_user",
    "get_current_user_optional",
    "hash_password",
    "verify_password",
]
