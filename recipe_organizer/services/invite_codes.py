"""Family group invite code generation"""

import logging
import secrets
import string
from typing import Callable, Optional

from recipe_organizer.config import settings
from recipe_organizer.errors import InviteCodeUnavailable

logger = logging.getLogger(__name__)

INVITE_CODE_ALPHABET = string.ascii_uppercase + string.digits


def random_invite_code(length: Optional[int] = None) -> str:
    """Random upper-case alphanumeric code, uniform per character"""
    length = length or settings.invite_code_length
    return "".join(secrets.choice(INVITE_CODE_ALPHABET) for _ in range(length))


def generate_unique_invite_code(
    exists: Callable[[str], bool],
    max_attempts: Optional[int] = None,
    generator: Callable[[], str] = random_invite_code,
) -> str:
    """Generate an invite code that ``exists`` reports as unused.

    The caller holds the database write lock so that the code is still free
    when the group carrying it is inserted.
    """
    max_attempts = max_attempts or settings.invite_code_max_attempts

    for attempt in range(1, max_attempts + 1):
        code = generator()
        if not exists(code):
            return code
        logger.debug(f"Invite code collision on attempt {attempt}")

    logger.error(f"Could not generate a unique invite code after {max_attempts} attempts")
    raise InviteCodeUnavailable(
        "Could not generate a unique invite code, please try again",
        attempts=max_attempts,
    )
