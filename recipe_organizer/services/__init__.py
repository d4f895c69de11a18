"""Services module"""

from recipe_organizer.services.database_service import db_service
from recipe_organizer.services.family_service import family_service

__all__ = ["db_service", "family_service"]
