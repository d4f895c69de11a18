"""API Routes"""

from recipe_organizer.routes import auth, family, meal_plans, pantry, recipes, shopping_lists, users

__all__ = ["auth", "users", "family", "recipes", "pantry", "shopping_lists", "meal_plans"]
