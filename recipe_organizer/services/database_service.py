"""TinyDB database service"""

import copy
import logging
import threading
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from tinydb import Query, TinyDB

from recipe_organizer.config import settings

logger = logging.getLogger(__name__)


def generate_id() -> str:
    """Generate a unique document ID"""
    return str(uuid.uuid4())


def timestamp() -> str:
    """Current UTC timestamp in ISO format"""
    return datetime.now(timezone.utc).isoformat()


def _plain(doc) -> Optional[dict]:
    # TinyDB documents share nested lists with the storage and query cache
    return copy.deepcopy(dict(doc)) if doc is not None else None


def _first(results) -> Optional[dict]:
    return _plain(results[0]) if results else None


class DatabaseService:
    """TinyDB database service for recipe organizer data

    Note: TinyDB is not thread-safe. Every write, and every read-check-write
    sequence that must not interleave with another one, runs under ``lock``.
    """

    def __init__(self):
        self.db: Optional[TinyDB] = None
        self._db_path: Optional[Path] = None
        self._storage = None
        self.lock = threading.RLock()

    def _ensure_db(self):
        """Ensure database exists and is connected"""
        if self.db is not None:
            return
        with self.lock:
            if self.db is not None:
                return
            if self._storage is not None:
                self.db = TinyDB(storage=self._storage)
                logger.info("Database connected: in-memory storage")
            else:
                self._db_path = Path(settings.database_path)
                self._db_path.parent.mkdir(parents=True, exist_ok=True)
                self.db = TinyDB(str(self._db_path))
                logger.info(f"Database connected: {self._db_path}")

    def connect(self):
        """Open the database now instead of on first use"""
        self._ensure_db()

    def configure(self, storage=None):
        """Drop the current connection and reconnect with the given storage class.

        ``storage=None`` reconnects to the JSON file at ``settings.database_path``.
        """
        with self.lock:
            if self.db is not None:
                self.db.close()
            self.db = None
            self._storage = storage
            self._ensure_db()

    @contextmanager
    def transaction(self):
        """Hold the write lock for a read-check-write sequence"""
        with self.lock:
            yield self

    @property
    def users(self):
        """Users table"""
        self._ensure_db()
        return self.db.table("users")

    @property
    def family_groups(self):
        """Family groups table"""
        self._ensure_db()
        return self.db.table("family_groups")

    @property
    def recipes(self):
        """Recipes table"""
        self._ensure_db()
        return self.db.table("recipes")

    @property
    def pantry_items(self):
        """Pantry items table"""
        self._ensure_db()
        return self.db.table("pantry_items")

    @property
    def shopping_lists(self):
        """Shopping lists table"""
        self._ensure_db()
        return self.db.table("shopping_lists")

    @property
    def meal_plans(self):
        """Meal plans table"""
        self._ensure_db()
        return self.db.table("meal_plans")

    # =========================================================================
    # User Operations
    # =========================================================================

    def get_user_by_id(self, user_id: str) -> Optional[dict]:
        """Get user by ID"""
        User = Query()
        return _first(self.users.search(User.id == user_id))

    def get_user_by_email(self, email: str) -> Optional[dict]:
        """Get user by email"""
        User = Query()
        return _first(self.users.search(User.email == email.lower()))

    def create_user(self, user_data: dict) -> dict:
        """Create a new user"""
        user_data.setdefault("id", generate_id())
        user_data["created_at"] = timestamp()
        user_data["updated_at"] = user_data["created_at"]
        user_data["email"] = user_data["email"].lower()
        with self.lock:
            self.users.insert(copy.deepcopy(user_data))
        logger.info(f"User created: {user_data['id']}")
        return copy.deepcopy(user_data)

    def update_user(self, user_id: str, updates: dict) -> Optional[dict]:
        """Update user"""
        User = Query()
        updates["updated_at"] = timestamp()
        with self.lock:
            self.users.update(copy.deepcopy(updates), User.id == user_id)
            return self.get_user_by_id(user_id)

    # =========================================================================
    # Family Group Operations
    # =========================================================================

    def get_family_group(self, group_id: str) -> Optional[dict]:
        """Get family group by ID"""
        Group = Query()
        return _first(self.family_groups.search(Group.id == group_id))

    def get_family_group_by_invite_code(self, invite_code: str) -> Optional[dict]:
        """Get family group by invite code (codes are stored upper-case)"""
        Group = Query()
        return _first(self.family_groups.search(Group.invite_code == invite_code.upper()))

    def get_family_group_by_admin(self, user_id: str) -> Optional[dict]:
        """Get the family group created by a user"""
        Group = Query()
        return _first(self.family_groups.search(Group.admin_id == user_id))

    def invite_code_exists(self, invite_code: str) -> bool:
        Group = Query()
        return self.family_groups.contains(Group.invite_code == invite_code)

    def get_user_family_groups(self, user_id: str) -> List[dict]:
        """Get all family groups where the user is an active member, newest first"""
        Group = Query()
        Member = Query()
        groups = self.family_groups.search(
            Group.members.any((Member.user_id == user_id) & (Member.is_active == True))
        )
        groups = [_plain(g) for g in groups]
        groups.sort(key=lambda g: g.get("created_at", ""), reverse=True)
        return groups

    def insert_family_group(self, group_data: dict) -> dict:
        """Insert a new family group document"""
        with self.lock:
            self.family_groups.insert(copy.deepcopy(group_data))
        logger.info(f"Family group created: {group_data['id']} ({group_data['name']})")
        return copy.deepcopy(group_data)

    def replace_family_group(self, group_data: dict, expected_version: int) -> bool:
        """Replace a family group if its stored version still matches.

        Returns False when another writer saved the group in between.
        """
        Group = Query()
        with self.lock:
            updated = self.family_groups.update(
                copy.deepcopy(group_data),
                (Group.id == group_data["id"]) & (Group.version == expected_version),
            )
        return bool(updated)

    # =========================================================================
    # Recipe Operations
    # =========================================================================

    def get_recipe(self, recipe_id: str) -> Optional[dict]:
        """Get recipe by ID"""
        Recipe = Query()
        return _first(self.recipes.search(Recipe.id == recipe_id))

    def get_visible_recipes(self, user_id: Optional[str] = None) -> List[dict]:
        """Public recipes plus the user's own"""
        Recipe = Query()
        condition = Recipe.is_public == True
        if user_id:
            condition = condition | (Recipe.created_by == user_id)
        return [_plain(r) for r in self.recipes.search(condition)]

    def get_user_recipes(self, user_id: str) -> List[dict]:
        """Get all recipes created by a user"""
        Recipe = Query()
        return [_plain(r) for r in self.recipes.search(Recipe.created_by == user_id)]

    def create_recipe(self, recipe_data: dict) -> dict:
        """Create a new recipe"""
        recipe_data["id"] = generate_id()
        recipe_data["created_at"] = timestamp()
        recipe_data["updated_at"] = recipe_data["created_at"]
        with self.lock:
            self.recipes.insert(copy.deepcopy(recipe_data))
        logger.info(f"Recipe created: {recipe_data['id']} by {recipe_data['created_by']}")
        return copy.deepcopy(recipe_data)

    def update_recipe(self, recipe_id: str, updates: dict) -> Optional[dict]:
        """Update recipe"""
        Recipe = Query()
        updates["updated_at"] = timestamp()
        with self.lock:
            self.recipes.update(copy.deepcopy(updates), Recipe.id == recipe_id)
            return self.get_recipe(recipe_id)

    def delete_recipe(self, recipe_id: str) -> bool:
        """Delete recipe"""
        Recipe = Query()
        with self.lock:
            removed = self.recipes.remove(Recipe.id == recipe_id)
        if removed:
            logger.info(f"Recipe deleted: {recipe_id}")
        return bool(removed)

    # =========================================================================
    # Pantry Operations
    # =========================================================================

    def get_pantry_item(self, item_id: str, user_id: str) -> Optional[dict]:
        """Get a pantry item owned by the user"""
        Item = Query()
        return _first(self.pantry_items.search((Item.id == item_id) & (Item.user_id == user_id)))

    def get_user_pantry_items(self, user_id: str) -> List[dict]:
        """Get all pantry items of a user"""
        Item = Query()
        return [_plain(i) for i in self.pantry_items.search(Item.user_id == user_id)]

    def find_pantry_item(self, user_id: str, ingredient_name: str, location: str) -> Optional[dict]:
        """Find a user's pantry item by name (case-insensitive) and location"""
        Item = Query()
        wanted = ingredient_name.strip().lower()
        return _first(self.pantry_items.search(
            (Item.user_id == user_id)
            & (Item.location == location)
            & Item.ingredient_name.test(lambda value: value.strip().lower() == wanted)
        ))

    def create_pantry_item(self, item_data: dict) -> dict:
        """Create a new pantry item"""
        item_data["id"] = generate_id()
        item_data["created_at"] = timestamp()
        item_data["updated_at"] = item_data["created_at"]
        with self.lock:
            self.pantry_items.insert(copy.deepcopy(item_data))
        logger.info(f"Pantry item created: {item_data['id']} ({item_data['ingredient_name']})")
        return copy.deepcopy(item_data)

    def update_pantry_item(self, item_id: str, updates: dict) -> Optional[dict]:
        """Update pantry item"""
        Item = Query()
        updates["updated_at"] = timestamp()
        with self.lock:
            self.pantry_items.update(copy.deepcopy(updates), Item.id == item_id)
            return _first(self.pantry_items.search(Item.id == item_id))

    def delete_pantry_item(self, item_id: str) -> bool:
        """Delete pantry item"""
        Item = Query()
        with self.lock:
            removed = self.pantry_items.remove(Item.id == item_id)
        if removed:
            logger.info(f"Pantry item deleted: {item_id}")
        return bool(removed)

    # =========================================================================
    # Shopping List Operations
    # =========================================================================

    def get_shopping_list(self, list_id: str, user_id: str) -> Optional[dict]:
        """Get a shopping list owned by the user"""
        ShoppingList = Query()
        return _first(self.shopping_lists.search(
            (ShoppingList.id == list_id) & (ShoppingList.user_id == user_id)
        ))

    def get_user_shopping_lists(self, user_id: str) -> List[dict]:
        """Get all shopping lists of a user"""
        ShoppingList = Query()
        return [_plain(s) for s in self.shopping_lists.search(ShoppingList.user_id == user_id)]

    def create_shopping_list(self, list_data: dict) -> dict:
        """Create a new shopping list"""
        list_data["id"] = generate_id()
        list_data["created_at"] = timestamp()
        list_data["updated_at"] = list_data["created_at"]
        with self.lock:
            self.shopping_lists.insert(copy.deepcopy(list_data))
        logger.info(f"Shopping list created: {list_data['id']} ({list_data['name']})")
        return copy.deepcopy(list_data)

    def update_shopping_list(self, list_id: str, updates: dict) -> Optional[dict]:
        """Update shopping list"""
        ShoppingList = Query()
        updates["updated_at"] = timestamp()
        with self.lock:
            self.shopping_lists.update(copy.deepcopy(updates), ShoppingList.id == list_id)
            return _first(self.shopping_lists.search(ShoppingList.id == list_id))

    def delete_shopping_list(self, list_id: str) -> bool:
        """Delete shopping list"""
        ShoppingList = Query()
        with self.lock:
            removed = self.shopping_lists.remove(ShoppingList.id == list_id)
        if removed:
            logger.info(f"Shopping list deleted: {list_id}")
        return bool(removed)

    # =========================================================================
    # Meal Plan Operations
    # =========================================================================

    def get_meal_plan(self, plan_id: str, user_id: str) -> Optional[dict]:
        """Get a meal plan owned by the user"""
        MealPlan = Query()
        return _first(self.meal_plans.search((MealPlan.id == plan_id) & (MealPlan.user_id == user_id)))

    def get_user_meal_plans(self, user_id: str) -> List[dict]:
        """Get all meal plans of a user"""
        MealPlan = Query()
        return [_plain(p) for p in self.meal_plans.search(MealPlan.user_id == user_id)]

    def create_meal_plan(self, plan_data: dict) -> dict:
        """Create a new meal plan"""
        plan_data["id"] = generate_id()
        plan_data["created_at"] = timestamp()
        plan_data["updated_at"] = plan_data["created_at"]
        with self.lock:
            self.meal_plans.insert(copy.deepcopy(plan_data))
        logger.info(f"Meal plan created: {plan_data['id']} ({plan_data['name']})")
        return copy.deepcopy(plan_data)

    def update_meal_plan(self, plan_id: str, updates: dict) -> Optional[dict]:
        """Update meal plan"""
        MealPlan = Query()
        updates["updated_at"] = timestamp()
        with self.lock:
            self.meal_plans.update(copy.deepcopy(updates), MealPlan.id == plan_id)
            return _first(self.meal_plans.search(MealPlan.id == plan_id))

    def delete_meal_plan(self, plan_id: str) -> bool:
        """Delete meal plan"""
        MealPlan = Query()
        with self.lock:
            removed = self.meal_plans.remove(MealPlan.id == plan_id)
        if removed:
            logger.info(f"Meal plan deleted: {plan_id}")
        return bool(removed)


# Singleton instance
db_service = DatabaseService()
