"""Shopping List API Tests"""

import pytest

from recipe_organizer.models.shopping_list import ShoppingListStatistics
from tests.factories import recipe_request, shopping_item_request


async def create_list(client, user, name="Weekly groceries", items=None, **extra):
    body = {"name": name, "items": items if items is not None else [shopping_item_request()], **extra}
    response = await client.post("/shopping-lists", json=body, headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()


async def create_recipe(client, user, **kwargs):
    response = await client.post("/recipes", json=recipe_request(**kwargs), headers=user["headers"])
    assert response.status_code == 201, response.text
    return response.json()


class TestStatistics:

    def test_empty_list(self):
        stats = ShoppingListStatistics.from_items([])
        assert stats.total_items == 0
        assert stats.completion_percentage == 0

    def test_percentage_rounds_half_up(self):
        items = [{"is_purchased": i < 1} for i in range(8)]
        assert ShoppingListStatistics.from_items(items).completion_percentage == 13

    def test_costs(self):
        items = [
            {"is_purchased": True, "estimated_price": 2.5, "actual_price": 3.0},
            {"is_purchased": False, "estimated_price": 1.5, "actual_price": 9.0},
            {"is_purchased": False, "estimated_price": None},
        ]
        stats = ShoppingListStatistics.from_items(items)
        assert stats.total_estimated_cost == 4.0
        assert stats.total_actual_cost == 12.0
        assert stats.purchased_items == 1
        assert stats.remaining_items == 2
        assert stats.completion_percentage == 33


class TestCreateShoppingList:
    """Test POST /shopping-lists"""

    @pytest.mark.asyncio
    async def test_create_list(self, test_client, test_user):
        data = await create_list(test_client, test_user, totalBudget=50)

        assert data["name"] == "Weekly groceries"
        assert data["status"] == "active"
        assert data["totalBudget"] == 50
        assert len(data["items"]) == 1
        assert data["items"][0]["isPurchased"] is False
        assert data["items"][0]["id"]
        assert data["statistics"]["totalItems"] == 1

    @pytest.mark.asyncio
    async def test_duplicate_names_are_merged(self, test_client, test_user):
        data = await create_list(test_client, test_user, items=[
            shopping_item_request("Eggs", 6),
            shopping_item_request("eggs", 6),
            shopping_item_request("Bread", 1),
        ])

        assert len(data["items"]) == 2
        assert data["items"][0]["quantity"] == 12

    @pytest.mark.asyncio
    @pytest.mark.parametrize("quantity", [0, -1])
    async def test_non_positive_quantity_rejected(self, test_client, test_user, quantity):
        body = {"name": "Groceries", "items": [shopping_item_request("Milk", quantity, unit="l")]}

        response = await test_client.post("/shopping-lists", json=body, headers=test_user["headers"])

        assert response.status_code == 400
        listing = await test_client.get("/shopping-lists", headers=test_user["headers"])
        assert listing.json()["summary"]["totalLists"] == 0

    @pytest.mark.asyncio
    async def test_empty_name_rejected(self, test_client, test_user):
        response = await test_client.post("/shopping-lists", json={"name": " "}, headers=test_user["headers"])
        assert response.status_code == 400


class TestListShoppingLists:
    """Test GET /shopping-lists"""

    @pytest.mark.asyncio
    async def test_list_with_summary(self, test_client, test_user, other_user):
        first = await create_list(test_client, test_user, name="First")
        await create_list(test_client, test_user, name="Second")
        await create_list(test_client, other_user, name="Not mine")
        await test_client.put(
            f"/shopping-lists/{first['id']}", json={"status": "archived"}, headers=test_user["headers"]
        )

        response = await test_client.get("/shopping-lists", headers=test_user["headers"])

        data = response.json()
        assert {s["name"] for s in data["shoppingLists"]} == {"First", "Second"}
        assert data["summary"] == {"totalLists": 2, "activeLists": 1, "completedLists": 0, "archivedLists": 1}

        archived = await test_client.get("/shopping-lists", params={"status": "archived"}, headers=test_user["headers"])
        assert [s["name"] for s in archived.json()["shoppingLists"]] == ["First"]

        searched = await test_client.get("/shopping-lists", params={"search": "sec"}, headers=test_user["headers"])
        assert [s["name"] for s in searched.json()["shoppingLists"]] == ["Second"]

    @pytest.mark.asyncio
    async def test_invalid_status_filter(self, test_client, test_user):
        response = await test_client.get("/shopping-lists", params={"status": "lost"}, headers=test_user["headers"])
        assert response.status_code == 400


class TestShoppingListCrud:

    @pytest.mark.asyncio
    async def test_get_update_delete(self, test_client, test_user):
        data = await create_list(test_client, test_user)
        url = f"/shopping-lists/{data['id']}"

        fetched = await test_client.get(url, headers=test_user["headers"])
        assert fetched.json()["statistics"]["remainingItems"] == 1

        updated = await test_client.put(url, json={"name": "Party", "notes": "Saturday"}, headers=test_user["headers"])
        assert updated.json()["name"] == "Party"
        assert updated.json()["notes"] == "Saturday"
        assert len(updated.json()["items"]) == 1

        deleted = await test_client.delete(url, headers=test_user["headers"])
        assert deleted.json()["message"] == "Shopping list deleted successfully"
        assert (await test_client.get(url, headers=test_user["headers"])).status_code == 404

    @pytest.mark.asyncio
    async def test_other_users_list_not_found(self, test_client, test_user, other_user):
        data = await create_list(test_client, test_user)
        response = await test_client.get(f"/shopping-lists/{data['id']}", headers=other_user["headers"])
        assert response.status_code == 404


class TestShoppingListItems:
    """Test item operations"""

    @pytest.mark.asyncio
    async def test_add_item(self, test_client, test_user):
        data = await create_list(test_client, test_user)

        response = await test_client.post(
            f"/shopping-lists/{data['id']}/items",
            json=shopping_item_request("Milk", 2, unit="l"),
            headers=test_user["headers"]
        )

        assert response.status_code == 200
        assert [i["ingredientName"] for i in response.json()["items"]] == ["Eggs", "Milk"]

    @pytest.mark.asyncio
    async def test_add_existing_item_increases_quantity(self, test_client, test_user):
        data = await create_list(test_client, test_user)

        response = await test_client.post(
            f"/shopping-lists/{data['id']}/items",
            json=shopping_item_request("EGGS", 6, estimatedPrice=3.2),
            headers=test_user["headers"]
        )

        items = response.json()["items"]
        assert len(items) == 1
        assert items[0]["quantity"] == 18
        assert items[0]["estimatedPrice"] == 3.2

    @pytest.mark.asyncio
    async def test_update_and_remove_item(self, test_client, test_user):
        data = await create_list(test_client, test_user)
        item_url = f"/shopping-lists/{data['id']}/items/{data['items'][0]['id']}"

        updated = await test_client.put(item_url, json={"quantity": 24, "notes": "free range"}, headers=test_user["headers"])
        assert updated.json()["items"][0]["quantity"] == 24
        assert updated.json()["items"][0]["notes"] == "free range"

        removed = await test_client.delete(item_url, headers=test_user["headers"])
        assert removed.json()["items"] == []
        assert removed.json()["statistics"]["totalItems"] == 0

    @pytest.mark.asyncio
    async def test_zero_quantity_rejected_on_add_and_update(self, test_client, test_user):
        data = await create_list(test_client, test_user)
        base = f"/shopping-lists/{data['id']}/items"

        added = await test_client.post(base, json=shopping_item_request("Milk", 0), headers=test_user["headers"])
        assert added.status_code == 400

        updated = await test_client.put(
            f"{base}/{data['items'][0]['id']}", json={"quantity": 0}, headers=test_user["headers"]
        )
        assert updated.status_code == 400

        stored = await test_client.get(f"/shopping-lists/{data['id']}", headers=test_user["headers"])
        assert [i["quantity"] for i in stored.json()["items"]] == [12]

    @pytest.mark.asyncio
    async def test_actual_cost_counts_every_item(self, test_client, test_user):
        data = await create_list(test_client, test_user, items=[
            shopping_item_request("Eggs", 12),
            shopping_item_request("Bread", 1),
        ])

        response = await test_client.put(
            f"/shopping-lists/{data['id']}/items/{data['items'][1]['id']}",
            json={"actualPrice": 1.5},
            headers=test_user["headers"]
        )

        assert response.json()["items"][1]["isPurchased"] is False
        assert response.json()["statistics"]["totalActualCost"] == 1.5

    @pytest.mark.asyncio
    async def test_unknown_item(self, test_client, test_user):
        data = await create_list(test_client, test_user)
        response = await test_client.delete(
            f"/shopping-lists/{data['id']}/items/nope", headers=test_user["headers"]
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Item not found in shopping list"

    @pytest.mark.asyncio
    async def test_purchasing_everything_completes_list(self, test_client, test_user):
        data = await create_list(test_client, test_user, items=[
            shopping_item_request("Eggs", 12),
            shopping_item_request("Bread", 1),
        ])
        base = f"/shopping-lists/{data['id']}/items"

        first = await test_client.patch(
            f"{base}/{data['items'][0]['id']}/purchased",
            json={"actualPrice": 2.99},
            headers=test_user["headers"]
        )
        assert first.json()["status"] == "active"
        assert first.json()["statistics"]["completionPercentage"] == 50
        assert first.json()["statistics"]["totalActualCost"] == 2.99

        second = await test_client.patch(
            f"{base}/{data['items'][1]['id']}/purchased", json={}, headers=test_user["headers"]
        )
        assert second.json()["status"] == "completed"
        assert second.json()["statistics"]["completionPercentage"] == 100

    @pytest.mark.asyncio
    async def test_unmark_purchased(self, test_client, test_user):
        data = await create_list(test_client, test_user, items=[
            shopping_item_request("Eggs", 12),
            shopping_item_request("Bread", 1),
        ])
        url = f"/shopping-lists/{data['id']}/items/{data['items'][0]['id']}/purchased"
        await test_client.patch(url, json={}, headers=test_user["headers"])

        response = await test_client.patch(url, json={"isPurchased": False}, headers=test_user["headers"])

        assert response.json()["items"][0]["isPurchased"] is False
        assert response.json()["status"] == "active"


class TestGenerateShoppingList:
    """Test POST /shopping-lists/generate"""

    @pytest.mark.asyncio
    async def test_generate_combines_ingredients(self, test_client, test_user):
        soup = await create_recipe(test_client, test_user, title="Tomato Soup")
        salad = await create_recipe(
            test_client, test_user, title="Salad", category="Salad",
            ingredients=[
                {"name": "tomato", "quantity": 2, "unit": "pcs"},
                {"name": "Olive oil", "quantity": 10, "unit": "ml"},
            ],
        )

        response = await test_client.post(
            "/shopping-lists/generate",
            json={"recipeIds": [soup["id"], salad["id"]], "listName": "Dinner party"},
            headers=test_user["headers"]
        )

        assert response.status_code == 201
        data = response.json()
        assert data["name"] == "Dinner party"
        assert data["notes"] == "Generated from 2 recipe(s)"
        items = {(i["ingredientName"], i["unit"]): i for i in data["items"]}
        assert items[("Tomato", "pcs")]["quantity"] == 6
        assert items[("Tomato", "pcs")]["category"] == "Soup"
        assert items[("Olive oil", "tbsp")]["quantity"] == 2
        assert items[("Olive oil", "ml")]["quantity"] == 10
        assert len(items) == 3

    @pytest.mark.asyncio
    async def test_generate_scales_servings(self, test_client, test_user):
        soup = await create_recipe(test_client, test_user, servings=4)

        response = await test_client.post(
            "/shopping-lists/generate",
            json={"recipeIds": [soup["id"]], "listName": "Big soup", "servings": 6},
            headers=test_user["headers"]
        )

        quantities = {i["ingredientName"]: i["quantity"] for i in response.json()["items"]}
        assert quantities == {"Tomato": 6, "Olive oil": 3}

    @pytest.mark.asyncio
    async def test_generate_rounds_quantities(self, test_client, test_user):
        soup = await create_recipe(test_client, test_user, servings=3)

        response = await test_client.post(
            "/shopping-lists/generate",
            json={"recipeIds": [soup["id"]], "listName": "Small soup", "servings": 1},
            headers=test_user["headers"]
        )

        quantities = {i["ingredientName"]: i["quantity"] for i in response.json()["items"]}
        assert quantities == {"Tomato": 1.33, "Olive oil": 0.67}

    @pytest.mark.asyncio
    async def test_generate_from_public_recipe(self, test_client, test_user, other_user):
        public = await create_recipe(test_client, other_user, is_public=True)
        response = await test_client.post(
            "/shopping-lists/generate",
            json={"recipeIds": [public["id"]], "listName": "Borrowed"},
            headers=test_user["headers"]
        )
        assert response.status_code == 201

    @pytest.mark.asyncio
    async def test_generate_from_private_recipe_of_other_user(self, test_client, test_user, other_user):
        private = await create_recipe(test_client, other_user)
        response = await test_client.post(
            "/shopping-lists/generate",
            json={"recipeIds": [private["id"]], "listName": "Stolen"},
            headers=test_user["headers"]
        )
        assert response.status_code == 404
        listing = await test_client.get("/shopping-lists", headers=test_user["headers"])
        assert listing.json()["summary"]["totalLists"] == 0

    @pytest.mark.asyncio
    async def test_generate_requires_recipes(self, test_client, test_user):
        response = await test_client.post(
            "/shopping-lists/generate",
            json={"recipeIds": [], "listName": "Nothing"},
            headers=test_user["headers"]
        )
        assert response.status_code == 400
