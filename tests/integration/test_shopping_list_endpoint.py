"""Integration tests for the shopping list endpoints."""

from __future__ import annotations

import pytest
from fastapi import status


def _create_list(client, headers, name="Weekly", family_id="fam-1"):
    response = client.post(
        "/shopping/lists",
        json={"familyId": family_id, "name": name},
        headers=headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_shopping_list_crud(client, auth_headers):
    created = _create_list(client, auth_headers)
    assert created["name"] == "Weekly"
    assert created["created_by_id"] == "user-1"
    assert created["items"] == []

    response = client.get("/shopping/lists", params={"familyId": "fam-1"}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert [entry["id"] for entry in response.json()] == [created["id"]]

    response = client.patch(
        f"/shopping/lists/{created['id']}",
        json={"name": "Party", "notes": "Saturday"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Party"
    assert response.json()["notes"] == "Saturday"

    response = client.post(f"/shopping/lists/{created['id']}/complete", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["status"] == "completed"

    response = client.delete(f"/shopping/lists/{created['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}

    response = client.get(f"/shopping/lists/{created['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_index_requires_family_id(client, auth_headers):
    response = client.get("/shopping/lists", headers=auth_headers)

    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_items_carry_inferred_category(client, auth_headers):
    created = _create_list(client, auth_headers)
    list_id = created["id"]

    response = client.post(
        f"/shopping/lists/{list_id}/items",
        json={"name": "Whole Milk", "quantity": 2, "unit": "gal", "sourceRecipeId": "recipe-1"},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    milk = response.json()
    assert milk["category"] == "Dairy"
    assert milk["quantity"] == pytest.approx(2.0)
    assert milk["source_recipe_id"] == "recipe-1"
    assert milk["added_by_id"] == "user-1"

    client.post(f"/shopping/lists/{list_id}/items", json={"name": "Apples"}, headers=auth_headers)

    response = client.get(f"/shopping/lists/{list_id}", headers=auth_headers)
    items = response.json()["items"]
    assert [item["name"] for item in items] == ["Apples", "Whole Milk"]
    assert [item["category"] for item in items] == ["Produce", "Dairy"]


def test_item_toggle_rename_and_delete(client, auth_headers):
    created = _create_list(client, auth_headers)
    item = client.post(
        f"/shopping/lists/{created['id']}/items",
        json={"name": "Milk"},
        headers=auth_headers,
    ).json()

    response = client.patch(f"/shopping/items/{item['id']}/toggle", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["checked"] is True

    response = client.patch(
        f"/shopping/items/{item['id']}/name",
        json={"name": "  Bananas "},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["name"] == "Bananas"
    assert response.json()["category"] == "Produce"

    response = client.delete(f"/shopping/items/{item['id']}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"success": True}

    response = client.patch(f"/shopping/items/{item['id']}/toggle", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_blank_item_name_is_rejected(client, auth_headers):
    created = _create_list(client, auth_headers)

    response = client.post(
        f"/shopping/lists/{created['id']}/items",
        json={"name": "   "},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_add_item_to_missing_list_is_not_found(client, auth_headers):
    response = client.post(
        "/shopping/lists/missing/items",
        json={"name": "Milk"},
        headers=auth_headers,
    )

    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_categories_and_classify(client, auth_headers):
    response = client.get("/shopping/categories", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    categories = response.json()["categories"]
    assert categories[0] == "Produce"
    assert categories[-1] == "Other"

    response = client.get("/shopping/classify", params={"name": "Ice Cream"}, headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"name": "Ice Cream", "category": "Frozen"}


def test_shopping_routes_require_session(client):
    assert client.get("/shopping/lists", params={"familyId": "fam-1"}).status_code == 401
    assert client.post("/shopping/lists", json={"familyId": "f", "name": "n"}).status_code == 401
    assert client.get("/shopping/categories").status_code == 401
