"""Tests for review endpoints and the rating summary they maintain."""

import pytest
from httpx import AsyncClient

MISSING_ID = "00000000-0000-0000-0000-0000000000ff"


async def _create_restaurant(client: AsyncClient) -> dict:
    response = await client.post(
        "/restaurants", json={"name": "A", "borough": "B", "cuisine": "C"}
    )
    assert response.status_code == 201
    return response.json()


async def _summary(client: AsyncClient, restaurant_id: str) -> dict:
    response = await client.get(f"/restaurants/{restaurant_id}")
    assert response.status_code == 200
    return response.json()["ratingSummary"]


class TestCreateReview:
    """Tests for POST /restaurants/{id}/reviews endpoint."""

    @pytest.mark.asyncio
    async def test_create_review_success(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        response = await client.post(
            f"/restaurants/{restaurant['id']}/reviews",
            json={"rating": 4, "comment": "Great bagels"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["restaurantId"] == restaurant["id"]
        assert data["rating"] == 4
        assert data["comment"] == "Great bagels"
        assert "id" in data
        assert "createdAt" in data

        assert await _summary(client, restaurant["id"]) == {"avg": 4, "count": 1}

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [
            {"rating": 0, "comment": "x"},
            {"rating": 6, "comment": "x"},
            {"rating": 3.5, "comment": "x"},
            {"rating": "4", "comment": "x"},
            {"rating": True, "comment": "x"},
            {"rating": 3, "comment": ""},
            {"rating": 3, "comment": "   "},
            {"rating": 3, "comment": "x" * 1001},
            {"comment": "x"},
            {"rating": 3},
        ],
    )
    async def test_create_review_invalid_body(self, client: AsyncClient, payload: dict):
        """Invalid reviews are rejected and do not touch the summary."""
        restaurant = await _create_restaurant(client)
        response = await client.post(f"/restaurants/{restaurant['id']}/reviews", json=payload)
        assert response.status_code == 400
        assert "error" in response.json()

        reviews = await client.get(f"/restaurants/{restaurant['id']}/reviews")
        assert reviews.json() == []
        assert await _summary(client, restaurant["id"]) == {"avg": 0, "count": 0}

    @pytest.mark.asyncio
    async def test_create_review_invalid_restaurant_id(self, client: AsyncClient):
        response = await client.post(
            "/restaurants/nope/reviews", json={"rating": 3, "comment": "x"}
        )
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid restaurant id"}

    @pytest.mark.asyncio
    async def test_create_review_restaurant_not_found(self, client: AsyncClient):
        response = await client.post(
            f"/restaurants/{MISSING_ID}/reviews", json={"rating": 3, "comment": "x"}
        )
        assert response.status_code == 404
        assert response.json() == {"error": "Restaurant not found"}

    @pytest.mark.asyncio
    async def test_invalid_id_checked_before_body(self, client: AsyncClient):
        response = await client.post("/restaurants/not-an-id/reviews", json={"rating": 9})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid restaurant id"}

    @pytest.mark.asyncio
    async def test_missing_restaurant_checked_before_body(self, client: AsyncClient):
        response = await client.post(f"/restaurants/{MISSING_ID}/reviews", json={"rating": 9})
        assert response.status_code == 404
        assert response.json() == {"error": "Restaurant not found"}

    @pytest.mark.asyncio
    async def test_create_review_without_body(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        response = await client.post(f"/restaurants/{restaurant['id']}/reviews")
        assert response.status_code == 400
        assert "error" in response.json()

    @pytest.mark.asyncio
    async def test_create_review_names_invalid_fields(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        response = await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 9}
        )
        assert response.status_code == 400
        error = response.json()["error"]
        assert error.startswith("rating: ")
        assert "comment: " in error

    @pytest.mark.asyncio
    async def test_create_review_accepts_integral_float(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        response = await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 5.0, "comment": "x"}
        )
        assert response.status_code == 201
        assert response.json()["rating"] == 5
        assert await _summary(client, restaurant["id"]) == {"avg": 5, "count": 1}


class TestListReviews:
    """Tests for GET /restaurants/{id}/reviews endpoint."""

    @pytest.mark.asyncio
    async def test_list_reviews_newest_first(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        for comment in ["first", "second", "third"]:
            await client.post(
                f"/restaurants/{restaurant['id']}/reviews",
                json={"rating": 3, "comment": comment},
            )
        response = await client.get(f"/restaurants/{restaurant['id']}/reviews")
        assert response.status_code == 200
        assert [r["comment"] for r in response.json()] == ["third", "second", "first"]

    @pytest.mark.asyncio
    async def test_list_reviews_only_for_restaurant(self, client: AsyncClient):
        mine = await _create_restaurant(client)
        other = await _create_restaurant(client)
        await client.post(f"/restaurants/{other['id']}/reviews", json={"rating": 1, "comment": "x"})
        response = await client.get(f"/restaurants/{mine['id']}/reviews")
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_list_reviews_invalid_id(self, client: AsyncClient):
        response = await client.get("/restaurants/123/reviews")
        assert response.status_code == 400


class TestUpdateReview:
    """Tests for PUT/PATCH /reviews/{reviewId} endpoints."""

    @pytest.mark.asyncio
    async def test_patch_rating_refreshes_summary(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 2, "comment": "meh"}
        )).json()

        response = await client.patch(f"/reviews/{review['id']}", json={"rating": 5})
        assert response.status_code == 200
        data = response.json()
        assert data["rating"] == 5
        assert data["comment"] == "meh"
        assert data["restaurantId"] == restaurant["id"]
        assert data["createdAt"] == review["createdAt"]

        assert await _summary(client, restaurant["id"]) == {"avg": 5, "count": 1}

    @pytest.mark.asyncio
    async def test_put_comment_only(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 2, "comment": "meh"}
        )).json()
        response = await client.put(f"/reviews/{review['id']}", json={"comment": "better"})
        assert response.status_code == 200
        assert response.json()["comment"] == "better"
        assert response.json()["rating"] == 2

    @pytest.mark.asyncio
    async def test_patch_accepts_integral_float(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 2, "comment": "meh"}
        )).json()
        response = await client.patch(f"/reviews/{review['id']}", json={"rating": 4.0})
        assert response.status_code == 200
        assert response.json()["rating"] == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload", [{"rating": 9}, {"rating": None}, {"comment": ""}, {"rating": 4.5}]
    )
    async def test_patch_revalidates(self, client: AsyncClient, payload: dict):
        """A partial update cannot slip an invalid value past validation."""
        restaurant = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 2, "comment": "meh"}
        )).json()

        response = await client.patch(f"/reviews/{review['id']}", json=payload)
        assert response.status_code == 400

        reviews = (await client.get(f"/restaurants/{restaurant['id']}/reviews")).json()
        assert reviews[0]["rating"] == 2
        assert reviews[0]["comment"] == "meh"

    @pytest.mark.asyncio
    async def test_patch_cannot_move_review(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        other = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 2, "comment": "meh"}
        )).json()
        response = await client.patch(
            f"/reviews/{review['id']}", json={"restaurantId": other["id"]}
        )
        assert response.status_code == 200
        assert response.json()["restaurantId"] == restaurant["id"]

    @pytest.mark.asyncio
    async def test_update_review_invalid_id(self, client: AsyncClient):
        response = await client.patch("/reviews/abc", json={"rating": 3})
        assert response.status_code == 400
        assert response.json() == {"error": "Invalid review id"}

    @pytest.mark.asyncio
    async def test_update_review_not_found(self, client: AsyncClient):
        response = await client.put(f"/reviews/{MISSING_ID}", json={"rating": 3})
        assert response.status_code == 404
        assert response.json() == {"error": "Review not found"}


class TestDeleteReview:
    """Tests for DELETE /reviews/{reviewId} endpoint."""

    @pytest.mark.asyncio
    async def test_delete_last_review_resets_summary(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 4, "comment": "ok"}
        )).json()

        response = await client.delete(f"/reviews/{review['id']}")
        assert response.status_code == 204
        assert await _summary(client, restaurant["id"]) == {"avg": 0, "count": 0}

    @pytest.mark.asyncio
    async def test_delete_review_twice(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 4, "comment": "ok"}
        )).json()
        assert (await client.delete(f"/reviews/{review['id']}")).status_code == 204
        assert (await client.delete(f"/reviews/{review['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_review_of_deleted_restaurant(self, client: AsyncClient):
        """Orphaned reviews can still be deleted; there is no summary to update."""
        restaurant = await _create_restaurant(client)
        review = (await client.post(
            f"/restaurants/{restaurant['id']}/reviews", json={"rating": 4, "comment": "ok"}
        )).json()
        await client.delete(f"/restaurants/{restaurant['id']}")

        response = await client.delete(f"/reviews/{review['id']}")
        assert response.status_code == 204

    @pytest.mark.asyncio
    async def test_delete_review_invalid_id(self, client: AsyncClient):
        response = await client.delete("/reviews/!!")
        assert response.status_code == 400


class TestRatingSummaryScenario:
    """End-to-end walk through create, add, add, delete."""

    @pytest.mark.asyncio
    async def test_summary_follows_review_mutations(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        assert restaurant["ratingSummary"] == {"avg": 0, "count": 0}
        rid = restaurant["id"]

        first = (await client.post(
            f"/restaurants/{rid}/reviews", json={"rating": 5, "comment": "x"}
        )).json()
        assert await _summary(client, rid) == {"avg": 5, "count": 1}

        await client.post(f"/restaurants/{rid}/reviews", json={"rating": 1, "comment": "y"})
        assert await _summary(client, rid) == {"avg": 3, "count": 2}

        assert (await client.delete(f"/reviews/{first['id']}")).status_code == 204
        assert await _summary(client, rid) == {"avg": 1, "count": 1}

    @pytest.mark.asyncio
    async def test_average_is_not_rounded(self, client: AsyncClient):
        restaurant = await _create_restaurant(client)
        for rating in (5, 4, 4):
            await client.post(
                f"/restaurants/{restaurant['id']}/reviews", json={"rating": rating, "comment": "x"}
            )
        summary = await _summary(client, restaurant["id"])
        assert summary["count"] == 3
        assert summary["avg"] == pytest.approx(13 / 3)
