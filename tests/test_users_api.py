"""
User API tests - REST CRUD, envelope shape, pagination and error statuses.
"""

import pytest
from httpx import AsyncClient

from app.db.errors import PersistenceError
from app.db.models import User
from app.db.repositories.user_repository import UserRepository


async def _user_count(database) -> int:
    async with database.session() as s:
        return await UserRepository(s).count()


# --- list -------------------------------------------------------------------


@pytest.mark.asyncio
async def test_list_users_empty(client: AsyncClient):
    response = await client.get("/api/users")
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["data"]["data"] == []
    assert body["data"]["pagination"] == {
        "currentPage": 1,
        "totalPages": 0,
        "totalItems": 0,
        "hasNext": False,
        "hasPrev": False,
    }
    assert "error" not in body


@pytest.mark.asyncio
async def test_list_users_newest_first_without_email(client: AsyncClient, make_users):
    await make_users(3)
    response = await client.get("/api/users")
    users = response.json()["data"]["data"]
    assert [u["username"] for u in users] == ["user2", "user1", "user0"]
    for user in users:
        assert "email" not in user
        assert set(user) >= {"id", "displayName", "bio", "profileImageUrl", "createdAt", "_count"}


@pytest.mark.asyncio
async def test_list_users_pages(client: AsyncClient, make_users):
    await make_users(23)

    response = await client.get("/api/users", params={"page": 3, "limit": 10})
    data = response.json()["data"]
    assert len(data["data"]) == 3
    assert data["pagination"] == {
        "currentPage": 3,
        "totalPages": 3,
        "totalItems": 23,
        "hasNext": False,
        "hasPrev": True,
    }
    # Oldest three land on the last page
    assert {u["username"] for u in data["data"]} == {"user0", "user1", "user2"}

    response = await client.get("/api/users", params={"page": 2, "limit": 10})
    pagination = response.json()["data"]["pagination"]
    assert pagination["hasNext"] is True
    assert pagination["hasPrev"] is True


@pytest.mark.asyncio
async def test_list_users_page_past_end_is_empty(client: AsyncClient, make_users):
    await make_users(5)
    response = await client.get("/api/users", params={"page": 4, "limit": 2})
    data = response.json()["data"]
    assert data["data"] == []
    assert data["pagination"]["totalPages"] == 3
    assert data["pagination"]["hasNext"] is False


@pytest.mark.asyncio
async def test_list_users_limit_clamped_to_50(client: AsyncClient, make_users):
    await make_users(55)
    response = await client.get("/api/users", params={"limit": 500})
    data = response.json()["data"]
    assert len(data["data"]) == 50
    assert data["pagination"]["totalPages"] == 2


@pytest.mark.asyncio
async def test_list_users_huge_page_is_empty(client: AsyncClient, make_users):
    await make_users(3)
    response = await client.get("/api/users", params={"page": "100000000000000000000"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["data"] == []
    assert data["pagination"]["hasNext"] is False
    assert data["pagination"]["hasPrev"] is True
    assert data["pagination"]["totalItems"] == 3


@pytest.mark.asyncio
async def test_list_users_defaults_on_bad_query(client: AsyncClient, make_users):
    await make_users(12)
    response = await client.get("/api/users", params={"page": "abc", "limit": "-3"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data["data"]) == 10
    assert data["pagination"]["currentPage"] == 1


@pytest.mark.asyncio
async def test_list_users_includes_counts(client: AsyncClient, make_users, add_activity):
    alice, bob, carol = await make_users(3)
    await add_activity(alice, posts=2, followers=[bob, carol], following=[bob])

    response = await client.get("/api/users")
    by_name = {u["username"]: u for u in response.json()["data"]["data"]}
    assert by_name["user0"]["_count"] == {"posts": 2, "followers": 2, "following": 1}
    assert by_name["user1"]["_count"] == {"posts": 0, "followers": 1, "following": 1}


@pytest.mark.asyncio
async def test_list_users_persistence_fault_is_500(client: AsyncClient, monkeypatch):
    async def boom(self, **kwargs):
        raise PersistenceError("connection reset")

    monkeypatch.setattr(UserRepository, "get_page_with_counts", boom)
    monkeypatch.setattr(UserRepository, "count", boom)
    response = await client.get("/api/users")
    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to fetch users"}


# --- get --------------------------------------------------------------------


@pytest.mark.asyncio
async def test_get_user_includes_email_and_counts(client: AsyncClient, make_user):
    user = await make_user(bio="hi")
    response = await client.get(f"/api/users/{user.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["email"] == "user0@example.com"
    assert data["bio"] == "hi"
    assert data["_count"] == {"posts": 0, "followers": 0, "following": 0}


@pytest.mark.asyncio
async def test_get_user_not_found(client: AsyncClient):
    response = await client.get("/api/users/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "User not found"}


@pytest.mark.asyncio
async def test_get_user_blank_id_is_400(client: AsyncClient):
    response = await client.get("/api/users/%20")
    assert response.status_code == 400
    assert response.json()["error"] == "ID is required"


@pytest.mark.asyncio
async def test_get_user_persistence_fault_is_500(client: AsyncClient, monkeypatch):
    async def boom(self, id):
        raise PersistenceError("timeout")

    monkeypatch.setattr(UserRepository, "get_with_counts", boom)
    response = await client.get("/api/users/abc")
    assert response.status_code == 500
    assert response.json()["error"] == "Failed to fetch user"


# --- create -----------------------------------------------------------------


@pytest.mark.asyncio
async def test_create_user_then_duplicate_email_conflicts(client: AsyncClient, database):
    payload = {"email": "a@x.com", "username": "a", "displayName": "A"}
    response = await client.post("/api/users", json=payload)
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "User created successfully"
    assert body["data"]["username"] == "a"
    assert body["data"]["email"] == "a@x.com"
    assert body["data"]["bio"] is None
    assert body["data"]["profileImageUrl"] is None

    response = await client.post(
        "/api/users", json={"email": "a@x.com", "username": "other", "displayName": "B"}
    )
    assert response.status_code == 409
    assert response.json() == {"success": False, "error": "User already exists"}
    assert await _user_count(database) == 1


@pytest.mark.asyncio
async def test_create_user_duplicate_username_conflicts(client: AsyncClient, make_user, database):
    await make_user(username="taken")
    response = await client.post(
        "/api/users", json={"email": "new@x.com", "username": "taken", "displayName": "T"}
    )
    assert response.status_code == 409
    assert await _user_count(database) == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["email", "username", "displayName"])
async def test_create_user_missing_required_field(client: AsyncClient, database, missing):
    payload = {"email": "a@x.com", "username": "a", "displayName": "A"}
    del payload[missing]
    response = await client.post("/api/users", json=payload)
    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Required fields missing: email, username, displayName",
    }
    assert await _user_count(database) == 0


@pytest.mark.asyncio
async def test_create_user_empty_required_field_is_400(client: AsyncClient):
    response = await client.post(
        "/api/users", json={"email": "", "username": "a", "displayName": "A"}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_user_optional_fields(client: AsyncClient):
    response = await client.post(
        "/api/users",
        json={
            "email": "b@x.com",
            "username": "b",
            "displayName": "B",
            "bio": "",
            "profileImageUrl": "https://img.example.com/b.png",
        },
    )
    data = response.json()["data"]
    assert data["bio"] is None
    assert data["profileImageUrl"] == "https://img.example.com/b.png"


@pytest.mark.asyncio
async def test_create_user_long_text_fields(client: AsyncClient):
    payload = {
        "email": "long@x.com",
        "username": "u" * 80,
        "displayName": "D" * 300,
        "profileImageUrl": "https://img.example.com/" + "p" * 1000,
    }
    response = await client.post("/api/users", json=payload)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["username"] == "u" * 80
    assert len(data["displayName"]) == 300


def test_user_text_columns_are_unbounded():
    columns = User.__table__.c
    for name in ("email", "username", "display_name", "bio", "profile_image_url"):
        assert getattr(columns[name].type, "length", None) is None


@pytest.mark.asyncio
async def test_create_user_malformed_body_is_400(client: AsyncClient):
    response = await client.post("/api/users", json=["not", "an", "object"])
    assert response.status_code == 400
    assert response.json()["success"] is False


# --- update -----------------------------------------------------------------


@pytest.mark.asyncio
async def test_update_only_bio_leaves_other_fields(client: AsyncClient, make_user):
    user = await make_user(bio="old", profile_image_url="https://img/x.png")
    response = await client.patch(f"/api/users/{user.id}", json={"bio": "new bio"})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "User updated successfully"
    assert body["data"]["bio"] == "new bio"
    assert body["data"]["displayName"] == "User 0"
    assert body["data"]["profileImageUrl"] == "https://img/x.png"


@pytest.mark.asyncio
async def test_update_put_null_clears_field(client: AsyncClient, make_user):
    user = await make_user(bio="old", profile_image_url="https://img/x.png")
    response = await client.put(
        f"/api/users/{user.id}", json={"bio": None, "profileImageUrl": ""}
    )
    data = response.json()["data"]
    assert data["bio"] is None
    assert data["profileImageUrl"] is None
    assert data["displayName"] == "User 0"


@pytest.mark.asyncio
async def test_update_display_name(client: AsyncClient, make_user):
    user = await make_user()
    response = await client.put(f"/api/users/{user.id}", json={"displayName": "Renamed"})
    assert response.json()["data"]["displayName"] == "Renamed"

    response = await client.get(f"/api/users/{user.id}")
    assert response.json()["data"]["displayName"] == "Renamed"


@pytest.mark.asyncio
async def test_update_cannot_clear_display_name(client: AsyncClient, make_user):
    user = await make_user()
    response = await client.patch(f"/api/users/{user.id}", json={"displayName": None})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_not_found(client: AsyncClient):
    response = await client.patch("/api/users/missing", json={"bio": "x"})
    assert response.status_code == 404
    assert response.json()["error"] == "User not found"


@pytest.mark.asyncio
async def test_update_blank_id_is_400(client: AsyncClient):
    response = await client.put("/api/users/%20", json={"bio": "x"})
    assert response.status_code == 400


# --- delete -----------------------------------------------------------------


@pytest.mark.asyncio
async def test_delete_user_cascades_activity(client: AsyncClient, make_users, add_activity, database):
    alice, bob = await make_users(2)
    await add_activity(alice, posts=1, followers=[bob])

    response = await client.delete(f"/api/users/{alice.id}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "User deleted successfully"}

    response = await client.get(f"/api/users/{alice.id}")
    assert response.status_code == 404
    response = await client.get(f"/api/users/{bob.id}")
    assert response.json()["data"]["_count"] == {"posts": 0, "followers": 0, "following": 0}


@pytest.mark.asyncio
async def test_delete_not_found(client: AsyncClient):
    response = await client.delete("/api/users/missing")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_blank_id_is_400(client: AsyncClient):
    response = await client.delete("/api/users/%20")
    assert response.status_code == 400
    assert response.json()["error"] == "ID is required"
