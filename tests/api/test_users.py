"""
Tests for the /users routes.
"""


async def test_create_and_get_user(client, create_user):
    user_id = await create_user()

    res = await client.get(f"/users/{user_id}")

    assert res.status_code == 200
    assert res.json() == {"userId": user_id, "username": "testuser", "playername": "TestingUser"}
    assert "password" not in res.text


async def test_duplicate_username_conflicts(client, create_user):
    await create_user()

    res = await client.post(
        "/users",
        json={"username": "testuser", "playername": "Someone Else", "password": "222222"},
    )

    assert res.status_code == 409


async def test_missing_fields_are_rejected(client):
    res = await client.post("/users", json={"username": "testuser"})
    assert res.status_code == 400


async def test_delete_user(client, create_user):
    user_id = await create_user()

    assert (await client.delete(f"/users/{user_id}")).status_code == 200
    assert (await client.get(f"/users/{user_id}")).status_code == 404
    assert (await client.delete(f"/users/{user_id}")).status_code == 404


async def test_non_numeric_user_id(client):
    assert (await client.get("/users/abc")).status_code == 400


async def test_health(client):
    res = await client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}
