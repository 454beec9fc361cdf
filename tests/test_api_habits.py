import pytest

from lifetrack.app.core.config import settings

API = settings.API_V1_STR


async def register(client, username):
    client.cookies.clear()
    response = await client.post(
        f"{API}/auth/register",
        json={
            "username": username,
            "email": f"{username}@example.com",
            "password": "secret123",
            "confirm_password": "secret123",
        },
    )
    assert response.status_code == 201
    return response.json()


async def create_habit(client, name="Meditate"):
    response = await client.post(f"{API}/habits/", json={"name": name, "description": "10 minutes"})
    assert response.status_code == 201
    return response.json()


async def test_habit_crud(client):
    await register(client, "alice")
    habit = await create_habit(client)

    assert habit["streak"] == 0 and habit["total_days"] == 0
    assert habit["frequency"] == "daily"

    response = await client.patch(f"{API}/habits/{habit['id']}", json={"frequency": "weekly"})
    assert response.status_code == 200
    assert response.json()["frequency"] == "weekly"
    assert response.json()["name"] == "Meditate"

    response = await client.patch(f"{API}/habits/{habit['id']}", json={"frequency": "hourly"})
    assert response.status_code == 422

    assert (await client.delete(f"{API}/habits/{habit['id']}")).status_code == 204
    assert (await client.get(f"{API}/habits/")).json()["habits"] == []


async def test_checkin_flow(client, local_clock):
    await register(client, "alice")
    habit = await create_habit(client)
    url = f"{API}/habits/{habit['id']}/checkin"

    first = (await client.post(url)).json()
    assert first["checked_in"] is True
    assert (first["streak"], first["total_days"]) == (1, 1)
    assert [b["condition_days"] for b in first["unlocked_badges"]] == [1]

    again = await client.post(url)
    assert again.status_code == 200
    assert again.json()["checked_in"] is False
    assert (again.json()["streak"], again.json()["total_days"]) == (1, 1)

    local_clock.advance(days=1)
    second = (await client.post(url)).json()
    assert (second["streak"], second["total_days"]) == (2, 2)

    local_clock.advance(days=2)
    third = (await client.post(url)).json()
    assert (third["streak"], third["total_days"]) == (1, 3)

    history = (await client.get(f"{API}/habits/{habit['id']}/checkins")).json()
    assert len(history) == 3


async def test_overview(client):
    await register(client, "alice")
    read = await create_habit(client, "Read")
    await create_habit(client, "Run")
    await client.post(f"{API}/habits/{read['id']}/checkin")

    overview = (await client.get(f"{API}/habits/")).json()

    assert overview["total_habits"] == 2
    assert overview["done_today"] == 1
    assert overview["max_streak"] == 1
    assert overview["unlocked_badges"] == 1
    assert overview["total_badges"] == 4
    assert [h["today_checked"] for h in overview["habits"]] == [True, False]


async def test_seven_consecutive_days_unlock_week_badge(client, local_clock):
    await register(client, "alice")
    habit = await create_habit(client)

    for n in range(7):
        result = (await client.post(f"{API}/habits/{habit['id']}/checkin")).json()
        local_clock.advance(days=1)

    assert (result["streak"], result["total_days"]) == (7, 7)
    assert [b["condition_days"] for b in result["unlocked_badges"]] == [7]


async def test_habits_are_private(client):
    await register(client, "alice")
    habit = await create_habit(client)

    await register(client, "bob")
    hid = habit["id"]

    assert (await client.post(f"{API}/habits/{hid}/checkin")).status_code == 404
    assert (await client.patch(f"{API}/habits/{hid}", json={"name": "x"})).status_code == 404
    assert (await client.delete(f"{API}/habits/{hid}")).status_code == 404
    assert (await client.get(f"{API}/habits/{hid}/checkins")).status_code == 404
    assert (await client.post(f"{API}/habits/9999/checkin")).status_code == 404
    assert (await client.get(f"{API}/habits/")).json()["habits"] == []


@pytest.fixture
def admin_password(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_USERNAME", "admin")
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "admin-pass")
    return "admin-pass"


async def admin_login(client, password):
    client.cookies.clear()
    response = await client.post(f"{API}/auth/login", data={"username": "admin", "password": password})
    assert response.status_code == 200
    assert response.json()["is_admin"] is True


async def test_admin_requires_admin_session(client, admin_password):
    await register(client, "alice")
    assert (await client.get(f"{API}/admin/users")).status_code == 403

    client.cookies.clear()
    assert (await client.get(f"{API}/admin/users")).status_code == 401


async def test_admin_cannot_register_as_admin(client, admin_password):
    client.cookies.clear()
    response = await client.post(
        f"{API}/auth/register",
        json={"username": "admin", "email": "a@example.com", "password": "secret123", "confirm_password": "secret123"},
    )
    assert response.status_code == 400


async def test_admin_lists_and_deletes_users(client, admin_password, session_manager):
    alice = await register(client, "alice")
    await create_habit(client)
    alice_token = client.cookies["lifetrack_session"]

    await admin_login(client, admin_password)
    users = (await client.get(f"{API}/admin/users")).json()
    assert [(u["username"], u["habit_count"]) for u in users] == [("alice", 1)]

    assert (await client.delete(f"{API}/admin/users/{alice['id']}")).status_code == 204
    assert (await client.delete(f"{API}/admin/users/{alice['id']}")).status_code == 404
    assert (await client.get(f"{API}/admin/users")).json() == []

    client.cookies.clear()
    client.cookies.set("lifetrack_session", alice_token)
    assert (await client.get(f"{API}/auth/me")).status_code == 401


async def test_admin_session_cleanup(client, admin_password, clock, session_manager):
    await register(client, "alice")
    clock.advance(hours=25)

    await admin_login(client, admin_password)
    response = await client.post(f"{API}/admin/sessions/cleanup")

    assert response.json() == {"removed": 1}
    assert len(session_manager.store) == 1


async def test_admin_disabled_without_password(client, monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", "")
    client.cookies.clear()
    response = await client.post(f"{API}/auth/login", data={"username": "admin", "password": "anything"})
    assert response.status_code == 401


async def test_admin_changes_user_password(client, admin_password):
    alice = await register(client, "alice")
    alice_token = client.cookies["lifetrack_session"]

    await admin_login(client, admin_password)
    response = await client.patch(f"{API}/admin/users/{alice['id']}", json={"password": "newsecret1"})
    assert response.status_code == 200
    assert response.json()["username"] == "alice"

    client.cookies.clear()
    client.cookies.set("lifetrack_session", alice_token)
    assert (await client.get(f"{API}/auth/me")).status_code == 401

    client.cookies.clear()
    old = await client.post(f"{API}/auth/login", data={"username": "alice", "password": "secret123"})
    assert old.status_code == 401
    new = await client.post(f"{API}/auth/login", data={"username": "alice", "password": "newsecret1"})
    assert new.status_code == 200


async def test_admin_edits_username_and_email(client, admin_password):
    alice = await register(client, "alice")
    await create_habit(client)
    await register(client, "bob")

    await admin_login(client, admin_password)
    url = f"{API}/admin/users/{alice['id']}"

    response = await client.patch(url, json={"username": "alicia", "email": "alicia@example.com"})
    assert response.status_code == 200
    assert (response.json()["username"], response.json()["email"]) == ("alicia", "alicia@example.com")
    assert response.json()["habit_count"] == 1

    response = await client.patch(url, json={"username": "bob"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Username already exists"

    assert (await client.patch(f"{API}/admin/users/9999", json={"username": "x"})).status_code == 404

    client.cookies.clear()
    login = await client.post(f"{API}/auth/login", data={"username": "alicia", "password": "secret123"})
    assert login.status_code == 200


async def test_admin_edit_requires_admin(client, admin_password):
    alice = await register(client, "alice")
    response = await client.patch(f"{API}/admin/users/{alice['id']}", json={"password": "hijacked1"})
    assert response.status_code == 403
