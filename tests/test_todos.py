from datetime import datetime, timedelta

import pytest
from sqlalchemy import func, select

from lifetrack.app.core.errors import InvalidTodo, NotFound
from lifetrack.app.models.todo import TodoCheckin
from lifetrack.app.services import todos as todo_service

NOW = datetime(2024, 3, 1, 9, 30)


@pytest.fixture
async def alice(make_user):
    return await make_user("alice")


@pytest.fixture
async def todo(db, alice):
    return await todo_service.create_todo(db, alice.id, "File taxes", NOW + timedelta(days=3), now=NOW)


async def test_create_todo(db, alice):
    todo = await todo_service.create_todo(db, alice.id, "Call mom", now=NOW)

    assert todo.status == "pending"
    assert todo.due_date is None


@pytest.mark.parametrize(
    "content, due_date",
    [
        ("", None),
        ("   ", None),
        ("Late", NOW - timedelta(hours=1)),
        ("Too soon", NOW + timedelta(seconds=30)),
    ],
)
async def test_create_todo_rejects_invalid_input(db, alice, content, due_date):
    with pytest.raises(InvalidTodo):
        await todo_service.create_todo(db, alice.id, content, due_date, now=NOW)


async def test_toggle_flips_status(db, alice, todo):
    assert (await todo_service.toggle_todo(db, todo.id, alice.id)).status == "completed"
    assert (await todo_service.toggle_todo(db, todo.id, alice.id)).status == "pending"


async def test_checkins_have_no_daily_limit(db, alice, todo):
    for minutes in (0, 5, 10):
        await todo_service.checkin_todo(db, todo.id, alice.id, NOW + timedelta(minutes=minutes))

    [summary] = await todo_service.list_todos(db, alice.id)
    assert summary.checkin_count == 3
    assert summary.last_checkin == NOW + timedelta(minutes=10)


async def test_checkin_history_newest_first_and_limited(db, alice, todo):
    for n in range(5):
        await todo_service.checkin_todo(db, todo.id, alice.id, NOW + timedelta(hours=n))

    history = await todo_service.list_todo_checkins(db, todo.id, alice.id, limit=3)

    assert [c.checked_in_at for c in history] == [NOW + timedelta(hours=n) for n in (4, 3, 2)]


async def test_list_orders_pending_first_then_by_due_date(db, alice):
    undated = await todo_service.create_todo(db, alice.id, "Someday", now=NOW)
    later = await todo_service.create_todo(db, alice.id, "Later", NOW + timedelta(days=5), now=NOW)
    sooner = await todo_service.create_todo(db, alice.id, "Sooner", NOW + timedelta(days=1), now=NOW)
    done = await todo_service.create_todo(db, alice.id, "Done", NOW + timedelta(hours=1), now=NOW)
    await todo_service.toggle_todo(db, done.id, alice.id)

    rows = await todo_service.list_todos(db, alice.id)

    assert [r.todo.id for r in rows] == [sooner.id, later.id, undated.id, done.id]
    assert all(r.checkin_count == 0 and r.last_checkin is None for r in rows)


async def test_other_users_todo_is_not_found(db, make_user, alice, todo):
    bob = await make_user("bob")

    with pytest.raises(NotFound):
        await todo_service.toggle_todo(db, todo.id, bob.id)
    with pytest.raises(NotFound):
        await todo_service.checkin_todo(db, todo.id, bob.id, NOW)
    with pytest.raises(NotFound):
        await todo_service.list_todo_checkins(db, todo.id, bob.id)
    with pytest.raises(NotFound):
        await todo_service.delete_todo(db, todo.id, bob.id)

    assert await todo_service.list_todos(db, bob.id) == []


async def test_delete_removes_checkins(db, alice, todo):
    await todo_service.checkin_todo(db, todo.id, alice.id, NOW)

    await todo_service.delete_todo(db, todo.id, alice.id)

    assert await todo_service.list_todos(db, alice.id) == []
    assert await db.scalar(select(func.count()).select_from(TodoCheckin)) == 0
