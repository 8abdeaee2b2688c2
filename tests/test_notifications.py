from types import SimpleNamespace

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from portal.api.v1.notifications.resolver import resolve_reviewer
from portal.api.v1.notifications.service import notify
from portal.core.enums import NotificationType


@pytest.mark.asyncio
async def test_resolver_per_stage(db_session: AsyncSession, world: SimpleNamespace) -> None:
    sid = world.semester.id
    assert await resolve_reviewer(db_session, sid, "class_advisor", 2) == world.advisor.id
    assert await resolve_reviewer(db_session, sid, "class_advisor", 3) is None
    assert await resolve_reviewer(db_session, sid, "ug_coordinator") == world.coordinator.id
    assert await resolve_reviewer(db_session, sid, "co_chairman") == world.co_chairman.id
    assert await resolve_reviewer(db_session, sid, "chairman") == world.chairman.id
    assert await resolve_reviewer(db_session, sid, None) is None


@pytest.mark.asyncio
async def test_read_flow(client: AsyncClient, db_session: AsyncSession, world: SimpleNamespace, headers_for) -> None:
    notify(db_session, world.teacher.id, NotificationType.COURSE_ASSIGNED, "Assigned", "CSE201 assigned to you")
    notify(db_session, world.teacher.id, NotificationType.SCHEDULING_OPEN, "Scheduling open", "Book your slots")
    notify(db_session, None, NotificationType.SCHEDULING_OPEN, "Nobody", "Dropped")
    await db_session.commit()

    resp = await client.get("/api/v1/notifications", headers=headers_for(world.teacher))
    data = resp.json()
    assert data["unread_count"] == 2
    assert len(data["data"]) == 2

    first = data["data"][0]["id"]
    resp = await client.post(f"/api/v1/notifications/{first}/read", headers=headers_for(world.teacher))
    assert resp.json()["updated"] == 1

    # Another user's notification is invisible
    resp = await client.post(f"/api/v1/notifications/{first}/read", headers=headers_for(world.teacher2))
    assert resp.status_code == 404

    unread = await client.get(
        "/api/v1/notifications", params={"unread_only": True}, headers=headers_for(world.teacher)
    )
    assert unread.json()["unread_count"] == 1
    assert len(unread.json()["data"]) == 1

    resp = await client.post("/api/v1/notifications/read-all", headers=headers_for(world.teacher))
    assert resp.json()["updated"] == 1

    after = await client.get("/api/v1/notifications", headers=headers_for(world.teacher))
    assert after.json()["unread_count"] == 0
