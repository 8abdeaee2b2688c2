from types import SimpleNamespace
from uuid import uuid4

import pytest
from httpx import AsyncClient


def _submit_body(world: SimpleNamespace) -> dict:
    return {
        "assignment_id": str(world.assignment.id),
        "teacher_id": str(world.teacher.id),
        "course_id": str(world.course.id),
        "semester_id": str(world.semester.id),
        "file_url": "https://files.example.com/cse201.pdf",
        "file_name": "cse201.pdf",
    }


def _review_body(user, role: str, decision: str = "approved", **extra) -> dict:
    return {"reviewer_id": str(user.id), "reviewer_role": role, "decision": decision, **extra}


async def _submit(client: AsyncClient, world: SimpleNamespace, headers_for) -> dict:
    resp = await client.post("/api/v1/outlines", json=_submit_body(world), headers=headers_for(world.teacher))
    assert resp.status_code == 201, resp.text
    return resp.json()


@pytest.mark.asyncio
async def test_requires_authentication(client: AsyncClient, world: SimpleNamespace) -> None:
    resp = await client.get("/api/v1/outlines")
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_chain_over_http(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    outline = await _submit(client, world, headers_for)
    assert outline["status"] == "submitted"
    assert outline["current_reviewer_role"] == "class_advisor"
    assert outline["semester"]["name"] == "Fall 2026"

    steps = [
        (world.advisor, "class_advisor", "coordinator_review"),
        (world.coordinator, "ug_coordinator", "co_chairman_review"),
        (world.co_chairman, "co_chairman", "chairman_review"),
        (world.chairman, "chairman", "approved"),
    ]
    for user, role, status in steps:
        resp = await client.post(
            f"/api/v1/outlines/{outline['id']}/review",
            json=_review_body(user, role, expected_revision=outline["revision"]),
            headers=headers_for(user),
        )
        assert resp.status_code == 200, resp.text
        outline = resp.json()
        assert outline["status"] == status

    assert outline["current_reviewer_role"] is None
    reviews = await client.get(f"/api/v1/outlines/{outline['id']}/reviews", headers=headers_for(world.teacher))
    assert [r["reviewer_role"] for r in reviews.json()] == [
        "class_advisor", "ug_coordinator", "co_chairman", "chairman"
    ]

    assignment = await client.get(
        f"/api/v1/course-assignments/{world.assignment.id}", headers=headers_for(world.teacher)
    )
    assert assignment.json()["outline_status"] == "approved"


@pytest.mark.asyncio
async def test_out_of_turn_is_forbidden(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    outline = await _submit(client, world, headers_for)
    resp = await client.post(
        f"/api/v1/outlines/{outline['id']}/review",
        json=_review_body(world.coordinator, "ug_coordinator"),
        headers=headers_for(world.coordinator),
    )
    assert resp.status_code == 403
    assert "class_advisor" in resp.json()["detail"]

    after = await client.get(f"/api/v1/outlines/{outline['id']}", headers=headers_for(world.teacher))
    assert after.json()["status"] == "submitted"


@pytest.mark.asyncio
async def test_cannot_review_as_someone_else(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    outline = await _submit(client, world, headers_for)
    # The teacher claims to be the class advisor
    resp = await client.post(
        f"/api/v1/outlines/{outline['id']}/review",
        json=_review_body(world.advisor, "class_advisor"),
        headers=headers_for(world.teacher),
    )
    assert resp.status_code == 403
    resp = await client.post(
        f"/api/v1/outlines/{outline['id']}/review",
        json=_review_body(world.teacher, "class_advisor"),
        headers=headers_for(world.teacher),
    )
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_stale_revision_conflict(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    outline = await _submit(client, world, headers_for)
    first = await client.post(
        f"/api/v1/outlines/{outline['id']}/review",
        json=_review_body(world.advisor, "class_advisor", expected_revision=1),
        headers=headers_for(world.advisor),
    )
    assert first.status_code == 200

    stale = await client.post(
        f"/api/v1/outlines/{outline['id']}/review",
        json=_review_body(world.coordinator, "ug_coordinator", expected_revision=1),
        headers=headers_for(world.coordinator),
    )
    assert stale.status_code == 409


@pytest.mark.asyncio
async def test_reject_then_resubmit(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    outline = await _submit(client, world, headers_for)
    resp = await client.post(
        f"/api/v1/outlines/{outline['id']}/review",
        json=_review_body(world.advisor, "class_advisor", "rejected", comments="Missing CLO mapping"),
        headers=headers_for(world.advisor),
    )
    assert resp.json()["status"] == "rejected"
    assert resp.json()["rejection_comments"] == "Missing CLO mapping"

    second = await _submit(client, world, headers_for)
    assert second["version"] == 2

    listed = await client.get(
        "/api/v1/outlines",
        params={"assignment_id": str(world.assignment.id)},
        headers=headers_for(world.teacher),
    )
    assert sorted(o["version"] for o in listed.json()) == [1, 2]

    notes = await client.get("/api/v1/notifications", headers=headers_for(world.teacher))
    assert "outline_rejected" in [n["type"] for n in notes.json()["data"]]


@pytest.mark.asyncio
async def test_submit_validation(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = _submit_body(world)
    del body["file_url"]
    resp = await client.post("/api/v1/outlines", json=body, headers=headers_for(world.teacher))
    assert resp.status_code == 400
    assert "file_url" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_submit_for_unknown_assignment(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = _submit_body(world)
    body["assignment_id"] = str(world.course.id)
    resp = await client.post("/api/v1/outlines", json=body, headers=headers_for(world.teacher))
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_teacher_cannot_submit_for_colleague(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    resp = await client.post("/api/v1/outlines", json=_submit_body(world), headers=headers_for(world.teacher2))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_student_cannot_submit(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    resp = await client.post("/api/v1/outlines", json=_submit_body(world), headers=headers_for(world.student))
    assert resp.status_code == 403


@pytest.mark.asyncio
async def test_unknown_outline_is_404(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    missing = world.course.id
    resp = await client.get(f"/api/v1/outlines/{missing}", headers=headers_for(world.teacher))
    assert resp.status_code == 404
    resp = await client.post(
        f"/api/v1/outlines/{missing}/review",
        json=_review_body(world.advisor, "class_advisor"),
        headers=headers_for(world.advisor),
    )
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_review_for_unknown_user_is_404(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    outline = await _submit(client, world, headers_for)
    resp = await client.post(
        f"/api/v1/outlines/{outline['id']}/review",
        json={"reviewer_id": str(uuid4()), "reviewer_role": "class_advisor", "decision": "approved"},
        headers=headers_for(world.admin),
    )
    assert resp.status_code == 404
    assert resp.json()["detail"] == "Reviewer not found"
