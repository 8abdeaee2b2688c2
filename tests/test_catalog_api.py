"""Semesters, courses, course assignments and the audit trail over HTTP."""

from types import SimpleNamespace

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/")
    assert resp.json() == {"status": "ok"}


@pytest.mark.asyncio
async def test_create_semester_defaults(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {
        "name": "Spring 2027",
        "academic_year": "2026-2027",
        "type": "spring",
        "start_date": "2027-01-10",
        "end_date": "2027-05-30",
        "chairman_id": str(world.chairman.id),
    }
    resp = await client.post("/api/v1/semesters", json=body, headers=headers_for(world.admin))
    assert resp.status_code == 201, resp.text
    data = resp.json()
    assert data["status"] == "planning"
    assert data["working_days"] == [1, 2, 3, 4, 5]
    assert len(data["time_slots"]) == 8
    assert data["time_slots"][0]["start_time"] == "08:30"

    forbidden = await client.post("/api/v1/semesters", json=body, headers=headers_for(world.chairman))
    assert forbidden.status_code == 403


@pytest.mark.asyncio
async def test_semester_validation(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {
        "name": "Backwards",
        "academic_year": "2026-2027",
        "type": "fall",
        "start_date": "2026-12-01",
        "end_date": "2026-09-01",
    }
    resp = await client.post("/api/v1/semesters", json=body, headers=headers_for(world.admin))
    assert resp.status_code == 422

    body.update(start_date="2026-09-01", end_date="2026-12-01", chairman_id=str(world.teacher.id))
    resp = await client.post("/api/v1/semesters", json=body, headers=headers_for(world.admin))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_class_advisor_per_year(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    url = f"/api/v1/semesters/{world.semester.id}/class-advisors"
    resp = await client.put(
        url, json={"year": 3, "user_id": str(world.advisor.id)}, headers=headers_for(world.admin)
    )
    assert resp.status_code == 200
    assert [a["year"] for a in resp.json()["class_advisors"]] == [2, 3]

    resp = await client.put(
        url, json={"year": 3, "user_id": str(world.teacher.id)}, headers=headers_for(world.admin)
    )
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_scheduling_open_notifies_teachers(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    resp = await client.patch(
        f"/api/v1/semesters/{world.semester.id}",
        json={"status": "scheduling"},
        headers=headers_for(world.admin),
    )
    assert resp.status_code == 200
    assert resp.json()["status"] == "scheduling"

    for teacher in (world.teacher, world.teacher2):
        notes = await client.get("/api/v1/notifications", headers=headers_for(teacher))
        assert [n["type"] for n in notes.json()["data"]] == ["scheduling_open"]


@pytest.mark.asyncio
async def test_courses(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {"course_code": "cse305", "course_name": "Operating Systems", "year": 3, "semester": 1, "credits": 3}
    resp = await client.post("/api/v1/courses", json=body, headers=headers_for(world.admin))
    assert resp.status_code == 201
    assert resp.json()["course_code"] == "CSE305"

    dup = await client.post("/api/v1/courses", json=body, headers=headers_for(world.admin))
    assert dup.status_code == 409

    year3 = await client.get("/api/v1/courses", params={"year": 3}, headers=headers_for(world.student))
    assert [c["course_code"] for c in year3.json()] == ["CSE305"]


@pytest.mark.asyncio
async def test_assign_course(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {
        "semester_id": str(world.semester.id),
        "teacher_id": str(world.teacher2.id),
        "course_id": str(world.course.id),
        "year": 3,
        "section": "A",
    }
    resp = await client.post("/api/v1/course-assignments", json=body, headers=headers_for(world.advisor))
    assert resp.status_code == 201, resp.text
    assert resp.json()["assigned_by"] == str(world.advisor.id)
    assert resp.json()["outline_status"] is None

    dup = await client.post("/api/v1/course-assignments", json=body, headers=headers_for(world.advisor))
    assert dup.status_code == 409

    by_teacher = await client.get(
        "/api/v1/course-assignments",
        params={"teacher_id": str(world.teacher2.id)},
        headers=headers_for(world.teacher2),
    )
    assert [a["year"] for a in by_teacher.json()] == [2, 3]

    notes = await client.get("/api/v1/notifications", headers=headers_for(world.teacher2))
    assert notes.json()["data"][0]["type"] == "course_assigned"


@pytest.mark.asyncio
async def test_assignment_requires_advisor(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {
        "semester_id": str(world.semester.id),
        "teacher_id": str(world.teacher2.id),
        "course_id": str(world.course.id),
    }
    resp = await client.post("/api/v1/course-assignments", json=body, headers=headers_for(world.teacher))
    assert resp.status_code == 403

    body["teacher_id"] = str(world.student.id)
    resp = await client.post("/api/v1/course-assignments", json=body, headers=headers_for(world.advisor))
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_audit_trail_is_admin_only(client: AsyncClient, world: SimpleNamespace, headers_for) -> None:
    body = {
        "assignment_id": str(world.assignment.id),
        "teacher_id": str(world.teacher.id),
        "course_id": str(world.course.id),
        "semester_id": str(world.semester.id),
        "file_url": "https://files.example.com/o.pdf",
        "file_name": "o.pdf",
    }
    outline = (await client.post("/api/v1/outlines", json=body, headers=headers_for(world.teacher))).json()

    resp = await client.get(
        "/api/v1/audit-logs",
        params={"entity_type": "COURSE_OUTLINE", "entity_id": outline["id"]},
        headers=headers_for(world.admin),
    )
    assert resp.status_code == 200
    assert [e["action"] for e in resp.json()] == ["SUBMITTED"]
    assert resp.json()[0]["performed_by_role"] == "teacher"

    denied = await client.get("/api/v1/audit-logs", headers=headers_for(world.chairman))
    assert denied.status_code == 403
