import pytest
from httpx import AsyncClient

from campus_events.models.principal import PrincipalRole
from tests.conftest import auth_headers_for


@pytest.fixture
def on_duty_data() -> dict:
    return {
        "reason": "Event Participation",
        "eventName": "Smart India Hackathon",
        "fromDate": "2025-01-20",
        "toDate": "2025-01-21",
        "fromTime": "09:00",
        "toTime": "17:00",
        "description": "Representing the college at the national finals",
    }


@pytest.fixture
async def pending_request(client: AsyncClient, student_headers, on_duty_data) -> dict:
    response = await client.post("/api/on-duty-requests", json=on_duty_data, headers=student_headers)
    assert response.status_code == 201
    return response.json()


# ============================================
# Submission
# ============================================

@pytest.mark.asyncio
async def test_student_submits_request(client: AsyncClient, student, student_headers, on_duty_data):
    response = await client.post("/api/on-duty-requests", json=on_duty_data, headers=student_headers)

    assert response.status_code == 201
    data = response.json()
    assert data["status"] == "pending"
    assert data["reason"] == "Event Participation"
    assert data["studentId"] == student.id
    assert data["studentName"] == student.name
    assert data["rollNumber"] == student.roll_number
    assert data["registrationNumber"] == student.registration_number
    assert data["department"] == "CSE"
    assert data["fromDate"] == "2025-01-20"
    assert "resolvedBy" not in data or data["resolvedBy"] is None
    assert data["submittedAt"]


@pytest.mark.asyncio
async def test_faculty_cannot_submit(client: AsyncClient, faculty_headers, on_duty_data):
    response = await client.post("/api/on-duty-requests", json=on_duty_data, headers=faculty_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_invalid_date_range(client: AsyncClient, student_headers, on_duty_data):
    response = await client.post(
        "/api/on-duty-requests",
        json={**on_duty_data, "fromDate": "2025-01-22", "toDate": "2025-01-21"},
        headers=student_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unknown_reason(client: AsyncClient, student_headers, on_duty_data):
    response = await client.post(
        "/api/on-duty-requests", json={**on_duty_data, "reason": "Vacation"}, headers=student_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_blank_event_name(client: AsyncClient, student_headers, on_duty_data):
    response = await client.post(
        "/api/on-duty-requests", json={**on_duty_data, "eventName": " "}, headers=student_headers
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_same_day_times_compare_as_clock_times(client: AsyncClient, student_headers, on_duty_data):
    response = await client.post(
        "/api/on-duty-requests",
        json={**on_duty_data, "toDate": "2025-01-20", "fromTime": "9:00", "toTime": "10:00"},
        headers=student_headers,
    )

    assert response.status_code == 201
    assert response.json()["fromTime"] == "09:00"
    assert response.json()["toTime"] == "10:00"


@pytest.mark.asyncio
async def test_same_day_times_out_of_order(client: AsyncClient, student_headers, on_duty_data):
    response = await client.post(
        "/api/on-duty-requests",
        json={**on_duty_data, "toDate": "2025-01-20", "fromTime": "14:00", "toTime": "9:30"},
        headers=student_headers,
    )

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_unparseable_time(client: AsyncClient, student_headers, on_duty_data):
    response = await client.post(
        "/api/on-duty-requests", json={**on_duty_data, "fromTime": "morning"}, headers=student_headers
    )

    assert response.status_code == 400


# ============================================
# Visibility
# ============================================

@pytest.mark.asyncio
async def test_visibility_rules(client: AsyncClient, make_student, make_faculty, on_duty_data):
    cse_student = auth_headers_for(await make_student(department="CSE"))
    other_cse_student = auth_headers_for(await make_student(department="CSE"))
    ece_student = auth_headers_for(await make_student(department="ECE"))
    cse_faculty = auth_headers_for(await make_faculty(department="CSE"))
    admin = auth_headers_for(await make_faculty(department="Administration", role=PrincipalRole.ADMIN))

    cse = await client.post("/api/on-duty-requests", json=on_duty_data, headers=cse_student)
    await client.post("/api/on-duty-requests", json=on_duty_data, headers=other_cse_student)
    await client.post("/api/on-duty-requests", json=on_duty_data, headers=ece_student)

    own = await client.get("/api/on-duty-requests", headers=cse_student)
    department = await client.get("/api/on-duty-requests", headers=cse_faculty)
    everything = await client.get("/api/on-duty-requests", headers=admin)

    assert [r["id"] for r in own.json()] == [cse.json()["id"]]
    assert {r["department"] for r in department.json()} == {"CSE"}
    assert len(department.json()) == 2
    assert len(everything.json()) == 3


@pytest.mark.asyncio
async def test_student_cannot_view_others_request(client: AsyncClient, pending_request, make_student):
    other = auth_headers_for(await make_student(department="CSE"))

    response = await client.get(f"/api/on-duty-requests/{pending_request['id']}", headers=other)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_get_missing_request(client: AsyncClient, admin_headers):
    response = await client.get("/api/on-duty-requests/missing", headers=admin_headers)

    assert response.status_code == 404
    assert response.json() == {"message": "On-duty request not found"}


@pytest.mark.asyncio
async def test_status_filter(client: AsyncClient, student_headers, faculty_headers, on_duty_data):
    first = await client.post("/api/on-duty-requests", json=on_duty_data, headers=student_headers)
    await client.post("/api/on-duty-requests", json=on_duty_data, headers=student_headers)
    await client.put(f"/api/on-duty-requests/{first.json()['id']}/approve", headers=faculty_headers)

    pending = await client.get("/api/on-duty-requests", params={"status": "pending"}, headers=faculty_headers)
    approved = await client.get("/api/on-duty-requests", params={"status": "approved"}, headers=faculty_headers)

    assert len(pending.json()) == 1
    assert [r["id"] for r in approved.json()] == [first.json()["id"]]


# ============================================
# Approval state machine
# ============================================

@pytest.mark.asyncio
async def test_approve_stamps_resolver(client: AsyncClient, pending_request, faculty, faculty_headers):
    response = await client.put(
        f"/api/on-duty-requests/{pending_request['id']}/approve",
        json={"remarks": "Approved, submit certificate on return"},
        headers=faculty_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "approved"
    assert data["resolvedBy"] == {"id": faculty.id, "name": faculty.name}
    assert data["resolvedAt"]
    assert data["remarks"] == "Approved, submit certificate on return"


@pytest.mark.asyncio
async def test_resolution_is_terminal(client: AsyncClient, pending_request, faculty_headers, admin_headers):
    rejected = await client.put(f"/api/on-duty-requests/{pending_request['id']}/reject", headers=faculty_headers)
    approve = await client.put(f"/api/on-duty-requests/{pending_request['id']}/approve", headers=admin_headers)
    reject_again = await client.put(f"/api/on-duty-requests/{pending_request['id']}/reject", headers=admin_headers)

    assert rejected.status_code == 200
    assert approve.status_code == 400
    assert approve.json() == {"message": "Request has already been rejected"}
    assert reject_again.status_code == 400

    current = await client.get(f"/api/on-duty-requests/{pending_request['id']}", headers=admin_headers)
    assert current.json()["status"] == "rejected"


@pytest.mark.asyncio
async def test_student_cannot_resolve_own_request(client: AsyncClient, pending_request, student_headers):
    response = await client.put(f"/api/on-duty-requests/{pending_request['id']}/approve", headers=student_headers)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_out_of_scope_faculty_never_sees_state(client: AsyncClient, pending_request, faculty_headers, make_faculty):
    """Forbidden wins over InvalidTransition for another department"""
    await client.put(f"/api/on-duty-requests/{pending_request['id']}/approve", headers=faculty_headers)
    ece_faculty = auth_headers_for(await make_faculty(department="ECE"))

    response = await client.put(f"/api/on-duty-requests/{pending_request['id']}/reject", headers=ece_faculty)

    assert response.status_code == 403


@pytest.mark.asyncio
async def test_resolve_missing_request(client: AsyncClient, admin_headers):
    response = await client.put("/api/on-duty-requests/missing/approve", headers=admin_headers)

    assert response.status_code == 404


@pytest.mark.asyncio
async def test_admin_resolves_any_department(client: AsyncClient, make_student, admin_headers, on_duty_data):
    ece_student = auth_headers_for(await make_student(department="ECE"))
    created = await client.post("/api/on-duty-requests", json=on_duty_data, headers=ece_student)

    response = await client.put(f"/api/on-duty-requests/{created.json()['id']}/reject", headers=admin_headers)

    assert response.status_code == 200
    assert response.json()["status"] == "rejected"


@pytest.mark.asyncio
async def test_cse_ece_scenario(client: AsyncClient, make_student, make_faculty, on_duty_data):
    student_x = auth_headers_for(await make_student(department="CSE"))
    created = await client.post("/api/on-duty-requests", json=on_duty_data, headers=student_x)
    request_id = created.json()["id"]

    ece_faculty = auth_headers_for(await make_faculty(department="ECE"))
    cse_faculty = auth_headers_for(await make_faculty(department="CSE"))

    denied = await client.put(f"/api/on-duty-requests/{request_id}/approve", headers=ece_faculty)
    assert denied.status_code == 403

    approved = await client.put(f"/api/on-duty-requests/{request_id}/approve", headers=cse_faculty)
    assert approved.status_code == 200
    assert approved.json()["status"] == "approved"

    rejected = await client.put(f"/api/on-duty-requests/{request_id}/reject", headers=cse_faculty)
    assert rejected.status_code == 400
