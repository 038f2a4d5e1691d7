"""
외박/휴가 신청 플로우 테스트.
- 학생 신청 → 기간 중복 차단 → 관리자 승인 → 재처리 불가,
  과거 날짜 / 역순 기간 검증, 학생 간 접근 제한, 삭제 규칙을 검증한다.
"""

from datetime import date, timedelta

from tests.helpers import API, auth_header, enroll_via_api, setup_admin


def _dates(start_offset: int, days: int) -> dict:
    start = date.today() + timedelta(days=start_offset)
    return {"from_date": start.isoformat(), "to_date": (start + timedelta(days=days)).isoformat()}


def _leave_payload(start_offset=1, days=2) -> dict:
    return {**_dates(start_offset, days), "destination": "Home town", "reason": "Family function"}


def test_leave_request_approval_flow(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])

    created = client.post(f"{API}/leave-requests/new", json=_leave_payload(), headers=auth_header(student["token"]))
    assert created.status_code == 201, created.text
    leave = created.json()["data"]
    assert leave["status"] == "pending"

    overlap = client.post(
        f"{API}/leave-requests/new", json=_leave_payload(start_offset=2), headers=auth_header(student["token"])
    )
    assert overlap.status_code == 409

    approved = client.patch(
        f"{API}/leave-requests/{leave['id']}/status",
        json={"status": "approved"},
        headers=auth_header(admin["token"]),
    )
    assert approved.status_code == 200, approved.text
    assert approved.json()["data"]["status"] == "approved"
    assert approved.json()["data"]["approver"]["id"] == str(admin["user"].id)

    again = client.patch(
        f"{API}/leave-requests/{leave['id']}/status",
        json={"status": "rejected"},
        headers=auth_header(admin["token"]),
    )
    assert again.status_code == 409
    assert again.json()["message"] == "Leave request already processed"

    # 승인된 건은 학생이 삭제할 수 없음
    delete = client.delete(f"{API}/leave-requests/{leave['id']}", headers=auth_header(student["token"]))
    assert delete.status_code == 400


def test_leave_request_date_validation(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])
    headers = auth_header(student["token"])

    past = client.post(f"{API}/leave-requests/new", json=_leave_payload(start_offset=-3), headers=headers)
    assert past.status_code == 400
    assert past.json()["field"] == "from_date"

    reversed_payload = {**_leave_payload(), **_dates(5, -2)}
    reversed_res = client.post(f"{API}/leave-requests/new", json=reversed_payload, headers=headers)
    assert reversed_res.status_code == 400
    assert reversed_res.json()["field"] == "to_date"

    missing = client.post(f"{API}/leave-requests/new", json={"destination": "x", "reason": "y"}, headers=headers)
    assert missing.status_code == 400


def test_leave_requests_are_scoped_to_owner(client, db_session):
    admin = setup_admin(client, db_session)
    owner = enroll_via_api(client, admin["token"])
    other = enroll_via_api(client, admin["token"])

    created = client.post(f"{API}/leave-requests/new", json=_leave_payload(), headers=auth_header(owner["token"]))
    leave_id = created.json()["data"]["id"]

    assert client.get(f"{API}/leave-requests/{leave_id}", headers=auth_header(other["token"])).status_code == 403

    mine = client.get(f"{API}/leave-requests", headers=auth_header(other["token"]))
    assert mine.status_code == 200
    assert mine.json()["data"] == []

    by_student = client.get(
        f"{API}/leave-requests",
        params={"student_user_id": owner["user_id"], "status": "pending"},
        headers=auth_header(admin["token"]),
    )
    assert by_student.json()["pagination"]["total"] == 1

    # 본인 pending 건은 삭제 가능
    deleted = client.delete(f"{API}/leave-requests/{leave_id}", headers=auth_header(owner["token"]))
    assert deleted.status_code == 200
    assert client.get(f"{API}/leave-requests/{leave_id}", headers=auth_header(admin["token"])).status_code == 404


def test_staff_cannot_create_leave_request(client, db_session):
    admin = setup_admin(client, db_session)

    res = client.post(f"{API}/leave-requests/new", json=_leave_payload(), headers=auth_header(admin["token"]))
    assert res.status_code == 403
