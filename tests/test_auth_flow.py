"""
인증 기본 플로우 통합 테스트.
- 로그인 → 보호 API 접근, 잘못된 비밀번호, 로그아웃 후 토큰 무효화,
  비활성 계정 차단, 학생 프로필 없는 학생 계정 차단,
  직원의 사용자 추가 권한(관리자 계정 생성 불가)까지 검증한다.
"""

import uuid

from app.models.user import Role
from tests.helpers import API, auth_header, create_user_in_db, enroll_via_api, login, setup_admin


def test_login_and_me(client, db_session):
    admin = setup_admin(client, db_session)

    me = client.get(f"{API}/users/me", headers=auth_header(admin["token"]))
    assert me.status_code == 200, me.text
    data = me.json()["data"]
    assert data["email"] == admin["email"]
    assert data["role"] == "admin"
    assert "password_hash" not in data


def test_login_wrong_password(client, db_session):
    admin = setup_admin(client, db_session)

    res = client.post(f"{API}/login", json={"email": admin["email"], "password": "wrong-password"})
    assert res.status_code == 401
    assert res.json()["message"] == "Invalid email or password"


def test_login_missing_fields(client):
    res = client.post(f"{API}/login", json={"email": "", "password": ""})
    assert res.status_code == 400


def test_logout_revokes_token(client, db_session):
    admin = setup_admin(client, db_session)

    out = client.post(f"{API}/logout", headers=auth_header(admin["token"]))
    assert out.status_code == 200

    res = client.get(f"{API}/users/me", headers=auth_header(admin["token"]))
    assert res.status_code == 401

    # 다시 로그인하면 새 토큰은 정상
    token = login(client, admin["email"], admin["password"])
    assert client.get(f"{API}/users/me", headers=auth_header(token)).status_code == 200


def test_invalid_token_is_rejected(client):
    res = client.get(f"{API}/users/me", headers=auth_header("not-a-jwt"))
    assert res.status_code == 401
    assert res.json()["message"] == "Token expired or invalid"


def test_deactivated_user_is_blocked(client, db_session):
    admin = setup_admin(client, db_session)
    staff = create_user_in_db(db_session, role=Role.STAFF, password="StaffPass1")
    staff_token = login(client, staff.email, "StaffPass1")

    res = client.patch(
        f"{API}/users/{staff.id}/status",
        json={"status": "inactive"},
        headers=auth_header(admin["token"]),
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["status"] == "inactive"

    # 기존 토큰은 무효화
    assert client.get(f"{API}/users/me", headers=auth_header(staff_token)).status_code == 401

    # 로그인도 차단
    relogin = client.post(f"{API}/login", json={"email": staff.email, "password": "StaffPass1"})
    assert relogin.status_code == 403

    # 자기 자신은 비활성화 불가
    own = client.patch(
        f"{API}/users/{admin['user'].id}/status",
        json={"status": "inactive"},
        headers=auth_header(admin["token"]),
    )
    assert own.status_code == 400


def test_student_without_profile_is_forbidden(client, db_session):
    user = create_user_in_db(db_session, role=Role.STUDENT, password="StudentPass1")
    token = login(client, user.email, "StudentPass1")

    res = client.get(f"{API}/users/me", headers=auth_header(token))
    assert res.status_code == 403
    assert res.json()["message"] == "Student profile not created yet. Contact admin."


def test_enrolled_student_me_includes_profile(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])

    res = client.get(f"{API}/users/me", headers=auth_header(student["token"]))
    assert res.status_code == 200
    assert res.json()["data"]["student"]["sid"] == student["payload"]["sid"]


def test_staff_adds_user_but_not_admin(client, db_session):
    staff = create_user_in_db(db_session, role=Role.STAFF, password="StaffPass1")
    token = login(client, staff.email, "StaffPass1")

    payload = {
        "full_name": "New Staff",
        "email": f"new_{uuid.uuid4().hex[:6]}@test.com",
        "phone": "9876543210",
        "password": "secret1",
        "role": "staff",
    }
    ok = client.post(f"{API}/users/register", json=payload, headers=auth_header(token))
    assert ok.status_code == 201, ok.text
    assert ok.json()["data"]["role"] == "staff"

    dup = client.post(f"{API}/users/register", json=payload, headers=auth_header(token))
    assert dup.status_code == 409
    assert dup.json()["field"] == "email"

    as_admin = client.post(
        f"{API}/users/register",
        json={**payload, "email": f"adm_{uuid.uuid4().hex[:6]}@test.com", "phone": "9876543211", "role": "admin"},
        headers=auth_header(token),
    )
    assert as_admin.status_code == 400


def test_list_users_admin_only(client, db_session):
    admin = setup_admin(client, db_session)
    create_user_in_db(db_session, role=Role.STAFF)

    res = client.get(f"{API}/users", params={"role": "staff"}, headers=auth_header(admin["token"]))
    assert res.status_code == 200
    assert len(res.json()["data"]) == 1
    assert res.json()["data"][0]["role"] == "staff"
