# tests/helpers.py
import random
import uuid

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.user import Role, User
from app.services import users as user_service

API = settings.API_V1_PREFIX


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


def unique_digits(n: int) -> str:
    return "".join(random.choice("0123456789") for _ in range(n))


def create_user_in_db(
    db: Session,
    *,
    email: str | None = None,
    password: str = "Passw0rd!",
    role: Role = Role.STAFF,
    full_name: str = "Test User",
) -> User:
    user = user_service.create_user(
        db,
        full_name=full_name,
        email=email or f"{role.value}_{uuid.uuid4().hex[:6]}@test.com",
        phone=unique_digits(10),
        password=password,
        role=role,
    )
    db.commit()
    db.refresh(user)
    return user


def create_admin_in_db(db: Session, *, email: str, password: str) -> User:
    return create_user_in_db(db, email=email, password=password, role=Role.ADMIN, full_name="ADMIN")


def login(client, email: str, password: str) -> str:
    res = client.post(f"{API}/login", json={"email": email, "password": password})
    assert res.status_code == 200, res.text
    return res.json()["data"]["access_token"]


def setup_admin(client, db: Session) -> dict:
    """ADMIN 계정 생성 + 토큰 발급"""
    email = f"admin_{uuid.uuid4().hex[:6]}@test.com"
    password = "AdminPassw0rd!"
    admin = create_admin_in_db(db, email=email, password=password)
    return {"user": admin, "email": email, "password": password, "token": login(client, email, password)}


def enroll_payload(**overrides) -> dict:
    payload = {
        "full_name": "테스트학생",
        "email": f"student_{uuid.uuid4().hex[:8]}@test.com",
        "phone": unique_digits(10),
        "password": "secret1",
        "sid": unique_digits(8),
        "permanent_address": "12 Main Road",
        "guardian_name": "Parent",
        "guardian_contact": unique_digits(10),
        "branch": "CSE",
        "block": "a",
        "room_number": "101",
    }
    payload.update(overrides)
    return payload


def enroll_via_api(client, admin_token: str, **overrides) -> dict:
    """입사 API 호출 → 학생 로그인까지 마친 정보 반환"""
    payload = enroll_payload(**overrides)
    res = client.post(f"{API}/students/create", json=payload, headers=auth_header(admin_token))
    assert res.status_code == 201, res.text
    data = res.json()["data"]
    return {
        "payload": payload,
        "user_id": data["user"]["id"],
        "student_id": data["student"]["id"],
        "token": login(client, payload["email"], payload["password"]),
    }
