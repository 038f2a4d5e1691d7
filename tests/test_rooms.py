"""
방(Room Inventory) 테스트.

- allocate / release 의 인원 카운터 규칙
- 정원 축소 제한, 방 정보 변경 시 거주 학생 비정규화 값 동기화
- 거주자가 있는 방 삭제 금지
- 방 관리 API 권한 / occupancy 직접 수정 금지

"""

import uuid

import pytest
from sqlalchemy import select

from app.core.exceptions import Conflict, NotFound, RoomFullError, ValidationError
from app.models.room import Room
from app.models.student import Student
from app.models.user import Role
from app.services import rooms as room_service
from app.services.enrollment import enroll
from tests.helpers import API, auth_header, create_user_in_db, enroll_payload, login, setup_admin


def _make_room(db, *, block="a", room_number="101", capacity=2) -> Room:
    room = room_service.create_room(db, room_number=room_number, block=block, floor=1, capacity=capacity)
    db.commit()
    return room


def test_allocate_existing_room_until_full(db_session):
    room = _make_room(db_session, capacity=2)

    room_service.allocate(db_session, block="A", room_number=" 101 ")
    room_service.allocate(db_session, block="a", room_number="101")
    db_session.commit()
    db_session.refresh(room)
    assert room.occupancy == 2

    with pytest.raises(RoomFullError):
        room_service.allocate(db_session, block="a", room_number="101")
    db_session.rollback()
    db_session.refresh(room)
    assert room.occupancy == 2


def test_allocate_creates_missing_room(db_session):
    room = room_service.allocate(db_session, block="d", room_number="7")
    db_session.commit()

    assert room.capacity == 2
    assert room.occupancy == 1
    assert room.is_active is True


def test_allocate_retries_when_room_is_created_concurrently(db_session, session_factory, monkeypatch):
    """빈 방 확인과 생성 사이에 다른 요청이 같은 방을 만들면 만들어진 방에 배정"""
    real_try_increment = room_service._try_increment
    real_find_room = room_service.find_room
    calls = {"increment": 0, "find": 0}

    def try_increment(db, *, block, room_number):
        calls["increment"] += 1
        if calls["increment"] == 1:
            return False
        return real_try_increment(db, block=block, room_number=room_number)

    def find_room(db, *, block, room_number):
        calls["find"] += 1
        if calls["find"] == 1:
            other = session_factory()
            try:
                other.add(Room(block=block, room_number=room_number, floor=1, capacity=2, occupancy=0))
                other.commit()
            finally:
                other.close()
            return None
        return real_find_room(db, block=block, room_number=room_number)

    monkeypatch.setattr(room_service, "_try_increment", try_increment)
    monkeypatch.setattr(room_service, "find_room", find_room)

    room = room_service.allocate(db_session, block="Q", room_number="9")
    db_session.commit()

    assert calls["increment"] == 2
    assert room.occupancy == 1
    assert room.capacity == 2
    db_session.expire_all()
    rooms = db_session.scalars(select(Room).where(Room.block == "q", Room.room_number == "9")).all()
    assert [r.id for r in rooms] == [room.id]
    assert rooms[0].occupancy == 1


def test_release_never_goes_below_zero(db_session):
    room = _make_room(db_session)

    released = room_service.release(db_session, room.id)
    db_session.commit()
    assert released.occupancy == 0


def test_release_unknown_room(db_session):
    with pytest.raises(NotFound):
        room_service.release(db_session, uuid.uuid4())


def test_capacity_cannot_drop_below_occupancy(db_session):
    room = _make_room(db_session, capacity=2)
    room_service.allocate(db_session, block="a", room_number="101")
    room_service.allocate(db_session, block="a", room_number="101")
    db_session.commit()

    with pytest.raises(ValidationError) as exc_info:
        room_service.update_room(db_session, room, {"capacity": 1})
    assert exc_info.value.field == "capacity"
    db_session.rollback()

    room_service.update_room(db_session, room, {"capacity": 3})
    db_session.commit()
    db_session.refresh(room)
    assert room.capacity == 3


def test_relocating_room_resyncs_students(db_session):
    admin = create_user_in_db(db_session, role=Role.ADMIN)
    room = _make_room(db_session)
    _, student = enroll(db_session, actor=admin, data=enroll_payload())
    student_id = student.id

    room_service.update_room(db_session, room, {"block": "B", "room_number": "305"})
    db_session.commit()
    db_session.expire_all()

    student = db_session.get(Student, student_id)
    assert (student.block, student.room_number) == ("b", "305")
    assert (room.block, room.room_number) == ("b", "305")


def test_relocation_clash_is_conflict(db_session):
    room = _make_room(db_session, room_number="101")
    _make_room(db_session, room_number="102")

    with pytest.raises(Conflict):
        room_service.update_room(db_session, room, {"room_number": "102"})


def test_delete_room_with_occupants_is_conflict(db_session):
    admin = create_user_in_db(db_session, role=Role.ADMIN)
    room = _make_room(db_session)
    enroll(db_session, actor=admin, data=enroll_payload())

    with pytest.raises(Conflict):
        room_service.delete_room(db_session, room)


def test_create_duplicate_room_is_conflict(db_session):
    _make_room(db_session, block="a", room_number="101")

    with pytest.raises(Conflict):
        room_service.create_room(db_session, room_number="101", block="A", floor=1)


# ---------- API ----------

def test_room_api_crud(client, db_session):
    admin = setup_admin(client, db_session)
    headers = auth_header(admin["token"])

    created = client.post(
        f"{API}/rooms",
        json={"room_number": "201", "block": "A", "floor": 2, "capacity": 3},
        headers=headers,
    )
    assert created.status_code == 201, created.text
    room = created.json()["data"]
    assert room["block"] == "a"
    assert room["occupancy"] == 0

    listed = client.get(f"{API}/rooms", params={"block": "a"}, headers=headers)
    assert listed.status_code == 200
    assert listed.json()["count"] == 1

    detail = client.get(f"{API}/rooms/{room['id']}", headers=headers)
    assert detail.status_code == 200
    assert detail.json()["data"]["occupants"] == []

    toggled = client.patch(f"{API}/rooms/{room['id']}/toggle", headers=headers)
    assert toggled.status_code == 200
    assert toggled.json()["data"]["is_active"] is False

    deleted = client.delete(f"{API}/rooms/{room['id']}", headers=headers)
    assert deleted.status_code == 200
    assert client.get(f"{API}/rooms/{room['id']}", headers=headers).status_code == 404


def test_room_occupancy_cannot_be_patched(client, db_session):
    admin = setup_admin(client, db_session)
    room = _make_room(db_session)

    res = client.patch(f"{API}/rooms/{room.id}", json={"occupancy": 5}, headers=auth_header(admin["token"]))
    assert res.status_code == 400
    assert res.json()["success"] is False

    db_session.expire_all()
    assert db_session.scalar(select(Room.occupancy).where(Room.id == room.id)) == 0


def test_room_create_requires_admin(client, db_session):
    staff = create_user_in_db(db_session, role=Role.STAFF, password="StaffPass1")
    token = login(client, staff.email, "StaffPass1")

    res = client.post(
        f"{API}/rooms",
        json={"room_number": "1", "block": "a", "floor": 0},
        headers=auth_header(token),
    )
    assert res.status_code == 403
