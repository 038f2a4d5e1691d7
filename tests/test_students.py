"""
학생 프로필(Student Registry) 테스트.

- 관리자 방 이동 시 block / room_number 재계산 + 인원 이동 + 변경 이력
- 학생 본인 수정 허용 범위
- 프로필 삭제 시 방 인원 반납
- 목록 검색 / 필터

"""

import uuid

from sqlalchemy import select

from app.models.room import Room
from app.models.student import Student, StudentHistory
from tests.helpers import API, auth_header, enroll_via_api, setup_admin


def _room(db, block, room_number) -> Room:
    db.expire_all()
    return db.scalar(select(Room).where(Room.block == block, Room.room_number == room_number))


def test_admin_moves_student_to_another_room(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"], block="a", room_number="101")

    res = client.patch(
        f"{API}/students/edit/{student['user_id']}",
        json={"block": "B", "room_number": "202", "branch": "ECE"},
        headers=auth_header(admin["token"]),
    )
    assert res.status_code == 200, res.text
    data = res.json()["data"]
    assert (data["block"], data["room_number"]) == ("b", "202")
    assert data["branch"] == "ECE"

    old_room = _room(db_session, "a", "101")
    new_room = _room(db_session, "b", "202")
    assert old_room.occupancy == 0
    assert new_room.occupancy == 1
    assert data["room_id"] == str(new_room.id)

    history = db_session.scalars(select(StudentHistory)).all()
    assert len(history) == 1
    assert history[0].old_data["block"] == "a"
    assert history[0].old_data["branch"] == "CSE"


def test_move_into_full_room_keeps_original_room(client, db_session):
    admin = setup_admin(client, db_session)
    enroll_via_api(client, admin["token"], block="c", room_number="1")
    enroll_via_api(client, admin["token"], block="c", room_number="1")
    mover = enroll_via_api(client, admin["token"], block="c", room_number="2")

    res = client.patch(
        f"{API}/students/edit/{mover['user_id']}",
        json={"room_number": "1"},
        headers=auth_header(admin["token"]),
    )
    assert res.status_code == 409
    assert res.json()["code"] == "ROOM_FULL"

    assert _room(db_session, "c", "1").occupancy == 2
    assert _room(db_session, "c", "2").occupancy == 1
    student = db_session.scalar(select(Student).where(Student.id == uuid.UUID(mover["student_id"])))
    assert student.room_number == "2"


def test_edit_without_changes_is_rejected(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])

    res = client.patch(
        f"{API}/students/edit/{student['user_id']}",
        json={"branch": student["payload"]["branch"]},
        headers=auth_header(admin["token"]),
    )
    assert res.status_code == 400
    assert res.json()["message"] == "No changes detected"


def test_student_updates_own_address(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])

    res = client.patch(
        f"{API}/students/{student['user_id']}",
        json={"permanent_address": "99 New Street"},
        headers=auth_header(student["token"]),
    )
    assert res.status_code == 200, res.text
    assert res.json()["data"]["permanent_address"] == "99 New Street"


def test_student_cannot_change_room_or_others(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])
    other = enroll_via_api(client, admin["token"])

    # 본인 수정 스키마에 없는 필드는 거부
    res = client.patch(
        f"{API}/students/{student['user_id']}",
        json={"room_number": "999"},
        headers=auth_header(student["token"]),
    )
    assert res.status_code == 400

    res = client.patch(
        f"{API}/students/{other['user_id']}",
        json={"permanent_address": "hijack"},
        headers=auth_header(student["token"]),
    )
    assert res.status_code == 403

    res = client.patch(
        f"{API}/students/edit/{other['user_id']}",
        json={"branch": "ME"},
        headers=auth_header(student["token"]),
    )
    assert res.status_code == 403


def test_profile_endpoints(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])

    mine = client.get(f"{API}/students/profile", headers=auth_header(student["token"]))
    assert mine.status_code == 200
    assert mine.json()["data"]["sid"] == student["payload"]["sid"]
    assert mine.json()["data"]["user"]["email"] == student["payload"]["email"]

    by_admin = client.get(f"{API}/students/profile/{student['user_id']}", headers=auth_header(admin["token"]))
    assert by_admin.status_code == 200

    forbidden = client.get(f"{API}/students/profile/{student['user_id']}", headers=auth_header(student["token"]))
    assert forbidden.status_code == 403


def test_list_students_search_and_filters(client, db_session):
    admin = setup_admin(client, db_session)
    first = enroll_via_api(client, admin["token"], block="a", branch="CSE")
    enroll_via_api(client, admin["token"], block="b", branch="Mechanical")

    res = client.get(f"{API}/students/getall", params={"block": "A"}, headers=auth_header(admin["token"]))
    assert res.status_code == 200
    body = res.json()
    assert body["pagination"]["total"] == 1
    assert body["data"][0]["block"] == "a"

    res = client.get(f"{API}/students/getall", params={"branch": "mech"}, headers=auth_header(admin["token"]))
    assert res.json()["pagination"]["total"] == 1

    res = client.get(
        f"{API}/students/getall",
        params={"search": first["payload"]["sid"]},
        headers=auth_header(admin["token"]),
    )
    assert [s["sid"] for s in res.json()["data"]] == [first["payload"]["sid"]]


def test_delete_student_releases_room(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"], block="d", room_number="4")
    assert _room(db_session, "d", "4").occupancy == 1

    res = client.delete(f"{API}/students/{student['user_id']}", headers=auth_header(admin["token"]))
    assert res.status_code == 200, res.text

    assert _room(db_session, "d", "4").occupancy == 0
    db_session.expire_all()
    assert db_session.scalar(select(Student).where(Student.sid == student["payload"]["sid"])) is None

    missing = client.delete(f"{API}/students/{student['user_id']}", headers=auth_header(admin["token"]))
    assert missing.status_code == 404


def test_admin_can_clear_leaving_date(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])
    url = f"{API}/students/edit/{student['user_id']}"

    res = client.patch(url, json={"leaving_date": "2030-05-31"}, headers=auth_header(admin["token"]))
    assert res.status_code == 200, res.text
    assert res.json()["data"]["leaving_date"] == "2030-05-31"

    # 필드를 보내지 않으면 변경 없음, null 을 보내면 해제
    res = client.patch(url, json={"branch": "ECE"}, headers=auth_header(admin["token"]))
    assert res.json()["data"]["leaving_date"] == "2030-05-31"

    res = client.patch(url, json={"leaving_date": None}, headers=auth_header(admin["token"]))
    assert res.status_code == 200, res.text
    assert res.json()["data"]["leaving_date"] is None

    db_session.expire_all()
    history = [h.old_data for h in db_session.scalars(select(StudentHistory)).all()]
    assert {"leaving_date": "2030-05-31"} in history

    res = client.patch(url, json={"leaving_date": None}, headers=auth_header(admin["token"]))
    assert res.status_code == 400
