"""
징계(Disciplinary Case) / 공지사항(Announcement) 테스트.
"""

from tests.helpers import API, auth_header, enroll_via_api, setup_admin


def test_disciplinary_case_flow(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])
    a_headers = auth_header(admin["token"])

    short = client.post(
        f"{API}/disciplinary-cases",
        json={"student_id": student["student_id"], "reason": "late", "fine_amount": 100},
        headers=a_headers,
    )
    assert short.status_code == 400
    assert short.json()["field"] == "reason"

    negative = client.post(
        f"{API}/disciplinary-cases",
        json={"student_id": student["student_id"], "reason": "Returned after curfew", "fine_amount": -1},
        headers=a_headers,
    )
    assert negative.status_code == 400

    ids = []
    for fine in (500, 250):
        res = client.post(
            f"{API}/disciplinary-cases",
            json={"student_id": student["student_id"], "reason": "Returned after curfew", "fine_amount": fine},
            headers=a_headers,
        )
        assert res.status_code == 201, res.text
        ids.append(res.json()["data"]["id"])

    closed = client.patch(f"{API}/disciplinary-cases/{ids[1]}", json={"status": "closed"}, headers=a_headers)
    assert closed.status_code == 200
    assert closed.json()["data"]["status"] == "closed"

    mine = client.get(f"{API}/disciplinary-cases", headers=auth_header(student["token"]))
    assert mine.status_code == 200
    assert mine.json()["pagination"]["total"] == 2
    assert mine.json()["total_open_fines"] == 500

    # 학생은 징계를 만들 수 없음
    denied = client.post(
        f"{API}/disciplinary-cases",
        json={"student_id": student["student_id"], "reason": "Self reported issue", "fine_amount": 0},
        headers=auth_header(student["token"]),
    )
    assert denied.status_code == 403

    assert client.delete(f"{API}/disciplinary-cases/{ids[0]}", headers=a_headers).status_code == 200
    assert client.get(f"{API}/disciplinary-cases/{ids[0]}", headers=a_headers).status_code == 404


def test_announcements(client, db_session):
    admin = setup_admin(client, db_session)
    student = enroll_via_api(client, admin["token"])
    a_headers = auth_header(admin["token"])
    s_headers = auth_header(student["token"])

    created = client.post(
        f"{API}/announcements",
        json={"title": "Water supply", "message": "Water supply will be off on Sunday morning.", "category": "Maintenance"},
        headers=a_headers,
    )
    assert created.status_code == 201, created.text
    item = created.json()["data"]
    assert item["category"] == "maintenance"

    client.post(
        f"{API}/announcements",
        json={"title": "Fest", "message": "Annual hostel fest starts next week."},
        headers=a_headers,
    )

    assert client.post(
        f"{API}/announcements", json={"title": "Hi", "message": "Too short title here"}, headers=a_headers
    ).status_code == 400
    assert client.post(
        f"{API}/announcements", json={"title": "Student post", "message": "Students cannot post."}, headers=s_headers
    ).status_code == 403

    listed = client.get(f"{API}/announcements", params={"category": "maintenance"}, headers=s_headers)
    assert listed.status_code == 200
    assert [a["title"] for a in listed.json()["data"]] == ["Water supply"]

    searched = client.get(f"{API}/announcements", params={"search": "fest"}, headers=s_headers)
    assert searched.json()["pagination"]["total"] == 1

    updated = client.patch(f"{API}/announcements/{item['id']}", json={"title": "Water supply update"}, headers=a_headers)
    assert updated.status_code == 200
    assert updated.json()["data"]["title"] == "Water supply update"

    assert client.delete(f"{API}/announcements/{item['id']}", headers=a_headers).status_code == 200
    assert client.get(f"{API}/announcements/{item['id']}", headers=s_headers).status_code == 404
