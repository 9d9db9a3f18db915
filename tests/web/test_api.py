from __future__ import annotations

import io

from PIL import Image


def test_index(client):
    assert client.get("/").get_json() == {"message": "Welcome to the Attendance App API"}


def test_login_returns_token_and_user(client):
    resp = client.post("/api/login", json={"username": "teacher", "password": "teacher123", "userType": "teacher"})

    body = resp.get_json()
    assert resp.status_code == 200
    assert body["token"]
    assert body["user"] == {"id": 1, "firstName": "Maria", "lastName": "Santos", "userType": "teacher"}


def test_login_errors(client):
    bad_password = client.post("/api/login", json={"username": "teacher", "password": "nope", "userType": "teacher"})
    bad_type = client.post("/api/login", json={"username": "teacher", "password": "teacher123", "userType": "admin"})
    not_json = client.post("/api/login", data="username=teacher")
    numeric = client.post("/api/login", json={"username": 123, "password": 456, "userType": "teacher"})

    assert bad_password.status_code == 401
    assert bad_password.get_json()["kind"] == "authentication_failed"
    assert bad_type.status_code == 400
    assert not_json.status_code == 400
    assert not_json.get_json()["success"] is False
    assert numeric.status_code == 400
    assert numeric.get_json()["kind"] == "invalid_input"


def test_register_then_login(client, login):
    resp = client.post(
        "/api/register",
        json={
            "userType": "student",
            "firstName": "Pedro",
            "lastName": "Penduko",
            "username": "pedro",
            "password": "secret1",
            "studentId": "2024-0003",
            "course": "BSCS",
        },
    )
    assert resp.status_code == 201

    headers = login("pedro", "secret1", "student")
    profile = client.get("/api/student/profile", headers=headers).get_json()
    assert profile["studentId"] == "2024-0003"

    again = client.post(
        "/api/register",
        json={"userType": "student", "firstName": "P", "lastName": "P", "username": "pedro", "password": "secret1"},
    )
    assert again.status_code == 409


def test_token_is_required(client):
    missing = client.get("/api/teacher/classes")
    garbage = client.get("/api/teacher/classes", headers={"Authorization": "Bearer not.a.token"})

    assert missing.status_code == 401
    assert missing.get_json()["message"] == "Access denied. No token provided."
    assert garbage.status_code == 403


def test_routes_check_user_type(client, student_headers, teacher_headers):
    assert client.get("/api/teacher/classes", headers=student_headers).status_code == 403
    assert client.get("/api/student/classes", headers=teacher_headers).status_code == 403


def test_bulk_class_attendance(client, teacher_headers, repos):
    payload = {
        "date": "2024-03-02",
        "attendanceRecords": [{"studentId": 1, "status": "present"}, {"studentId": 2, "status": "absent"}],
    }

    resp = client.post("/api/teacher/classes/10/attendance", json=payload, headers=teacher_headers)

    assert resp.status_code == 200
    assert resp.get_json() == {"message": "2 attendance records recorded", "count": 2}
    assert len(repos.attendance.class_rows) == 2


def test_bulk_class_attendance_errors(client, teacher_headers, repos):
    foreign = client.post(
        "/api/teacher/classes/20/attendance",
        json={"date": "2024-03-02", "attendanceRecords": [{"studentId": 1, "status": "present"}]},
        headers=teacher_headers,
    )
    empty = client.post(
        "/api/teacher/classes/10/attendance",
        json={"date": "2024-03-02", "attendanceRecords": []},
        headers=teacher_headers,
    )
    repos.attendance.fail_at_row = 0
    broken = client.post(
        "/api/teacher/classes/10/attendance",
        json={"date": "2024-03-02", "attendanceRecords": [{"studentId": 1, "status": "present"}]},
        headers=teacher_headers,
    )

    assert foreign.status_code == 403
    assert foreign.get_json()["kind"] == "not_found_or_forbidden"
    assert empty.status_code == 400
    assert empty.get_json()["kind"] == "invalid_input"
    assert broken.status_code == 500
    assert broken.get_json()["kind"] == "recording_failed"
    assert repos.attendance.class_rows == []


def test_subject_attendance_create_then_update(client, teacher_headers):
    url = "/api/teacher/subjects/100/attendance"

    created = client.post(url, json={"studentId": 1, "date": "2024-03-01", "status": "present"}, headers=teacher_headers)
    updated = client.post(
        url,
        json={"studentId": 1, "date": "2024-03-01", "status": "absent", "notes": "called in sick"},
        headers=teacher_headers,
    )
    excused = client.post(url, json={"studentId": 1, "date": "2024-03-01", "status": "excused"}, headers=teacher_headers)

    assert created.status_code == 201
    assert created.get_json()["outcome"] == "created"
    assert updated.status_code == 200
    assert updated.get_json()["outcome"] == "updated"
    assert updated.get_json()["id"] == created.get_json()["id"]
    assert excused.status_code == 400

    listed = client.get(f"{url}?date=2024-03-01", headers=teacher_headers).get_json()
    assert listed == [
        {
            "id": created.get_json()["id"],
            "studentId": 1,
            "subjectId": 100,
            "date": "2024-03-01",
            "status": "absent",
            "notes": "called in sick",
        }
    ]


def test_subject_attendance_other_teacher(client, login):
    headers = login("other", "teacher123", "teacher")

    resp = client.post(
        "/api/teacher/subjects/100/attendance",
        json={"studentId": 1, "date": "2024-03-01", "status": "present"},
        headers=headers,
    )

    assert resp.status_code == 403


def test_teacher_class_and_subject_management(client, teacher_headers):
    created = client.post(
        "/api/teacher/classes", json={"name": "Physics", "schedule": "TTh 8:00"}, headers=teacher_headers
    )
    assert created.status_code == 201

    names = [c["name"] for c in client.get("/api/teacher/classes", headers=teacher_headers).get_json()]
    assert names == ["Math 101", "Physics"]

    roster = client.get("/api/teacher/classes/10/students", headers=teacher_headers).get_json()
    assert [s["studentId"] for s in roster] == ["2024-0001", "2024-0002"]

    subject = client.post(
        "/api/teacher/subjects",
        json={"subjectCode": "CS50", "description": "CS", "schedule": "Sat"},
        headers=teacher_headers,
    )
    subject_id = subject.get_json()["subjectId"]

    key = client.post(f"/api/teacher/subjects/{subject_id}/generate-key", headers=teacher_headers).get_json()["keyCode"]
    assert len(key) == 6

    renamed = client.put(
        f"/api/teacher/subjects/{subject_id}", json={"description": "Computer Science"}, headers=teacher_headers
    )
    assert renamed.get_json()["subject"]["description"] == "Computer Science"

    assert client.delete(f"/api/teacher/subjects/{subject_id}", headers=teacher_headers).status_code == 200
    assert client.delete(f"/api/teacher/subjects/{subject_id}", headers=teacher_headers).status_code == 403


def test_student_enrollment_flow(client, login, teacher_headers):
    headers = login("student2", "student123", "student")

    found = client.post("/api/student/subjects/search", json={"key_code": "abc123"}, headers=headers)
    assert found.get_json()["subjectCode"] == "IT101"

    missing = client.post("/api/student/subjects/search", json={"key_code": "NOPE00"}, headers=headers)
    assert missing.status_code == 404

    assert client.get("/api/student/subjects/100/attendance", headers=headers).status_code == 404

    enrolled = client.post("/api/student/subjects/enroll", json={"subjectId": 100}, headers=headers)
    again = client.post("/api/student/subjects/enroll", json={"subjectId": 100}, headers=headers)
    assert enrolled.status_code == 201
    assert again.status_code == 409

    client.post(
        "/api/teacher/subjects/100/attendance",
        json={"studentId": 2, "date": "2024-03-01", "status": "late"},
        headers=teacher_headers,
    )
    history = client.get("/api/student/subjects/100/attendance", headers=headers).get_json()
    assert [(r["date"], r["status"]) for r in history] == [("2024-03-01", "late")]

    subjects = client.get("/api/student/subjects", headers=headers).get_json()
    assert [s["teacher"] for s in subjects] == ["Maria Santos"]


def test_student_class_attendance_history(client, student_headers, teacher_headers):
    client.post(
        "/api/teacher/classes/10/attendance",
        json={"date": "2024-03-02", "attendanceRecords": [{"studentId": 1, "status": "late", "notes": "traffic"}]},
        headers=teacher_headers,
    )

    all_rows = client.get("/api/student/attendance", headers=student_headers).get_json()
    by_class = client.get("/api/student/attendance/10", headers=student_headers).get_json()
    other = client.get("/api/student/attendance/20", headers=student_headers).get_json()

    assert [(r["className"], r["status"], r["notes"]) for r in all_rows] == [("Math 101", "late", "traffic")]
    assert by_class == all_rows
    assert other == []

    classes = client.get("/api/student/classes", headers=student_headers).get_json()
    assert classes == [{"id": 10, "name": "Math 101", "schedule": "MWF 9:00", "teacher": "Maria Santos"}]


def test_profile_picture_and_qr_payload(client, student_headers):
    assert client.get("/api/student/qr-payload", headers=student_headers).status_code == 404

    buf = io.BytesIO()
    Image.new("RGB", (4, 4)).save(buf, format="PNG")
    buf.seek(0)
    uploaded = client.post(
        "/api/student/profile/upload-picture",
        data={"profileImage": (buf, "me.png")},
        headers=student_headers,
        content_type="multipart/form-data",
    )
    assert uploaded.status_code == 200
    assert uploaded.get_json()["profileImage"].endswith("_me.png")

    payload = client.get("/api/student/qr-payload", headers=student_headers).get_json()
    assert payload["studentId"] == "2024-0001"

    assert client.delete("/api/student/profile/delete-picture", headers=student_headers).status_code == 200
    assert client.delete("/api/student/profile/delete-picture", headers=student_headers).status_code == 404


def test_profile_update(client, teacher_headers):
    ok = client.post(
        "/api/teacher/profile/update", json={"email": "maria@school.edu", "phone": "0917"}, headers=teacher_headers
    )
    bad = client.post("/api/teacher/profile/update", json={"email": "maria"}, headers=teacher_headers)

    assert ok.get_json()["profile"]["email"] == "maria@school.edu"
    assert bad.status_code == 400
