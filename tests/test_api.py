from __future__ import annotations

from datetime import timedelta

from flask_jwt_extended import create_access_token

from school_attendance.core.enums import Role

from .fakes import add_user


def test_health_needs_no_token(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "OK"
    assert body["version"] == "1.0.0"


def test_missing_token_is_401(client):
    resp = client.get("/api/attendance")
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Access token required"}


def test_garbage_token_is_403(client):
    resp = client.get("/api/attendance", headers={"Authorization": "Bearer not.a.token"})
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Invalid token"}


def test_expired_token_is_403(app, client, school):
    with app.app_context():
        token = create_access_token(
            identity="t1",
            additional_claims={"role": "teacher", "name": "Teacher One"},
            expires_delta=timedelta(seconds=-10),
        )
    resp = client.get("/api/classes", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 403


def test_bad_login_is_401(client, school):
    resp = client.post("/api/login", json={"userId": "t1", "password": "nope", "role": "teacher"})
    assert resp.status_code == 401
    assert resp.get_json() == {"error": "Invalid credentials"}


def test_login_missing_fields_is_400(client):
    resp = client.post("/api/login", json={"userId": "t1"})
    assert resp.status_code == 400


def test_unknown_api_route(client):
    resp = client.get("/api/nothing-here")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "API endpoint not found"}


def test_full_marking_scenario(client, container, login):
    add_user(container, "admin", Role.ADMIN, name="Admin")
    admin = login("admin", "admin")

    resp = client.post(
        "/api/register",
        headers=admin,
        json={"userId": "T", "password": "secret1", "role": "teacher", "name": "Tess", "subject": "Math"},
    )
    assert resp.status_code == 201
    teacher = login("T", "teacher")

    resp = client.post("/api/classes", headers=teacher, json={"className": "C1", "subjects": ["Math"]})
    assert resp.status_code == 201
    assert resp.get_json()["class"]["teacher"] == "T"

    resp = client.post(
        "/api/register",
        headers=admin,
        json={"userId": "S", "password": "secret1", "role": "student", "name": "Sam", "class": "C1"},
    )
    assert resp.status_code == 201

    payload = {"class": "C1", "date": "2024-05-10", "subject": "Math", "students": [{"studentId": "S", "status": "present"}]}
    assert client.post("/api/attendance/mark", headers=teacher, json=payload).status_code == 200

    rows = client.get("/api/attendance?class=C1", headers=teacher).get_json()
    assert len(rows) == 1
    assert rows[0]["status"] == "present"
    assert rows[0]["studentName"] == "Sam"

    payload["students"][0]["status"] = "late"
    assert client.post("/api/attendance/mark", headers=teacher, json=payload).status_code == 200

    rows = client.get("/api/attendance?class=C1", headers=teacher).get_json()
    assert [r["status"] for r in rows] == ["late"]


def test_student_filter_override(client, school, login):
    teacher = login("t1", "teacher")
    client.post(
        "/api/attendance/mark",
        headers=teacher,
        json={
            "class": "C1",
            "date": "2024-05-10",
            "students": [{"studentId": "s1", "status": "present"}, {"studentId": "s2", "status": "absent"}],
        },
    )

    student = login("s1", "student")
    rows = client.get("/api/attendance?studentId=s2", headers=student).get_json()
    assert [r["studentId"] for r in rows] == ["s1"]


def test_teacher_foreign_class_is_403_everywhere(client, school, login):
    teacher = login("t1", "teacher")
    for url in [
        "/api/attendance?class=C2",
        "/api/students?classFilter=C2",
        "/api/students/C2",
        "/api/classes/C2/stats",
        "/api/reports/attendance?className=C2",
        "/api/attendance/export?className=C2",
        "/api/notices?targetClass=C2",
    ]:
        resp = client.get(url, headers=teacher)
        assert resp.status_code == 403, url
        assert "error" in resp.get_json()

    resp = client.post(
        "/api/attendance/mark",
        headers=teacher,
        json={"class": "C2", "date": "2024-05-10", "students": [{"studentId": "s3", "status": "present"}]},
    )
    assert resp.status_code == 403


def test_soft_deleted_student_listing(client, school, login):
    teacher = login("t1", "teacher")
    client.post(
        "/api/attendance/mark",
        headers=teacher,
        json={"class": "C1", "date": "2024-05-10", "students": [{"studentId": "s1", "status": "present"}]},
    )
    admin = login("admin", "admin")

    assert client.delete("/api/students/s1", headers=admin).status_code == 200
    listed = [s["userId"] for s in client.get("/api/students", headers=admin).get_json()]
    assert "s1" not in listed
    history = client.get("/api/attendance", headers=admin).get_json()
    assert [r["studentId"] for r in history] == ["s1"]


def test_bulk_mark_reports_processed_count(client, school, login):
    teacher = login("t1", "teacher")
    resp = client.post(
        "/api/attendance/bulk-mark",
        headers=teacher,
        json={
            "attendanceData": [
                {"studentId": "s1", "class": "C1", "date": "2024-05-10", "status": "present"},
                {"studentId": "s3", "class": "C2", "date": "2024-05-10", "status": "present"},
            ]
        },
    )
    assert resp.status_code == 200
    assert resp.get_json()["records"] == 1

    resp = client.post("/api/attendance/bulk-mark", headers=teacher, json={"attendanceData": []})
    assert resp.status_code == 400


def test_csv_export(client, school, login):
    teacher = login("t1", "teacher")
    for day in ("2024-05-09", "2024-05-10"):
        client.post(
            "/api/attendance/mark",
            headers=teacher,
            json={
                "class": "C1",
                "date": day,
                "subject": "Math",
                "students": [{"studentId": "s2", "status": "present"}, {"studentId": "s1", "status": "late"}],
            },
        )

    resp = client.get("/api/attendance/export?format=csv&startDate=2024-05-01&endDate=2024-05-31", headers=teacher)
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    assert "attendance_export.csv" in resp.headers["Content-Disposition"]
    assert resp.get_data(as_text=True).splitlines() == [
        "Date,Student ID,Student Name,Class,Status,Subject,Marked By",
        "2024-05-10,s1,Alice,C1,late,Math,t1",
        "2024-05-10,s2,Bob,C1,present,Math,t1",
        "2024-05-09,s1,Alice,C1,late,Math,t1",
        "2024-05-09,s2,Bob,C1,present,Math,t1",
    ]

    json_rows = client.get("/api/attendance/export", headers=teacher).get_json()
    assert len(json_rows) == 4


def test_student_cannot_export(client, school, login):
    student = login("s1", "student")
    assert client.get("/api/attendance/export?format=csv", headers=student).status_code == 403


def test_teacher_cannot_register_teacher(client, school, login):
    teacher = login("t1", "teacher")
    resp = client.post(
        "/api/register",
        headers=teacher,
        json={"userId": "t9", "password": "secret1", "role": "teacher", "name": "X"},
    )
    assert resp.status_code == 403
    assert resp.get_json() == {"error": "Teachers can only create student accounts"}


def test_notice_lifecycle(client, school, login):
    teacher = login("t1", "teacher")
    resp = client.post(
        "/api/notices",
        headers=teacher,
        json={"title": "Homework", "content": "Page 12", "type": "homework", "targetClass": "C1"},
    )
    assert resp.status_code == 201
    notice_id = resp.get_json()["notice"]["id"]

    student = login("s1", "student")
    assert [n["title"] for n in client.get("/api/notices", headers=student).get_json()] == ["Homework"]

    other = login("t2", "teacher")
    assert client.put(f"/api/notices/{notice_id}", headers=other, json={"title": "x"}).status_code == 403

    resp = client.put(f"/api/notices/{notice_id}", headers=teacher, json={"priority": "high"})
    assert resp.get_json()["notice"]["priority"] == "high"

    assert client.delete(f"/api/notices/{notice_id}", headers=teacher).status_code == 200
    assert client.get("/api/notices", headers=student).get_json() == []


def test_class_delete_by_non_owner(client, school, login):
    c2 = school.classes_repo.get_by_name("C2")
    teacher = login("t1", "teacher")
    assert client.delete(f"/api/classes/{c2.class_id}", headers=teacher).status_code == 403
    assert client.delete("/api/classes/999", headers=teacher).status_code == 404


def test_teacher_attendance_endpoints(client, school, login):
    teacher = login("t1", "teacher")
    resp = client.post("/api/teacher-attendance/mark", headers=teacher, json={"date": "2024-05-10", "status": "present"})
    assert resp.status_code == 200
    client.post("/api/teacher-attendance/mark", headers=teacher, json={"date": "2024-05-10", "status": "late"})

    rows = client.get("/api/teacher-attendance", headers=teacher).get_json()
    assert [r["status"] for r in rows] == ["late"]
    assert client.get("/api/teacher-attendance?teacherId=t2", headers=teacher).status_code == 403


def test_dashboard_and_profile(client, school, login):
    student = login("s1", "student")
    dash = client.get("/api/dashboard", headers=student).get_json()
    assert dash["role"] == "student"
    assert dash["stats"]["attendancePercentage"] == 0.0

    profile = client.get("/api/profile", headers=student).get_json()
    assert profile["class"] == "C1"

    resp = client.put("/api/profile", headers=student, json={"newPassword": "another1"})
    assert resp.status_code == 400
    resp = client.put("/api/profile", headers=student, json={"currentPassword": "bad", "newPassword": "another1"})
    assert resp.status_code == 401


def test_admin_statistics_gate(client, school, login):
    assert client.get("/api/admin/statistics", headers=login("t1", "teacher")).status_code == 403
    body = client.get("/api/admin/statistics", headers=login("admin", "admin")).get_json()
    assert body["totals"] == {"students": 3, "teachers": 2, "classes": 2}
    assert len(body["trends"]["last7Days"]) == 7


def test_non_object_json_body_is_400(client, school, login):
    resp = client.post("/api/login", json=[{"userId": "t1"}])
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid request body"}

    teacher = login("t1", "teacher")
    for url in ["/api/attendance/mark", "/api/attendance/bulk-mark", "/api/classes", "/api/notices"]:
        resp = client.post(url, headers=teacher, json=["C1"])
        assert resp.status_code == 400, url
        assert resp.get_json() == {"error": "Invalid request body"}
    assert client.put("/api/profile", headers=teacher, json="x").status_code == 400


def test_mark_with_string_student_entries_is_400(client, school, login):
    teacher = login("t1", "teacher")
    resp = client.post(
        "/api/attendance/mark",
        headers=teacher,
        json={"class": "C1", "date": "2024-05-10", "students": ["s1"]},
    )
    assert resp.status_code == 400
    assert resp.get_json() == {"error": "Invalid student entry"}
