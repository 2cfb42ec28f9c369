from __future__ import annotations

from datetime import date

import pytest

from school_attendance.core.enums import Role
from school_attendance.core.principal import Principal
from school_attendance.main import create_app

from .fakes import add_user, build_fake_container


@pytest.fixture
def container():
    return build_fake_container()


@pytest.fixture
def school(container):
    """Admin, two teachers with one class each and three students."""

    add_user(container, "admin", Role.ADMIN, name="Admin")
    add_user(container, "t1", Role.TEACHER, name="Teacher One", subject="Math")
    add_user(container, "t2", Role.TEACHER, name="Teacher Two", subject="Science")
    container.classes_repo.create_class(class_name="C1", teacher_id="t1", subjects=["Math", "English"])
    container.classes_repo.create_class(class_name="C2", teacher_id="t2", subjects=["Science"])
    add_user(container, "s1", Role.STUDENT, name="Alice", class_name="C1")
    add_user(container, "s2", Role.STUDENT, name="Bob", class_name="C1")
    add_user(container, "s3", Role.STUDENT, name="Carol", class_name="C2")
    return container


@pytest.fixture
def admin():
    return Principal(user_id="admin", role=Role.ADMIN, name="Admin")


@pytest.fixture
def teacher1():
    return Principal(user_id="t1", role=Role.TEACHER, name="Teacher One")


@pytest.fixture
def teacher2():
    return Principal(user_id="t2", role=Role.TEACHER, name="Teacher Two")


@pytest.fixture
def student1():
    return Principal(user_id="s1", role=Role.STUDENT, name="Alice", class_name="C1")


@pytest.fixture
def fixed_today():
    return date(2024, 5, 10)


@pytest.fixture
def app(container):
    return create_app(container=container, settings_module="config.testing")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(user_id: str, role: str, password: str = "secret1") -> dict:
        resp = client.post("/api/login", json={"userId": user_id, "password": password, "role": role})
        assert resp.status_code == 200, resp.get_json()
        return {"Authorization": f"Bearer {resp.get_json()['token']}"}

    return _login
