import json
from datetime import date

import pytest
from django.contrib.auth.models import User

from student_app.models import Student
from teacher_app.models import Group, Room, Session, Teacher

DAY = date(2026, 1, 10)


@pytest.fixture()
def teacher(db):
    user = User.objects.create_user(username="teacher01", password="Pass@123")
    return Teacher.objects.create(user=user, name="Amina", surname="Idrissi", specialty="Mathematics")


@pytest.fixture()
def other_teacher(db):
    user = User.objects.create_user(username="teacher02", password="Pass@123")
    return Teacher.objects.create(user=user, name="Karim", surname="Bennani")


@pytest.fixture()
def rooms(db):
    return [
        Room.objects.create(name="101", capacity=20),
        Room.objects.create(name="102", capacity=25),
        Room.objects.create(name="103", capacity=30),
    ]


@pytest.fixture()
def students(db):
    return [Student.objects.create(name=f"Student{i}", surname=f"S{i:02d}") for i in range(1, 5)]


@pytest.fixture()
def group(teacher, students):
    group = Group.objects.create(name="Maths-A", subject="Mathematics", teacher=teacher)
    group.students.add(*students[:3])
    return group


@pytest.fixture()
def session(group, rooms, teacher):
    return Session.objects.create(
        date=DAY, start_time="14:00", end_time="15:30", group=group, teacher=teacher, room=rooms[0]
    )


@pytest.fixture()
def teacher_client(client, teacher):
    client.force_login(teacher.user)
    return client


@pytest.fixture()
def admin_client_json(client, db):
    admin = User.objects.create_user(username="admin", password="Pass@123", is_staff=True)
    client.force_login(admin)
    return client


def post_json(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")
