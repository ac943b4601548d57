from datetime import timedelta

from django.contrib.auth.hashers import make_password
from django.contrib.auth.models import User
from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone

from student_app.models import Student
from teacher_app.exceptions import ConflictError
from teacher_app.models import Group, Room, Session, Teacher
from teacher_app.scheduling import create_session


class Command(BaseCommand):
    help = "Seed demo data: teachers, rooms, groups, students and a week of sessions."

    def add_arguments(self, parser):
        parser.add_argument("--teachers", type=int, default=4)
        parser.add_argument("--rooms", type=int, default=5)
        parser.add_argument("--groups-per-teacher", type=int, default=2)
        parser.add_argument("--students-per-group", type=int, default=12)
        parser.add_argument("--days", type=int, default=5)
        parser.add_argument("--password", type=str, default="Pass@123")

    @transaction.atomic
    def handle(self, *args, **options):
        password_hash = make_password(options["password"])
        subjects_pool = [
            "Mathematics",
            "Physics",
            "French",
            "English",
            "Computer Science",
            "Arabic",
        ]

        self.stdout.write("Seeding rooms...")
        rooms = []
        for i in range(1, options["rooms"] + 1):
            room, _ = Room.objects.update_or_create(
                name=f"{100 + i}",
                defaults={"capacity": 15 + 5 * (i % 3)},
            )
            rooms.append(room)

        self.stdout.write("Seeding teachers...")
        teachers = []
        for i in range(1, options["teachers"] + 1):
            username = f"teacher{i:02d}"
            user, _ = User.objects.update_or_create(
                username=username,
                defaults={"email": f"{username}@eduzone.local", "password": password_hash},
            )
            teacher, _ = Teacher.objects.update_or_create(
                user=user,
                defaults={
                    "name": "Teacher",
                    "surname": f"{i:02d}",
                    "specialty": subjects_pool[(i - 1) % len(subjects_pool)],
                },
            )
            teachers.append(teacher)

        self.stdout.write("Seeding groups and students...")
        groups = []
        created_students = 0
        for t_index, teacher in enumerate(teachers, start=1):
            for g_index in range(1, options["groups_per_teacher"] + 1):
                group, _ = Group.objects.update_or_create(
                    name=f"G{t_index:02d}-{g_index}",
                    teacher=teacher,
                    defaults={"subject": teacher.specialty},
                )
                for s_index in range(1, options["students_per_group"] + 1):
                    username = f"student{t_index:02d}{g_index}{s_index:02d}"
                    user, _ = User.objects.update_or_create(
                        username=username,
                        defaults={"email": f"{username}@eduzone.local", "password": password_hash},
                    )
                    student, created = Student.objects.update_or_create(
                        user=user,
                        defaults={
                            "name": f"Student {s_index:02d}",
                            "surname": group.name,
                            "email": user.email,
                        },
                    )
                    group.students.add(student)
                    created_students += int(created)
                groups.append(group)

        self.stdout.write("Booking sessions...")
        booked = 0
        skipped = 0
        today = timezone.localdate()
        for day_offset in range(options["days"]):
            day = today + timedelta(days=day_offset)
            for index, group in enumerate(groups):
                room = rooms[index % len(rooms)]
                start_hour = 8 + (index // len(rooms)) * 2
                if start_hour > 20:
                    skipped += 1
                    continue
                if Session.objects.filter(group=group, date=day).exists():
                    skipped += 1
                    continue
                try:
                    create_session(
                        group_id=group.id,
                        room_id=room.id,
                        teacher_id=group.teacher_id,
                        day=day,
                        start_time=f"{start_hour:02d}:00",
                        end_time=f"{start_hour + 1:02d}:30",
                    )
                    booked += 1
                except ConflictError:
                    skipped += 1

        self.stdout.write(self.style.SUCCESS("Demo dataset ready."))
        self.stdout.write(
            self.style.SUCCESS(
                f"Teachers: {len(teachers)}, Rooms: {len(rooms)}, Groups: {len(groups)}, "
                f"Students created: {created_students}, Sessions booked: {booked}, skipped: {skipped}"
            )
        )
