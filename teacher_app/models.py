"""
Teacher app models
Defines Teacher plus the scheduling and attendance domain models
"""
from django.contrib.auth.models import User
from django.db import models


class Teacher(models.Model):
    """
    Teacher model - extends Django User with teaching information
    One-to-one relationship with Django's built-in User model
    """
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name="teacher")
    name = models.CharField(max_length=100)
    surname = models.CharField(max_length=100, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    specialty = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("surname", "name")

    def __str__(self):
        return f"{self.name} {self.surname}".strip()


class Room(models.Model):
    """A bookable classroom."""
    name = models.CharField(max_length=50, unique=True)
    capacity = models.PositiveIntegerField(default=20)

    class Meta:
        ordering = ("id",)

    def __str__(self):
        return self.name


class Group(models.Model):
    """
    A cohort of students following one subject with one teacher.
    Membership decides who may be marked present in the group's sessions.
    """
    name = models.CharField(max_length=100)
    subject = models.CharField(max_length=120, blank=True)
    teacher = models.ForeignKey(Teacher, on_delete=models.CASCADE, related_name="groups")
    students = models.ManyToManyField("student_app.Student", related_name="groups", blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("name",)

    def __str__(self):
        return self.name


class Session(models.Model):
    """
    One scheduled class meeting in a room.
    Times are stored zero-padded ("09:30"); sessions of the same room and
    date never overlap on [start_time, end_time).
    """
    date = models.DateField()
    start_time = models.CharField(max_length=5)
    end_time = models.CharField(max_length=5)
    group = models.ForeignKey(Group, on_delete=models.CASCADE, related_name="sessions")
    teacher = models.ForeignKey(Teacher, on_delete=models.CASCADE, related_name="sessions")
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name="sessions")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("date", "start_time")
        indexes = [
            models.Index(fields=["room", "date"], name="session_room_date_idx"),
        ]

    def __str__(self):
        return f"{self.group} @ {self.room} {self.date:%Y-%m-%d} {self.start_time}-{self.end_time}"


class Attendance(models.Model):
    """Presence of one student at one session."""
    STATUS_PRESENT = "present"
    STATUS_ABSENT = "absent"
    STATUS_CHOICES = (
        (STATUS_PRESENT, "Present"),
        (STATUS_ABSENT, "Absent"),
    )

    session = models.ForeignKey(Session, on_delete=models.CASCADE, related_name="attendances")
    student = models.ForeignKey("student_app.Student", on_delete=models.CASCADE, related_name="attendances")
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PRESENT)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        constraints = [
            models.UniqueConstraint(fields=["session", "student"], name="uniq_session_student_attendance")
        ]

    def __str__(self):
        return f"{self.student_id} - {self.session_id} - {self.status}"
