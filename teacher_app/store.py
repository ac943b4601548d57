"""
ORM-backed store used by the scheduling and attendance operations.
Views build a DjangoStore; tests may pass any object with the same methods.
"""
import functools
import logging
from contextlib import contextmanager

from django.db import DatabaseError, IntegrityError, transaction

from student_app.models import Student

from .exceptions import DuplicateRecord, StoreError
from .locks import booking_locks
from .models import Attendance, Group, Room, Session

logger = logging.getLogger(__name__)


def _db_errors(method):
    """Translate Django database failures into StoreError."""
    @functools.wraps(method)
    def wrapper(*args, **kwargs):
        try:
            return method(*args, **kwargs)
        except (StoreError, DuplicateRecord):
            raise
        except DatabaseError as exc:
            logger.error(f"Store failure in {method.__name__}: {exc}")
            raise StoreError(f"Database error: {exc}") from exc
    return wrapper


class DjangoStore:

    # ---------------- reads ----------------

    @_db_errors
    def find_room(self, room_id):
        return Room.objects.filter(pk=room_id).first()

    @_db_errors
    def list_rooms(self):
        return list(Room.objects.order_by("id"))

    @_db_errors
    def find_group(self, group_id):
        return Group.objects.filter(pk=group_id).first()

    @_db_errors
    def find_student(self, student_id):
        return Student.objects.filter(pk=student_id).first()

    @_db_errors
    def existing_student_ids(self, student_ids):
        return set(Student.objects.filter(pk__in=student_ids).values_list("id", flat=True))

    @_db_errors
    def find_session(self, session_id):
        return Session.objects.select_related("group", "room").filter(pk=session_id).first()

    @_db_errors
    def find_sessions_by_room_and_date(self, room_id, day):
        return list(Session.objects.filter(room_id=room_id, date=day))

    @_db_errors
    def find_sessions_by_date(self, day):
        return list(Session.objects.filter(date=day))

    @_db_errors
    def find_group_membership(self, group_id):
        """Ids of the students enrolled in a group"""
        return set(Group.students.through.objects.filter(group_id=group_id).values_list("student_id", flat=True))

    @_db_errors
    def find_attendance(self, student_id, session_id):
        return Attendance.objects.filter(student_id=student_id, session_id=session_id).first()

    @_db_errors
    def attended_student_ids(self, session_id, student_ids):
        return set(
            Attendance.objects.filter(session_id=session_id, student_id__in=student_ids)
            .values_list("student_id", flat=True)
        )

    # ---------------- writes ----------------

    @contextmanager
    def booking_lock(self, room_id, day):
        """
        Hold the (room, date) booking lock for the duration of a check-then-insert.
        The in-process lock covers threads; the Room row lock covers other
        processes on databases that support SELECT ... FOR UPDATE.
        """
        with booking_locks.hold((room_id, day)):
            try:
                with transaction.atomic():
                    list(Room.objects.select_for_update().filter(pk=room_id))
                    yield
            except DatabaseError as exc:
                logger.error(f"Booking transaction failed for room {room_id} on {day}: {exc}")
                raise StoreError(f"Database error: {exc}") from exc

    @_db_errors
    def insert_session(self, *, day, start_time, end_time, group_id, teacher_id, room_id):
        session = Session.objects.create(
            date=day,
            start_time=start_time,
            end_time=end_time,
            group_id=group_id,
            teacher_id=teacher_id,
            room_id=room_id,
        )
        return Session.objects.select_related("group", "room").get(pk=session.pk)

    @_db_errors
    def insert_attendance(self, student_id, session_id, status):
        try:
            with transaction.atomic():
                attendance = Attendance.objects.create(student_id=student_id, session_id=session_id, status=status)
        except IntegrityError as exc:
            raise DuplicateRecord(f"Attendance exists for student {student_id} in session {session_id}") from exc
        return attendance

    @_db_errors
    def update_attendance_status(self, attendance, status):
        attendance.status = status
        attendance.save(update_fields=["status", "updated_at"])
        return attendance

    @_db_errors
    def insert_attendance_skipping_existing(self, session_id, rows):
        """
        Insert (student_id, status) rows for a session, leaving existing pairs untouched.
        Returns the number of rows actually written.
        """
        written = 0
        with transaction.atomic():
            student_ids = [student_id for student_id, _ in rows]
            already = self.attended_student_ids(session_id, student_ids)
            for student_id, status in rows:
                if student_id in already:
                    continue
                # A row inserted by another request after the read above is skipped too.
                try:
                    with transaction.atomic():
                        Attendance.objects.create(session_id=session_id, student_id=student_id, status=status)
                except IntegrityError:
                    continue
                written += 1
        return written

    @_db_errors
    def load_attendance(self, attendance_id):
        return (
            Attendance.objects.select_related("student", "session__group", "session__room")
            .get(pk=attendance_id)
        )
