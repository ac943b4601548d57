"""
Attendance recording.

Two write paths with different duplicate handling:
- QR scans always end with one "present" row per (student, session);
  a re-scan overwrites the existing row.
- Bulk roster marking inserts missing rows only; existing rows win.
"""
import logging
import re

from student_app.models import QR_TOKEN_PREFIX

from .exceptions import (
    ConflictError,
    DuplicateRecord,
    EnrollmentError,
    MalformedTokenError,
    NotFoundError,
    ValidationError,
)
from .models import Attendance
from .store import DjangoStore
from .timeslots import parse_id

logger = logging.getLogger(__name__)

TOKEN_RE = re.compile(re.escape(QR_TOKEN_PREFIX) + r"([0-9]+)")
STATUSES = (Attendance.STATUS_PRESENT, Attendance.STATUS_ABSENT)


def parse_token(raw):
    """Student id from a scanned "STUDENT:<id>" token."""
    match = TOKEN_RE.fullmatch(raw) if isinstance(raw, str) else None
    if not match:
        raise MalformedTokenError("Invalid QR code format. Expected: STUDENT:{id}")
    return int(match.group(1))


def _require_status(status):
    if status not in STATUSES:
        raise ValidationError('Status must be either "present" or "absent"')
    return status


def mark_attendance_by_qr(raw_token, session_id, store=None):
    """
    Record a scan of raw_token for session_id and return the attendance row.
    Each validation step is terminal; nothing is written unless all pass.
    """
    store = store or DjangoStore()
    student_id = parse_token(raw_token)
    session_id = parse_id(session_id, "sessionId")

    if store.find_student(student_id) is None:
        raise NotFoundError("Student not found")
    session = store.find_session(session_id)
    if session is None:
        raise NotFoundError("Session not found")
    if student_id not in store.find_group_membership(session.group_id):
        logger.warning(f"Scan rejected: student {student_id} not enrolled in session {session_id}")
        raise EnrollmentError("Student is not enrolled in this session")

    attendance = store.find_attendance(student_id, session_id)
    if attendance is None:
        try:
            attendance = store.insert_attendance(student_id, session_id, Attendance.STATUS_PRESENT)
            logger.info(f"Student {student_id} marked present in session {session_id}")
        except DuplicateRecord:
            # A concurrent scan inserted first; fall back to updating its row.
            attendance = store.find_attendance(student_id, session_id)
            attendance = store.update_attendance_status(attendance, Attendance.STATUS_PRESENT)
            logger.info(f"Student {student_id} already recorded in session {session_id} by a concurrent scan")
    else:
        attendance = store.update_attendance_status(attendance, Attendance.STATUS_PRESENT)
        logger.info(f"Student {student_id} re-scanned in session {session_id}")
    return attendance


def mark_session_attendance(session_id, entries, store=None):
    """
    Mark a roster for one session. entries are {"studentId", "status"} dicts,
    status defaulting to present. Pairs that already have a row are skipped,
    and a studentId repeated within entries keeps its first status.
    Returns the number of rows written.
    """
    store = store or DjangoStore()
    session_id = parse_id(session_id, "sessionId")
    if not isinstance(entries, (list, tuple)):
        raise ValidationError("attendances must be a list.")

    rows = []
    seen = set()
    for entry in entries:
        if not isinstance(entry, dict):
            raise ValidationError("Each attendance entry must be an object.")
        student_id = parse_id(entry.get("studentId"), "studentId")
        status = _require_status(entry.get("status") or Attendance.STATUS_PRESENT)
        if student_id in seen:
            continue
        seen.add(student_id)
        rows.append((student_id, status))

    if store.find_session(session_id) is None:
        raise NotFoundError("Session not found")
    missing = seen - store.existing_student_ids(seen)
    if missing:
        raise NotFoundError(f"Student not found: {', '.join(str(i) for i in sorted(missing))}")
    if not rows:
        return 0

    count = store.insert_attendance_skipping_existing(session_id, rows)
    logger.info(f"Session {session_id}: {count} attendance rows written, {len(rows) - count} skipped")
    return count


def create_attendance(student_id, session_id, status, store=None):
    """Single explicit attendance row (admin). An existing row is a conflict."""
    store = store or DjangoStore()
    status = _require_status(status)
    student_id = parse_id(student_id, "studentId")
    session_id = parse_id(session_id, "sessionId")

    if store.find_student(student_id) is None:
        raise NotFoundError("Student not found")
    if store.find_session(session_id) is None:
        raise NotFoundError("Session not found")
    try:
        return store.insert_attendance(student_id, session_id, status)
    except DuplicateRecord:
        raise ConflictError("Attendance already recorded for this student and session")


def attendance_for_student(student_id):
    """All attendance rows of a student, newest first."""
    student_id = parse_id(student_id, "studentId")
    if DjangoStore().find_student(student_id) is None:
        raise NotFoundError("Student not found")
    return list(
        Attendance.objects.filter(student_id=student_id)
        .select_related("student", "session__group", "session__room")
        .order_by("-created_at", "-id")
    )
