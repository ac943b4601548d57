"""
JSON plumbing shared by the teacher and student views:
response envelope, role decorators and record serializers.
"""
import json
import logging
from functools import wraps

from django.http import JsonResponse

from .exceptions import SchoolError, ValidationError

logger = logging.getLogger(__name__)


def ok(data=None, message="OK", status=200):
    return JsonResponse({"success": True, "message": message, "data": data}, status=status)


def fail(message, status=400, code="error"):
    return JsonResponse({"success": False, "error": message, "code": code}, status=status)


def read_json(request):
    """Parsed JSON object body, or ValidationError."""
    try:
        data = json.loads(request.body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Invalid JSON payload.")
    if not isinstance(data, dict):
        raise ValidationError("JSON payload must be an object.")
    return data


def api_view(view):
    """Turn SchoolError raised by a view into the JSON failure envelope."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        try:
            return view(request, *args, **kwargs)
        except SchoolError as exc:
            if exc.status_code >= 500:
                logger.error(f"{request.method} {request.path} failed: {exc.message}")
            return fail(exc.message, status=exc.status_code, code=exc.code)
    return wrapper


def teacher_required(view):
    """Require a logged-in user with a Teacher profile; sets request.teacher."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return fail("Authentication required.", status=401, code="unauthenticated")
        teacher = getattr(request.user, "teacher", None)
        if teacher is None:
            return fail("Teacher profile not found.", status=403, code="forbidden")
        request.teacher = teacher
        return view(request, *args, **kwargs)
    return wrapper


def staff_required(view):
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return fail("Authentication required.", status=401, code="unauthenticated")
        if not request.user.is_staff:
            return fail("Admin privileges required.", status=403, code="forbidden")
        return view(request, *args, **kwargs)
    return wrapper


def student_required(view):
    """Require a logged-in user with a Student profile; sets request.student."""
    @wraps(view)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return fail("Authentication required.", status=401, code="unauthenticated")
        student = getattr(request.user, "student", None)
        if student is None:
            return fail("Student profile not found.", status=403, code="forbidden")
        request.student = student
        return view(request, *args, **kwargs)
    return wrapper


# ---------------- serializers ----------------

def room_payload(room):
    return {"id": room.id, "name": room.name, "capacity": room.capacity}


def student_payload(student):
    return {
        "id": student.id,
        "name": student.name,
        "surname": student.surname,
        "phone": student.phone,
        "email": student.email,
    }


def group_payload(group, with_students=False):
    data = {"id": group.id, "name": group.name, "subject": group.subject, "teacherId": group.teacher_id}
    if with_students:
        data["students"] = [student_payload(s) for s in group.students.all()]
    return data


def session_payload(session):
    return {
        "id": session.id,
        "date": session.date.isoformat(),
        "startTime": session.start_time,
        "endTime": session.end_time,
        "groupId": session.group_id,
        "teacherId": session.teacher_id,
        "roomId": session.room_id,
        "group": group_payload(session.group),
        "room": room_payload(session.room),
    }


def attendance_payload(attendance):
    return {
        "id": attendance.id,
        "studentId": attendance.student_id,
        "sessionId": attendance.session_id,
        "status": attendance.status,
        "createdAt": attendance.created_at.isoformat(),
        "updatedAt": attendance.updated_at.isoformat(),
        "student": student_payload(attendance.student),
        "session": session_payload(attendance.session),
    }
