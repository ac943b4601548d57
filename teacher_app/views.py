"""
Teacher app views: session booking, room availability, attendance marking
and dashboard figures. All endpoints speak JSON.
"""
from django.db.models import Count
from django.http import HttpResponse
from django.utils import timezone
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from . import stats
from .api import (
    api_view,
    attendance_payload,
    group_payload,
    ok,
    read_json,
    room_payload,
    session_payload,
    staff_required,
    teacher_required,
)
from .attendance import (
    attendance_for_student,
    create_attendance,
    mark_attendance_by_qr,
    mark_session_attendance,
)
from .exceptions import NotFoundError
from .exports import XLSX_CONTENT_TYPE, build_session_workbook, session_sheet_filename
from .models import Group, Session
from .scheduling import available_rooms, create_session
from .store import DjangoStore


def _teacher_sessions(teacher):
    return (
        Session.objects.filter(teacher=teacher)
        .select_related("group", "room")
        .annotate(attendance_count=Count("attendances"))
        .order_by("date", "start_time")
    )


def _listed_session(session):
    return dict(session_payload(session), attendanceCount=session.attendance_count)


@require_http_methods(["GET", "POST"])
@teacher_required
@api_view
def sessions(request):
    """GET lists the teacher's sessions; POST books a new one."""
    if request.method == "POST":
        data = read_json(request)
        session = create_session(
            group_id=data.get("groupId"),
            room_id=data.get("roomId"),
            teacher_id=request.teacher.id,
            day=data.get("date"),
            start_time=data.get("startTime"),
            end_time=data.get("endTime"),
        )
        return ok(session_payload(session), "Session created", status=201)

    return ok([_listed_session(s) for s in _teacher_sessions(request.teacher)], "Sessions retrieved")


@require_GET
@teacher_required
@api_view
def export_session_attendance(request, session_id):
    """Download the attendance sheet of one of the teacher's sessions."""
    session = (
        Session.objects.filter(id=session_id, teacher=request.teacher)
        .select_related("group", "room")
        .first()
    )
    if not session:
        raise NotFoundError("Session not found")

    response = HttpResponse(build_session_workbook(session), content_type=XLSX_CONTENT_TYPE)
    response["Content-Disposition"] = f'attachment; filename="{session_sheet_filename(session)}"'
    return response


@require_GET
@teacher_required
@api_view
def rooms(request):
    """Rooms free for ?date=&startTime=&endTime=, or all rooms when any is missing."""
    result = available_rooms(
        day=request.GET.get("date"),
        start_time=request.GET.get("startTime"),
        end_time=request.GET.get("endTime"),
    )
    return ok([room_payload(room) for room in result], "Rooms retrieved")


@require_GET
@teacher_required
@api_view
def groups(request):
    qs = Group.objects.filter(teacher=request.teacher).prefetch_related("students")
    return ok([group_payload(group, with_students=True) for group in qs], "Groups retrieved")


@require_GET
@teacher_required
@api_view
def dashboard(request):
    """Everything the teacher portal home page shows, in one call."""
    teacher = request.teacher
    today = timezone.localdate()
    teacher_groups = list(Group.objects.filter(teacher=teacher).prefetch_related("students"))
    teacher_sessions = list(_teacher_sessions(teacher))
    today_sessions = [s for s in teacher_sessions if s.date == today]
    overview = stats.attendance_overview(teacher)

    return ok(
        {
            "groups": [group_payload(group, with_students=True) for group in teacher_groups],
            "sessions": [_listed_session(s) for s in teacher_sessions],
            "todaySessions": [_listed_session(s) for s in today_sessions],
            "stats": {
                "totalStudents": len({s.id for group in teacher_groups for s in group.students.all()}),
                "totalGroups": len(teacher_groups),
                "totalSessions": len(teacher_sessions),
                "todaySessions": len(today_sessions),
                "attendanceRate": overview["averageAttendance"],
            },
            "attendanceStats": overview,
            "studentStats": stats.student_attendance_stats(teacher),
        },
        "Dashboard data retrieved",
    )


@require_POST
@teacher_required
@api_view
def mark_attendance(request):
    """Bulk roster marking; rows that already exist are left as they are."""
    data = read_json(request)
    count = mark_session_attendance(data.get("sessionId"), data.get("attendances", []))
    return ok({"count": count}, "Attendance marked")


@require_GET
@teacher_required
@api_view
def attendance_stats(request):
    return ok(stats.attendance_overview(request.teacher), "Attendance stats retrieved")


@require_GET
@teacher_required
@api_view
def session_stats(request):
    return ok(stats.session_attendance_stats(request.teacher), "Session attendance stats retrieved")


@require_GET
@teacher_required
@api_view
def student_stats(request):
    return ok(stats.student_attendance_stats(request.teacher), "Student attendance stats retrieved")


@require_POST
@teacher_required
@api_view
def scan_attendance_qr(request):
    """Record a scanned STUDENT:<id> token against a session."""
    data = read_json(request)
    attendance = mark_attendance_by_qr(data.get("qrData"), data.get("sessionId"))
    attendance = DjangoStore().load_attendance(attendance.id)
    return ok(attendance_payload(attendance), "Attendance marked")


@require_POST
@staff_required
@api_view
def admin_create_attendance(request):
    data = read_json(request)
    attendance = create_attendance(data.get("studentId"), data.get("sessionId"), data.get("status"))
    attendance = DjangoStore().load_attendance(attendance.id)
    return ok(attendance_payload(attendance), "Attendance created", status=201)


@require_GET
@staff_required
@api_view
def admin_student_attendance(request, student_id):
    rows = attendance_for_student(student_id)
    return ok([attendance_payload(row) for row in rows], "Attendance retrieved")
