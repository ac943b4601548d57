"""
Attendance figures for the teacher dashboard.
"""
from django.db.models import Count, Q

from .models import Attendance, Group, Session


def _rate(part, whole):
    return round(part / whole * 100) if whole else 0


def attendance_overview(teacher):
    sessions = Session.objects.filter(teacher=teacher)
    counts = Attendance.objects.filter(session__teacher=teacher).aggregate(
        present=Count("id", filter=Q(status=Attendance.STATUS_PRESENT)),
        absent=Count("id", filter=Q(status=Attendance.STATUS_ABSENT)),
    )
    total_sessions = sessions.count()
    total_students = (
        Group.students.through.objects.filter(group__sessions__teacher=teacher)
        .values("student_id").distinct().count()
    )
    present, absent = counts["present"], counts["absent"]
    return {
        "totalSessions": total_sessions,
        "totalStudents": total_students,
        "totalPresent": present,
        "totalAbsent": absent,
        "averageAttendance": _rate(present, (present + absent) or 1) if total_sessions else 0,
    }


def session_attendance_stats(teacher):
    sessions = (
        Session.objects.filter(teacher=teacher)
        .select_related("group")
        .annotate(
            present_count=Count("attendances", filter=Q(attendances__status=Attendance.STATUS_PRESENT), distinct=True),
            absent_count=Count("attendances", filter=Q(attendances__status=Attendance.STATUS_ABSENT), distinct=True),
            total_students=Count("group__students", distinct=True),
        )
        .order_by("-date", "-start_time")
    )
    return [
        {
            "id": session.id,
            "date": session.date.isoformat(),
            "groupName": session.group.name,
            "presentCount": session.present_count,
            "absentCount": session.absent_count,
            "totalStudents": session.total_students,
            "attendanceRate": _rate(session.present_count, session.total_students),
        }
        for session in sessions
    ]


def student_attendance_stats(teacher):
    """
    One entry per distinct student across the teacher's groups.
    A student in several groups gets the counts of all of them summed.
    """
    stats = {}
    groups = Group.objects.filter(teacher=teacher).prefetch_related("students", "sessions__attendances")
    for group in groups:
        group_sessions = list(group.sessions.all())
        by_student = {}
        for session in group_sessions:
            for attendance in session.attendances.all():
                by_student.setdefault(attendance.student_id, []).append(attendance.status)

        for student in group.students.all():
            statuses = by_student.get(student.id, [])
            entry = stats.setdefault(
                student.id,
                {
                    "id": student.id,
                    "name": student.name,
                    "surname": student.surname,
                    "totalSessions": 0,
                    "presentCount": 0,
                    "absentCount": 0,
                },
            )
            entry["totalSessions"] += len(group_sessions)
            entry["presentCount"] += statuses.count(Attendance.STATUS_PRESENT)
            entry["absentCount"] += statuses.count(Attendance.STATUS_ABSENT)

    for entry in stats.values():
        entry["attendanceRate"] = _rate(entry["presentCount"], entry["totalSessions"])
    return list(stats.values())
