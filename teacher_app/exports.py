"""
Session attendance sheet as an .xlsx workbook.
"""
import io

from openpyxl import Workbook
from openpyxl.styles import Font

from .models import Attendance

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def session_sheet_filename(session):
    raw = f"{session.group.name}-{session.date:%Y-%m-%d}"
    safe = "".join(ch for ch in raw if ch not in '\\/:*?"<>|').strip()
    return f"{safe or f'session_{session.id}'}.xlsx"


def build_session_workbook(session):
    """
    One row per enrolled student; students without a row count as ABSENT.
    Returns the workbook bytes.
    """
    students = session.group.students.order_by("surname", "name")
    attendance_map = {row.student_id: row for row in Attendance.objects.filter(session=session)}

    wb = Workbook()
    ws = wb.active
    ws.title = "Attendance"
    bold = Font(bold=True)

    header = [
        ("Group", session.group.name),
        ("Subject", session.group.subject),
        ("Room", session.room.name),
        ("Date", session.date.isoformat()),
        ("Time", f"{session.start_time} - {session.end_time}"),
    ]
    for label, value in header:
        ws.append([label, value])
        ws.cell(row=ws.max_row, column=1).font = bold
    ws.append([])

    ws.append(["Student ID", "Surname", "Name", "Status"])
    for cell in ws[ws.max_row]:
        cell.font = bold

    present = 0
    for student in students:
        row = attendance_map.get(student.id)
        status = row.status.upper() if row else "ABSENT"
        if row and row.status == Attendance.STATUS_PRESENT:
            present += 1
        ws.append([student.id, student.surname, student.name, status])

    strength = len(students)
    ws.append([])
    ws.append(["Group Strength", strength])
    ws.append(["Present", present])
    ws.append(["Absent", strength - present])

    ws.column_dimensions["A"].width = 16
    ws.column_dimensions["B"].width = 24
    ws.column_dimensions["C"].width = 24

    out = io.BytesIO()
    wb.save(out)
    return out.getvalue()
