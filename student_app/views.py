"""
Student app views: identity QR card and own attendance history
"""
import io

import qrcode
from django.http import HttpResponse
from django.views.decorators.http import require_GET

from teacher_app.api import api_view, attendance_payload, ok, student_required
from teacher_app.attendance import attendance_for_student

QR_BOX_SIZE = 10
QR_BORDER = 4


def render_qr_png(value):
    """PNG bytes of a QR code encoding value."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=QR_BOX_SIZE,
        border=QR_BORDER,
    )
    qr.add_data(value)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


@require_GET
@student_required
def qr_card(request):
    """The student's STUDENT:<id> token as a scannable PNG."""
    response = HttpResponse(render_qr_png(request.student.qr_token), content_type="image/png")
    response["Content-Disposition"] = f'inline; filename="student-{request.student.id}.png"'
    return response


@require_GET
@student_required
@api_view
def my_attendance(request):
    rows = attendance_for_student(request.student.id)
    return ok([attendance_payload(row) for row in rows], "Attendance retrieved")
