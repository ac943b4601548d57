"""
Main URL configuration for EduZone
"""
from django.contrib import admin
from django.urls import include, path

from teacher_app import views as teacherViews
from . import views

urlpatterns = [
    # Admin panel
    path('admin/', admin.site.urls),

    path('health/', views.health, name='health'),

    # Authentication
    path('auth/login/', views.loginView, name='login'),
    path('auth/logout/', views.logoutView, name='logout'),
    path('auth/csrf/', views.csrfView, name='csrf'),

    # Teacher portal APIs
    path('teacher/', include('teacher_app.urls')),

    # Attendance APIs (QR scan for teachers, explicit rows for admins)
    path('attendance/qr/', teacherViews.scan_attendance_qr, name='scanAttendanceQr'),
    path('attendance/', teacherViews.admin_create_attendance, name='createAttendance'),
    path('attendance/student/<int:student_id>/', teacherViews.admin_student_attendance, name='studentAttendanceAdmin'),

    # Student portal APIs
    path('student/', include('student_app.urls')),
]

handler400 = 'eduzone_main.views.error_400'
handler403 = 'eduzone_main.views.error_403'
handler404 = 'eduzone_main.views.error_404'
handler500 = 'eduzone_main.views.error_500'
