from django.urls import path

from . import views

urlpatterns = [
    path('sessions/', views.sessions, name='teacherSessions'),
    path('sessions/<int:session_id>/export/', views.export_session_attendance, name='exportSessionAttendance'),
    path('rooms/', views.rooms, name='teacherRooms'),
    path('groups/', views.groups, name='teacherGroups'),
    path('dashboard/', views.dashboard, name='teacherDashboard'),
    path('attendance/', views.mark_attendance, name='markAttendance'),
    path('attendance/stats/', views.attendance_stats, name='attendanceStats'),
    path('attendance/sessions/', views.session_stats, name='sessionAttendanceStats'),
    path('attendance/students/', views.student_stats, name='studentAttendanceStats'),
]
