from django.urls import path

from . import views

urlpatterns = [
    path('qr-card/', views.qr_card, name='studentQrCard'),
    path('attendance/', views.my_attendance, name='studentAttendance'),
]
