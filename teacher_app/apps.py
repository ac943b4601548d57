from django.apps import AppConfig


class TeacherAppConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "teacher_app"
    verbose_name = "Teaching & attendance"
