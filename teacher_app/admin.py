from django.contrib import admin, messages
from django.contrib.auth.models import User

from .models import Attendance, Group, Room, Session, Teacher


@admin.register(Teacher)
class TeacherAdmin(admin.ModelAdmin):
    list_display = (
        'user',
        'name',
        'surname',
        'specialty',
        'phone',
    )
    search_fields = ('user__username', 'name', 'surname', 'specialty')
    actions = ("delete_teachers_with_user_accounts",)

    @admin.action(description="Delete selected teachers and linked user accounts")
    def delete_teachers_with_user_accounts(self, request, queryset):
        ids = list(queryset.values_list("id", flat=True))
        users = list(queryset.values_list("user_id", flat=True))
        Teacher.objects.filter(id__in=ids).delete()
        User.objects.filter(id__in=users).delete()
        self.message_user(request, f"Deleted {len(ids)} teachers and linked user accounts.", level=messages.SUCCESS)

    def delete_model(self, request, obj):
        user_id = obj.user_id
        super().delete_model(request, obj)
        User.objects.filter(id=user_id).delete()

    def delete_queryset(self, request, queryset):
        user_ids = list(queryset.values_list("user_id", flat=True))
        super().delete_queryset(request, queryset)
        User.objects.filter(id__in=user_ids).delete()


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ("name", "capacity")
    search_fields = ("name",)


@admin.register(Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ("name", "subject", "teacher")
    search_fields = ("name", "subject", "teacher__name", "teacher__surname")
    list_filter = ("teacher",)
    filter_horizontal = ("students",)


@admin.register(Session)
class SessionAdmin(admin.ModelAdmin):
    list_display = ("id", "group", "teacher", "room", "date", "start_time", "end_time")
    search_fields = ("group__name", "room__name", "teacher__name")
    list_filter = ("room", "date")

    def has_change_permission(self, request, obj=None):
        # Sessions are booked through the conflict-checked API and never edited.
        return False


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("session", "student", "status", "created_at", "updated_at")
    search_fields = ("student__name", "student__surname", "session__id")
    list_filter = ("status",)
