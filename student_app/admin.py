from django.contrib import admin
from django.contrib.auth.models import User

from .models import Student


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = (
        'id',
        'name',
        'surname',
        'user',
        'email',
        'qr_token',
    )

    search_fields = (
        'name',
        'surname',
        'email',
        'user__username',
    )

    list_filter = ('groups',)

    ordering = ('surname', 'name')
    actions = ('delete_students_with_user_accounts',)

    @admin.action(description='Delete selected students and linked user accounts')
    def delete_students_with_user_accounts(self, request, queryset):
        ids = list(queryset.values_list('id', flat=True))
        user_ids = [uid for uid in queryset.values_list('user_id', flat=True) if uid]
        Student.objects.filter(id__in=ids).delete()
        User.objects.filter(id__in=user_ids).delete()
