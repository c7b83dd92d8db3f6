from django.contrib import admin

from .models import MentoringService, MentoringSession, MentoringSessionMentor, MentoringSessionUpdate


@admin.register(MentoringService)
class MentoringServiceAdmin(admin.ModelAdmin):
    list_display = ("service_name", "service_type", "price", "max_participants", "is_active")
    list_filter = ("service_type", "is_active")
    search_fields = ("service_name",)


class MentoringSessionMentorInline(admin.TabularInline):
    model = MentoringSessionMentor
    extra = 0


@admin.register(MentoringSession)
class MentoringSessionAdmin(admin.ModelAdmin):
    list_display = ("service", "date", "start_time", "status")
    list_filter = ("status",)
    inlines = [MentoringSessionMentorInline]


@admin.register(MentoringSessionUpdate)
class MentoringSessionUpdateAdmin(admin.ModelAdmin):
    list_display = ("session", "mentor", "created_at")
    readonly_fields = ("session", "mentor", "changes", "created_at")
