from django.contrib import admin
from .models import Project, ProjectTask, DailyLog


class ProjectTaskInline(admin.TabularInline):
    model = ProjectTask
    extra = 0


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ['name', 'client', 'status', 'progress', 'budget', 'start_date', 'created_at']
    list_filter = ['status', 'start_date']
    search_fields = ['name', 'location', 'client__name']
    filter_horizontal = ['team']
    inlines = [ProjectTaskInline]


@admin.register(DailyLog)
class DailyLogAdmin(admin.ModelAdmin):
    list_display = ['project', 'author_email', 'created_at']
    search_fields = ['project__name', 'notes']
    readonly_fields = ['created_at']
