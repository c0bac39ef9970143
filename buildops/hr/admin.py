from django.contrib import admin
from .models import (
    Employee, PayrollRun, LeaveRequest, Attendance, JobPosting, Candidate,
    PerformanceReview, TrainingRecord, Offboarding
)


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ['name', 'email', 'role', 'department', 'status', 'salary', 'created_at']
    list_filter = ['status', 'department']
    search_fields = ['name', 'email', 'role']
    ordering = ['name']


@admin.register(PayrollRun)
class PayrollRunAdmin(admin.ModelAdmin):
    list_display = ['period', 'payroll_date', 'account', 'total_amount', 'employee_count', 'run_by', 'created_at']
    readonly_fields = ['created_at']
    ordering = ['-period']


@admin.register(LeaveRequest)
class LeaveRequestAdmin(admin.ModelAdmin):
    list_display = ['employee', 'leave_type', 'start_date', 'end_date', 'status', 'actioned_by']
    list_filter = ['status', 'leave_type']
    search_fields = ['employee__name']


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ['employee', 'date', 'check_in', 'check_out']
    list_filter = ['date']
    search_fields = ['employee__name']
    date_hierarchy = 'date'


class CandidateInline(admin.TabularInline):
    model = Candidate
    extra = 0


@admin.register(JobPosting)
class JobPostingAdmin(admin.ModelAdmin):
    list_display = ['title', 'department', 'status', 'created_at']
    list_filter = ['status', 'department']
    search_fields = ['title']
    inlines = [CandidateInline]


admin.site.register(PerformanceReview)
admin.site.register(TrainingRecord)
admin.site.register(Offboarding)
