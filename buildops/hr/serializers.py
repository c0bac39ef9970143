from rest_framework import serializers
from .models import (
    Employee, PayrollRun, LeaveRequest, Attendance, JobPosting, Candidate,
    PerformanceReview, TrainingRecord, Offboarding
)


class EmployeeSerializer(serializers.ModelSerializer):
    class Meta:
        model = Employee
        fields = [
            'id', 'name', 'email', 'role', 'department', 'status',
            'salary', 'photo_url', 'created_at', 'updated_at'
        ]


class PayrollRunSerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source='account.name', read_only=True)
    run_by_username = serializers.CharField(source='run_by.username', read_only=True, default=None)

    class Meta:
        model = PayrollRun
        fields = [
            'id', 'period', 'payroll_date', 'account', 'account_name', 'total_amount',
            'employee_count', 'run_by', 'run_by_username', 'created_at'
        ]


class RunPayrollSerializer(serializers.Serializer):
    account = serializers.IntegerField(error_messages={'required': 'A bank account is required to run payroll.'})
    payroll_date = serializers.DateField()


class LeaveRequestSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.name', read_only=True)

    class Meta:
        model = LeaveRequest
        fields = [
            'id', 'employee', 'employee_name', 'leave_type', 'start_date', 'end_date', 'reason',
            'status', 'actioned_by', 'actioned_at', 'created_at'
        ]
        read_only_fields = ['status', 'actioned_by', 'actioned_at']

    def validate(self, attrs):
        start = attrs.get('start_date', getattr(self.instance, 'start_date', None))
        end = attrs.get('end_date', getattr(self.instance, 'end_date', None))
        if start and end and end < start:
            raise serializers.ValidationError({'end_date': 'End date cannot be before start date.'})
        return attrs


class AttendanceSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.name', read_only=True)

    class Meta:
        model = Attendance
        fields = ['id', 'employee', 'employee_name', 'date', 'check_in', 'check_out']


class JobPostingSerializer(serializers.ModelSerializer):
    candidate_count = serializers.IntegerField(source='candidates.count', read_only=True)

    class Meta:
        model = JobPosting
        fields = ['id', 'title', 'department', 'description', 'status', 'candidate_count', 'created_at']


class CandidateSerializer(serializers.ModelSerializer):
    job_title = serializers.CharField(source='job.title', read_only=True)

    class Meta:
        model = Candidate
        fields = [
            'id', 'job', 'job_title', 'name', 'email', 'phone', 'resume_url',
            'status', 'employee', 'applied_at'
        ]
        read_only_fields = ['job', 'status', 'employee']


class CandidateStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Candidate.STATUS_CHOICES)


class PerformanceReviewSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.name', read_only=True)
    reviewer_username = serializers.CharField(source='reviewer.username', read_only=True, default=None)

    class Meta:
        model = PerformanceReview
        fields = [
            'id', 'employee', 'employee_name', 'reviewer', 'reviewer_username',
            'review_date', 'rating', 'goals', 'feedback', 'created_at'
        ]
        read_only_fields = ['reviewer']


class TrainingRecordSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.name', read_only=True)

    class Meta:
        model = TrainingRecord
        fields = ['id', 'employee', 'employee_name', 'course_name', 'completion_date', 'certificate_url', 'created_at']


class OffboardingSerializer(serializers.ModelSerializer):
    employee_name = serializers.CharField(source='employee.name', read_only=True)

    class Meta:
        model = Offboarding
        fields = [
            'id', 'employee', 'employee_name', 'exit_date', 'reason', 'feedback',
            'assets_returned', 'processed_by', 'created_at'
        ]
        read_only_fields = ['employee', 'processed_by']
