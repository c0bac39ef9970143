from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from buildops.ai import flows
from buildops.core.exceptions import DomainError, AIServiceError, error_response
from buildops.core.utils import log_activity
from buildops.financials.models import Account
from .models import (
    Employee, PayrollRun, LeaveRequest, Attendance, JobPosting, Candidate,
    PerformanceReview, TrainingRecord, Offboarding
)
from .serializers import (
    EmployeeSerializer, PayrollRunSerializer, RunPayrollSerializer, LeaveRequestSerializer,
    AttendanceSerializer, JobPostingSerializer, CandidateSerializer, CandidateStatusSerializer,
    PerformanceReviewSerializer, TrainingRecordSerializer, OffboardingSerializer
)
from . import services


# Employee views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def employee_list_create(request):
    """List all employees or create a new employee"""
    if request.method == 'GET':
        queryset = Employee.objects.all().order_by('name')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(email__icontains=search) |
                Q(role__icontains=search)
            )
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        department = request.query_params.get('department', None)
        if department:
            queryset = queryset.filter(department=department)
        return Response(EmployeeSerializer(queryset, many=True).data)

    serializer = EmployeeSerializer(data=request.data)
    if serializer.is_valid():
        employee = serializer.save()
        log_activity(
            request=request,
            type='EMPLOYEE_ADDED',
            message=f'New employee "{employee.name}" was added.',
            link=f'/employees/{employee.id}',
            model_name='Employee',
            object_id=employee.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def employee_detail(request, pk):
    """Retrieve, update or delete an employee"""
    employee = get_object_or_404(Employee, pk=pk)

    if request.method == 'GET':
        return Response(EmployeeSerializer(employee).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = EmployeeSerializer(employee, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            old_data = {'role': employee.role, 'status': employee.status, 'salary': str(employee.salary)}
            serializer.save()
            new_data = {'role': employee.role, 'status': employee.status, 'salary': str(employee.salary)}
            changes = {k: {'old': old_data[k], 'new': new_data[k]} for k in old_data if old_data[k] != new_data[k]}
            log_activity(
                request=request,
                type='EMPLOYEE_UPDATED',
                message=f'Employee "{employee.name}" was updated.',
                link=f'/employees/{employee.id}',
                model_name='Employee',
                object_id=employee.id,
                changes=changes,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if employee.projects.exists():
            return Response(
                {'error': 'Cannot delete employee. They are assigned to one or more projects.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        employee_name = employee.name
        employee_id = employee.id
        employee.delete()
        log_activity(
            request=request,
            type='EMPLOYEE_DELETED',
            message=f'Employee "{employee_name}" was deleted.',
            link='/employees',
            model_name='Employee',
            object_id=employee_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def employee_ai_summary(request, pk):
    """Summarize an employee's project involvement and reviews"""
    employee = get_object_or_404(Employee, pk=pk)
    projects = employee.projects.order_by('name')
    reviews = employee.reviews.order_by('-review_date')[:5]
    try:
        result = flows.summarize_employee_performance(
            employee.name, employee.role, employee.department, employee.status,
            [(p.name, p.status) for p in projects],
            [(r.rating, r.feedback) for r in reviews],
        )
    except AIServiceError as e:
        return error_response(e)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def employee_offboard(request, pk):
    """Record an employee's exit"""
    employee = get_object_or_404(Employee, pk=pk)
    serializer = OffboardingSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        record = services.offboard_employee(employee, user=request.user, request=request, **serializer.validated_data)
    except DomainError as e:
        return error_response(e)
    return Response(OffboardingSerializer(record).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def offboarding_list(request):
    """List completed offboardings"""
    records = Offboarding.objects.select_related('employee').order_by('-exit_date')
    return Response(OffboardingSerializer(records, many=True).data)


# Payroll views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def payroll_run_list(request):
    """List previous payroll runs"""
    runs = PayrollRun.objects.select_related('account', 'run_by').order_by('-period')
    return Response(PayrollRunSerializer(runs, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def payroll_run(request):
    """Run payroll for the month of ``payroll_date`` into ``account``"""
    serializer = RunPayrollSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    account = Account.objects.filter(pk=serializer.validated_data['account']).first()
    if account is None:
        return Response({'account': ['Account not found.']}, status=status.HTTP_400_BAD_REQUEST)

    try:
        run = services.run_payroll(
            account=account,
            payroll_date=serializer.validated_data['payroll_date'],
            user=request.user,
            request=request,
        )
    except DomainError as e:
        return error_response(e)
    return Response(PayrollRunSerializer(run).data, status=status.HTTP_201_CREATED)


# Leave views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def leave_request_list_create(request):
    """List or submit leave requests"""
    if request.method == 'GET':
        queryset = LeaveRequest.objects.select_related('employee').order_by('-created_at')
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        employee = request.query_params.get('employee', None)
        if employee:
            queryset = queryset.filter(employee_id=employee)
        return Response(LeaveRequestSerializer(queryset, many=True).data)

    serializer = LeaveRequestSerializer(data=request.data)
    if serializer.is_valid():
        leave = serializer.save()
        log_activity(
            request=request,
            type='LEAVE_REQUESTED',
            message=f'{leave.employee.name} requested {leave.leave_type} leave.',
            link='/hr/leave',
            model_name='LeaveRequest',
            object_id=leave.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def leave_request_action(request, pk):
    """Approve or reject a leave request"""
    leave = get_object_or_404(LeaveRequest, pk=pk)
    try:
        leave = services.action_leave_request(leave, request.data.get('status'), user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(LeaveRequestSerializer(leave).data)


# Attendance views
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def attendance_list(request):
    """List attendance records, optionally for one employee or day"""
    queryset = Attendance.objects.select_related('employee').order_by('-date', '-check_in')
    employee = request.query_params.get('employee', None)
    if employee:
        queryset = queryset.filter(employee_id=employee)
    date = request.query_params.get('date', None)
    if date:
        queryset = queryset.filter(date=date)
    return Response(AttendanceSerializer(queryset, many=True).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def attendance_check_in(request):
    employee = get_object_or_404(Employee, pk=request.data.get('employee'))
    try:
        record = services.check_in(employee, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(AttendanceSerializer(record).data, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def attendance_check_out(request):
    employee = get_object_or_404(Employee, pk=request.data.get('employee'))
    try:
        record = services.check_out(employee, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(AttendanceSerializer(record).data)


# Recruitment views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def job_list_create(request):
    """List job postings or open a new one"""
    if request.method == 'GET':
        queryset = JobPosting.objects.all().order_by('-created_at')
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return Response(JobPostingSerializer(queryset, many=True).data)

    serializer = JobPostingSerializer(data=request.data)
    if serializer.is_valid():
        job = serializer.save()
        log_activity(
            request=request,
            type='JOB_POSTED',
            message=f'New job posting "{job.title}" was created.',
            link=f'/hr/jobs/{job.id}',
            model_name='JobPosting',
            object_id=job.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def job_detail(request, pk):
    """Retrieve, update or delete a job posting"""
    job = get_object_or_404(JobPosting, pk=pk)

    if request.method == 'GET':
        return Response(JobPostingSerializer(job).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = JobPostingSerializer(job, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if job.candidates.exists():
            return Response(
                {'error': 'Cannot delete job posting. It has candidates.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        job.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def job_candidate_list_create(request, pk):
    """List or add candidates for a job posting"""
    job = get_object_or_404(JobPosting, pk=pk)
    if request.method == 'GET':
        return Response(CandidateSerializer(job.candidates.order_by('-applied_at'), many=True).data)

    serializer = CandidateSerializer(data=request.data)
    if serializer.is_valid():
        candidate = serializer.save(job=job)
        log_activity(
            request=request,
            type='CANDIDATE_ADDED',
            message=f'{candidate.name} applied for "{job.title}".',
            link=f'/hr/jobs/{job.id}',
            model_name='Candidate',
            object_id=candidate.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def candidate_detail(request, pk):
    """Retrieve, edit or remove a candidate"""
    candidate = get_object_or_404(Candidate, pk=pk)
    if request.method == 'GET':
        return Response(CandidateSerializer(candidate).data)
    elif request.method == 'PATCH':
        serializer = CandidateSerializer(candidate, data=request.data, partial=True)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        candidate.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def candidate_status(request, pk):
    """Move a candidate through the pipeline; hiring creates the employee"""
    candidate = get_object_or_404(Candidate, pk=pk)
    serializer = CandidateStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        candidate = services.set_candidate_status(candidate, serializer.validated_data['status'], request=request)
    except DomainError as e:
        return error_response(e)
    return Response(CandidateSerializer(candidate).data)


# Performance and training views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def review_list_create(request):
    """List or record performance reviews"""
    if request.method == 'GET':
        queryset = PerformanceReview.objects.select_related('employee', 'reviewer').order_by('-review_date')
        employee = request.query_params.get('employee', None)
        if employee:
            queryset = queryset.filter(employee_id=employee)
        return Response(PerformanceReviewSerializer(queryset, many=True).data)

    serializer = PerformanceReviewSerializer(data=request.data)
    if serializer.is_valid():
        review = serializer.save(reviewer=request.user)
        log_activity(
            request=request,
            type='PERFORMANCE_REVIEW_ADDED',
            message=f'Performance review recorded for {review.employee.name} ({review.rating}/5).',
            link=f'/employees/{review.employee_id}',
            model_name='PerformanceReview',
            object_id=review.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def training_list_create(request):
    """List or record completed trainings"""
    if request.method == 'GET':
        queryset = TrainingRecord.objects.select_related('employee').order_by('-completion_date')
        employee = request.query_params.get('employee', None)
        if employee:
            queryset = queryset.filter(employee_id=employee)
        return Response(TrainingRecordSerializer(queryset, many=True).data)

    serializer = TrainingRecordSerializer(data=request.data)
    if serializer.is_valid():
        record = serializer.save()
        log_activity(
            request=request,
            type='TRAINING_ADDED',
            message=f'{record.employee.name} completed "{record.course_name}".',
            link=f'/employees/{record.employee_id}',
            model_name='TrainingRecord',
            object_id=record.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def training_delete(request, pk):
    record = get_object_or_404(TrainingRecord, pk=pk)
    record.delete()
    return Response(status=status.HTTP_204_NO_CONTENT)
