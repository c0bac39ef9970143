from django.urls import path
from .views import (
    employee_list_create, employee_detail, employee_ai_summary, employee_offboard, offboarding_list,
    payroll_run_list, payroll_run,
    leave_request_list_create, leave_request_action,
    attendance_list, attendance_check_in, attendance_check_out,
    job_list_create, job_detail, job_candidate_list_create, candidate_detail, candidate_status,
    review_list_create, training_list_create, training_delete
)

urlpatterns = [
    # Employee endpoints
    path('employees/', employee_list_create, name='employee-list-create'),
    path('employees/<int:pk>/', employee_detail, name='employee-detail'),
    path('employees/<int:pk>/ai-summary/', employee_ai_summary, name='employee-ai-summary'),
    path('employees/<int:pk>/offboard/', employee_offboard, name='employee-offboard'),
    path('offboardings/', offboarding_list, name='offboarding-list'),

    # Payroll endpoints
    path('payroll/', payroll_run_list, name='payroll-run-list'),
    path('payroll/run/', payroll_run, name='payroll-run'),

    # Leave endpoints
    path('leave-requests/', leave_request_list_create, name='leave-request-list-create'),
    path('leave-requests/<int:pk>/action/', leave_request_action, name='leave-request-action'),

    # Attendance endpoints
    path('attendance/', attendance_list, name='attendance-list'),
    path('attendance/check-in/', attendance_check_in, name='attendance-check-in'),
    path('attendance/check-out/', attendance_check_out, name='attendance-check-out'),

    # Recruitment endpoints
    path('jobs/', job_list_create, name='job-list-create'),
    path('jobs/<int:pk>/', job_detail, name='job-detail'),
    path('jobs/<int:pk>/candidates/', job_candidate_list_create, name='job-candidates'),
    path('candidates/<int:pk>/', candidate_detail, name='candidate-detail'),
    path('candidates/<int:pk>/status/', candidate_status, name='candidate-status'),

    # Performance and training endpoints
    path('reviews/', review_list_create, name='review-list-create'),
    path('trainings/', training_list_create, name='training-list-create'),
    path('trainings/<int:pk>/', training_delete, name='training-delete'),
]
