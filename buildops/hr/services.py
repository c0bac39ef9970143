"""HR workflows: payroll, leave, attendance, recruitment and offboarding"""
import logging
from decimal import Decimal

from django.db import transaction, IntegrityError
from django.utils import timezone

from buildops.core.cache_signals import suspend_cache_signals, invalidate_read_models
from buildops.core.exceptions import DomainError, ConflictError
from buildops.core.utils import log_activity
from buildops.financials.services import record_transaction
from .models import Employee, PayrollRun, LeaveRequest, Attendance, Candidate, Offboarding

logger = logging.getLogger(__name__)


def run_payroll(*, account, payroll_date, user=None, request=None):
    """
    Post one salary expense per active, salaried employee for the month of
    ``payroll_date`` and record the run.

    Raises:
        ConflictError: payroll for that month already exists
        DomainError: nobody to pay
    """
    period = payroll_date.strftime('%Y-%m')
    with transaction.atomic():
        if PayrollRun.objects.select_for_update().filter(period=period).exists():
            raise ConflictError(f"Payroll has already been run for {payroll_date:%B %Y}.")

        employees = list(
            Employee.objects.filter(status='Active', salary__gt=0).order_by('name')
        )
        if not employees:
            raise DomainError('No active employees with salaries found to run payroll for.')

        total = Decimal('0.00')
        with suspend_cache_signals():
            for employee in employees:
                record_transaction(
                    description=f"Monthly Salary for {employee.name} ({period})",
                    amount=employee.salary,
                    type='Expense',
                    account=account,
                    date=payroll_date,
                    user=user,
                )
                total += employee.salary
        transaction.on_commit(invalidate_read_models)

        try:
            with transaction.atomic():
                run = PayrollRun.objects.create(
                    period=period,
                    account=account,
                    payroll_date=payroll_date,
                    total_amount=total,
                    employee_count=len(employees),
                    run_by=user if user and user.is_authenticated else None,
                )
        except IntegrityError:
            # Lost the race against a concurrent run for the same month
            raise ConflictError(f"Payroll has already been run for {payroll_date:%B %Y}.")

    logger.info(f"Payroll {period} run for {len(employees)} employees, total {total}")
    log_activity(
        request=request,
        user=user,
        type='PAYROLL_RUN',
        message=f"Payroll run for {len(employees)} employees, totaling {total:,.2f}",
        link='/financials',
        model_name='PayrollRun',
        object_id=run.id,
        changes={'period': period, 'total': str(total), 'employees': len(employees)},
    )
    return run


def action_leave_request(leave_request, new_status, user=None, request=None):
    """Approve or reject a pending leave request"""
    if new_status not in ('Approved', 'Rejected'):
        raise DomainError(f"Invalid leave status '{new_status}'.")
    with transaction.atomic():
        leave_request = LeaveRequest.objects.select_for_update().select_related('employee').get(pk=leave_request.pk)
        if leave_request.status != 'Pending':
            raise ConflictError('This leave request has already been actioned.')
        leave_request.status = new_status
        leave_request.actioned_by = user if user and user.is_authenticated else None
        leave_request.actioned_at = timezone.now()
        leave_request.save()

    log_activity(
        request=request,
        user=user,
        type=f'LEAVE_{new_status.upper()}',
        message=f"{leave_request.leave_type} leave for {leave_request.employee.name} was {new_status.lower()}.",
        link='/hr/leave',
        model_name='LeaveRequest',
        object_id=leave_request.id,
    )
    return leave_request


def check_in(employee, request=None):
    """Open today's attendance record for ``employee``"""
    now = timezone.now()
    today = timezone.localdate()
    if Attendance.objects.filter(employee=employee, date=today).exists():
        raise ConflictError(f"{employee.name} has already checked in today.")
    try:
        with transaction.atomic():
            record = Attendance.objects.create(employee=employee, date=today, check_in=now)
    except IntegrityError:
        raise ConflictError(f"{employee.name} has already checked in today.")
    log_activity(
        request=request,
        type='ATTENDANCE_CHECK_IN',
        message=f"{employee.name} checked in.",
        link='/hr/attendance',
        model_name='Attendance',
        object_id=record.id,
    )
    return record


def check_out(employee, request=None):
    """Close today's open attendance record for ``employee``"""
    today = timezone.localdate()
    with transaction.atomic():
        record = Attendance.objects.select_for_update().filter(
            employee=employee, date=today, check_out__isnull=True
        ).first()
        if record is None:
            raise DomainError(f"{employee.name} has no open check-in for today.")
        record.check_out = timezone.now()
        record.save(update_fields=['check_out'])
    log_activity(
        request=request,
        type='ATTENDANCE_CHECK_OUT',
        message=f"{employee.name} checked out.",
        link='/hr/attendance',
        model_name='Attendance',
        object_id=record.id,
    )
    return record


def set_candidate_status(candidate, new_status, request=None):
    """
    Move a candidate through the hiring pipeline.

    Hiring creates an Active employee from the candidate, titled after the
    job, unless an employee with the same email already exists.
    """
    valid = {choice for choice, _ in Candidate.STATUS_CHOICES}
    if new_status not in valid:
        raise DomainError(f"Invalid candidate status '{new_status}'.")

    with transaction.atomic():
        candidate = Candidate.objects.select_for_update().select_related('job').get(pk=candidate.pk)
        if candidate.status == 'Hired':
            raise ConflictError(f"{candidate.name} has already been hired.")

        if new_status == 'Hired':
            if Employee.objects.filter(email__iexact=candidate.email).exists():
                raise ConflictError(f"An employee with email {candidate.email} already exists.")
            employee = Employee.objects.create(
                name=candidate.name,
                email=candidate.email,
                role=candidate.job.title,
                department=candidate.job.department,
                status='Active',
                salary=Decimal('0.00'),
            )
            candidate.employee = employee

        candidate.status = new_status
        candidate.save()

    if new_status == 'Hired':
        log_activity(
            request=request,
            type='EMPLOYEE_HIRED',
            message=f"New employee hired via recruitment: {candidate.name}",
            link=f'/employees/{candidate.employee_id}',
            model_name='Employee',
            object_id=candidate.employee_id,
        )
    else:
        log_activity(
            request=request,
            type='CANDIDATE_STATUS_CHANGED',
            message=f"Candidate {candidate.name} moved to {new_status}.",
            link=f'/hr/jobs/{candidate.job_id}',
            model_name='Candidate',
            object_id=candidate.id,
        )
    return candidate


def offboard_employee(employee, *, exit_date, reason, feedback='', assets_returned=False, user=None, request=None):
    """Record an employee exit and mark them Inactive"""
    with transaction.atomic():
        employee = Employee.objects.select_for_update().get(pk=employee.pk)
        if Offboarding.objects.filter(employee=employee).exists():
            raise ConflictError(f"{employee.name} has already been offboarded.")
        old_status = employee.status
        record = Offboarding.objects.create(
            employee=employee,
            exit_date=exit_date,
            reason=reason,
            feedback=feedback,
            assets_returned=assets_returned,
            processed_by=user if user and user.is_authenticated else None,
        )
        employee.status = 'Inactive'
        employee.save(update_fields=['status', 'updated_at'])

    log_activity(
        request=request,
        user=user,
        type='EMPLOYEE_OFFBOARDED',
        message=f"{employee.name} was offboarded.",
        link=f'/employees/{employee.id}',
        model_name='Employee',
        object_id=employee.id,
        changes={'status': {'old': old_status, 'new': 'Inactive'}},
    )
    return record
