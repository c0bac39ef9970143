"""
Test suite for HR module
Tests: payroll runs, leave approval, attendance, recruitment pipeline and offboarding
"""
from datetime import date
from decimal import Decimal
from django.test import TestCase
from rest_framework import status
from buildops.core.exceptions import ConflictError, DomainError
from buildops.core.models import ActivityLog
from buildops.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from buildops.financials.models import Transaction
from buildops.hr.models import Employee, PayrollRun, LeaveRequest, Candidate
from buildops.hr import services


class PayrollServiceTests(TestCase):
    """Test monthly payroll"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.account = TestDataFactory.create_account()

    def test_run_payroll_posts_one_expense_per_salaried_employee(self):
        alice = TestDataFactory.create_employee(name='Alice Mason', salary=Decimal('4000.00'))
        TestDataFactory.create_employee(name='Bob Carpenter', salary=Decimal('3500.00'))
        TestDataFactory.create_employee(name='Unpaid Intern', salary=None)
        TestDataFactory.create_employee(name='Former Worker', status='Inactive')

        run = services.run_payroll(account=self.account, payroll_date=date(2024, 3, 28), user=self.user)

        self.assertEqual(run.period, '2024-03')
        self.assertEqual(run.employee_count, 2)
        self.assertEqual(run.total_amount, Decimal('7500.00'))
        expenses = Transaction.objects.filter(type='Expense', account=self.account)
        self.assertEqual(expenses.count(), 2)
        self.assertTrue(expenses.filter(description=f'Monthly Salary for {alice.name} (2024-03)').exists())
        self.assertTrue(ActivityLog.objects.filter(type='PAYROLL_RUN').exists())

    def test_same_month_cannot_be_run_twice(self):
        TestDataFactory.create_employee(salary=Decimal('1000.00'))
        services.run_payroll(account=self.account, payroll_date=date(2024, 3, 1), user=self.user)

        with self.assertRaises(ConflictError) as ctx:
            services.run_payroll(account=self.account, payroll_date=date(2024, 3, 31), user=self.user)
        self.assertEqual(str(ctx.exception), 'Payroll has already been run for March 2024.')
        self.assertEqual(Transaction.objects.count(), 1)

    def test_next_month_can_be_run(self):
        TestDataFactory.create_employee(salary=Decimal('1000.00'))
        services.run_payroll(account=self.account, payroll_date=date(2024, 3, 1))
        services.run_payroll(account=self.account, payroll_date=date(2024, 4, 1))
        self.assertEqual(PayrollRun.objects.count(), 2)

    def test_no_salaried_employees(self):
        TestDataFactory.create_employee(salary=Decimal('0.00'))
        with self.assertRaises(DomainError):
            services.run_payroll(account=self.account, payroll_date=date(2024, 3, 1))
        self.assertFalse(PayrollRun.objects.exists())


class RecruitmentServiceTests(TestCase):
    """Test the candidate pipeline"""

    def test_hiring_creates_employee(self):
        job = TestDataFactory.create_job(title='Crane Operator', department='Plant')
        candidate = TestDataFactory.create_candidate(job=job, name='Dana Lift', email='dana@test.com')

        candidate = services.set_candidate_status(candidate, 'Hired')

        employee = Employee.objects.get(email='dana@test.com')
        self.assertEqual(candidate.employee, employee)
        self.assertEqual(employee.role, 'Crane Operator')
        self.assertEqual(employee.department, 'Plant')
        self.assertEqual(employee.status, 'Active')
        self.assertTrue(ActivityLog.objects.filter(type='EMPLOYEE_HIRED').exists())

    def test_hiring_with_existing_employee_email_is_refused(self):
        TestDataFactory.create_employee(email='taken@test.com')
        candidate = TestDataFactory.create_candidate(email='taken@test.com')

        with self.assertRaises(ConflictError):
            services.set_candidate_status(candidate, 'Hired')
        candidate.refresh_from_db()
        self.assertEqual(candidate.status, 'Applied')

    def test_hired_candidate_cannot_move_again(self):
        candidate = TestDataFactory.create_candidate()
        services.set_candidate_status(candidate, 'Hired')
        with self.assertRaises(ConflictError):
            services.set_candidate_status(candidate, 'Rejected')

    def test_other_statuses_do_not_create_employees(self):
        candidate = TestDataFactory.create_candidate()
        services.set_candidate_status(candidate, 'Interviewing')
        candidate.refresh_from_db()
        self.assertEqual(candidate.status, 'Interviewing')
        self.assertIsNone(candidate.employee)
        self.assertFalse(Employee.objects.exists())


class LeaveAndAttendanceServiceTests(TestCase):

    def setUp(self):
        self.employee = TestDataFactory.create_employee()

    def test_leave_is_actioned_once(self):
        leave = LeaveRequest.objects.create(
            employee=self.employee, leave_type='Annual',
            start_date=date(2024, 5, 1), end_date=date(2024, 5, 3),
        )
        services.action_leave_request(leave, 'Approved')
        leave.refresh_from_db()
        self.assertEqual(leave.status, 'Approved')

        with self.assertRaises(ConflictError):
            services.action_leave_request(leave, 'Rejected')

    def test_one_check_in_per_day(self):
        services.check_in(self.employee)
        with self.assertRaises(ConflictError):
            services.check_in(self.employee)

    def test_check_out_requires_check_in(self):
        with self.assertRaises(DomainError):
            services.check_out(self.employee)
        services.check_in(self.employee)
        record = services.check_out(self.employee)
        self.assertIsNotNone(record.check_out)


class HRAPITests(TestCase):
    """Test HR endpoints"""

    def setUp(self):
        self.user = TestDataFactory.create_user()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.user)
        self.account = TestDataFactory.create_account()

    def test_create_employee(self):
        response = self.client.post('/api/v1/employees/', {
            'name': 'Eve Welder',
            'email': 'eve@test.com',
            'role': 'Welder',
            'department': 'Fabrication',
            'status': 'Active',
            'salary': '2800.00',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['name'], 'Eve Welder')

    def test_duplicate_employee_email_is_rejected(self):
        TestDataFactory.create_employee(email='dup@test.com')
        response = self.client.post('/api/v1/employees/', {
            'name': 'Second Person',
            'email': 'dup@test.com',
            'role': 'Labourer',
            'department': 'Site',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('email', response.data)

    def test_employee_on_project_cannot_be_deleted(self):
        employee = TestDataFactory.create_employee()
        project = TestDataFactory.create_project()
        project.team.add(employee)
        response = self.client.delete(f'/api/v1/employees/{employee.id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(Employee.objects.filter(pk=employee.pk).exists())

    def test_payroll_run_endpoint(self):
        TestDataFactory.create_employee(salary=Decimal('1200.00'))
        payload = {'account': self.account.id, 'payroll_date': '2024-06-30'}

        response = self.client.post('/api/v1/payroll/run/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['period'], '2024-06')

        response = self.client.post('/api/v1/payroll/run/', payload, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['error'], 'Payroll has already been run for June 2024.')

    def test_payroll_with_nobody_to_pay(self):
        response = self.client.post(
            '/api/v1/payroll/run/', {'account': self.account.id, 'payroll_date': '2024-06-30'}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'No active employees with salaries found to run payroll for.')

    def test_payroll_with_unknown_account(self):
        response = self.client.post('/api/v1/payroll/run/', {'account': 9999, 'payroll_date': '2024-06-30'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('account', response.data)

    def test_leave_end_before_start_is_rejected(self):
        employee = TestDataFactory.create_employee()
        response = self.client.post('/api/v1/leave-requests/', {
            'employee': employee.id,
            'leave_type': 'Sick',
            'start_date': '2024-05-10',
            'end_date': '2024-05-08',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_candidate_hire_via_api(self):
        job = TestDataFactory.create_job()
        response = self.client.post(f'/api/v1/jobs/{job.id}/candidates/', {
            'name': 'Frank Builder',
            'email': 'frank@test.com',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        candidate_id = response.data['id']

        response = self.client.post(f'/api/v1/candidates/{candidate_id}/status/', {'status': 'Hired'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Candidate.objects.get(pk=candidate_id).employee.email, 'frank@test.com')

    def test_job_with_candidates_cannot_be_deleted(self):
        candidate = TestDataFactory.create_candidate()
        response = self.client.delete(f'/api/v1/jobs/{candidate.job_id}/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_offboarding_marks_employee_inactive(self):
        employee = TestDataFactory.create_employee()
        response = self.client.post(f'/api/v1/employees/{employee.id}/offboard/', {
            'exit_date': '2024-07-31',
            'reason': 'Resignation',
            'assets_returned': True,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        employee.refresh_from_db()
        self.assertEqual(employee.status, 'Inactive')

        response = self.client.post(f'/api/v1/employees/{employee.id}/offboard/', {
            'exit_date': '2024-07-31',
            'reason': 'Resignation',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_check_in_twice_via_api(self):
        employee = TestDataFactory.create_employee()
        response = self.client.post('/api/v1/attendance/check-in/', {'employee': employee.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        response = self.client.post('/api/v1/attendance/check-in/', {'employee': employee.id}, format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
