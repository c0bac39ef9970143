from django.core.validators import MinLengthValidator, MinValueValidator, MaxValueValidator, RegexValidator
from django.db import models
from decimal import Decimal
from buildops.core.models import User


class Employee(models.Model):
    """Employees"""
    STATUS_CHOICES = [
        ('Active', 'Active'),
        ('On Leave', 'On Leave'),
        ('Inactive', 'Inactive'),
    ]

    name = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    email = models.EmailField(unique=True)
    role = models.CharField(max_length=100)
    department = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Active')
    salary = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True,
                                 validators=[MinValueValidator(Decimal('0.00'))])
    photo_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'employees'
        ordering = ['name']


class PayrollRun(models.Model):
    """One payroll run per calendar month"""
    period = models.CharField(max_length=7, unique=True,
                              validators=[RegexValidator(r'^\d{4}-(0[1-9]|1[0-2])$', 'Period must be YYYY-MM.')])
    account = models.ForeignKey('financials.Account', on_delete=models.PROTECT, related_name='payroll_runs')
    payroll_date = models.DateField()
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    employee_count = models.PositiveIntegerField(default=0)
    run_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='payroll_runs')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Payroll {self.period}"

    class Meta:
        db_table = 'payroll_runs'
        ordering = ['-period']


class LeaveRequest(models.Model):
    TYPE_CHOICES = [
        ('Annual', 'Annual'),
        ('Sick', 'Sick'),
        ('Unpaid', 'Unpaid'),
        ('Other', 'Other'),
    ]
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Approved', 'Approved'),
        ('Rejected', 'Rejected'),
    ]

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='leave_requests')
    leave_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    actioned_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='actioned_leave_requests')
    actioned_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.employee.name} - {self.leave_type} ({self.start_date} to {self.end_date})"

    class Meta:
        db_table = 'leave_requests'
        ordering = ['-created_at']


class Attendance(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='attendance')
    date = models.DateField()
    check_in = models.DateTimeField()
    check_out = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.employee.name} - {self.date}"

    class Meta:
        db_table = 'attendance'
        ordering = ['-date', '-check_in']
        constraints = [
            models.UniqueConstraint(fields=['employee', 'date'], name='unique_attendance_per_day'),
        ]


class JobPosting(models.Model):
    STATUS_CHOICES = [
        ('Open', 'Open'),
        ('Closed', 'Closed'),
    ]

    title = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    department = models.CharField(max_length=100)
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Open')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.title

    class Meta:
        db_table = 'job_postings'
        ordering = ['-created_at']


class Candidate(models.Model):
    STATUS_CHOICES = [
        ('Applied', 'Applied'),
        ('Interviewing', 'Interviewing'),
        ('Offered', 'Offered'),
        ('Hired', 'Hired'),
        ('Rejected', 'Rejected'),
    ]

    job = models.ForeignKey(JobPosting, on_delete=models.PROTECT, related_name='candidates')
    name = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    email = models.EmailField()
    phone = models.CharField(max_length=30, blank=True)
    resume_url = models.URLField(max_length=500, blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Applied')
    employee = models.ForeignKey(Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='candidacies')
    applied_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.name} ({self.job.title})"

    class Meta:
        db_table = 'candidates'
        ordering = ['-applied_at']


class PerformanceReview(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='reviews')
    reviewer = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='performance_reviews')
    review_date = models.DateField()
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    goals = models.TextField(blank=True)
    feedback = models.TextField(validators=[MinLengthValidator(10)])
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.employee.name} - {self.review_date} ({self.rating}/5)"

    class Meta:
        db_table = 'performance_reviews'
        ordering = ['-review_date']


class TrainingRecord(models.Model):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='trainings')
    course_name = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    completion_date = models.DateField()
    certificate_url = models.URLField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.employee.name} - {self.course_name}"

    class Meta:
        db_table = 'training_records'
        ordering = ['-completion_date']


class Offboarding(models.Model):
    employee = models.OneToOneField(Employee, on_delete=models.CASCADE, related_name='offboarding')
    exit_date = models.DateField()
    reason = models.CharField(max_length=200)
    feedback = models.TextField(blank=True)
    assets_returned = models.BooleanField(default=False)
    processed_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='offboardings')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.employee.name} - exit {self.exit_date}"

    class Meta:
        db_table = 'offboardings'
        ordering = ['-exit_date']
