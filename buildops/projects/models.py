from django.core.validators import MinLengthValidator, MaxLengthValidator, MinValueValidator, MaxValueValidator
from django.db import models
from decimal import Decimal
from buildops.core.models import User


class Project(models.Model):
    """Construction projects"""
    STATUS_CHOICES = [
        ('Planning', 'Planning'),
        ('In Progress', 'In Progress'),
        ('Completed', 'Completed'),
        ('On Hold', 'On Hold'),
    ]

    name = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    description = models.TextField(blank=True)
    location = models.CharField(max_length=255, blank=True)
    budget = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    start_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Planning')
    progress = models.PositiveSmallIntegerField(default=0, validators=[MaxValueValidator(100)])
    client = models.ForeignKey('parties.Client', on_delete=models.SET_NULL, null=True, blank=True, related_name='projects')
    team = models.ManyToManyField('hr.Employee', blank=True, related_name='projects')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'projects'
        ordering = ['-created_at']


class ProjectTask(models.Model):
    STATUS_CHOICES = [
        ('To Do', 'To Do'),
        ('In Progress', 'In Progress'),
        ('Done', 'Done'),
    ]

    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='tasks')
    name = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    description = models.TextField(blank=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='To Do')
    due_date = models.DateField(null=True, blank=True)
    assignee = models.ForeignKey('hr.Employee', on_delete=models.SET_NULL, null=True, blank=True, related_name='tasks')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'project_tasks'
        ordering = ['created_at', 'id']


class DailyLog(models.Model):
    """Site diary entry for a project"""
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name='daily_logs')
    notes = models.TextField(validators=[MinLengthValidator(10), MaxLengthValidator(2000)])
    author = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='daily_logs')
    author_email = models.EmailField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.project.name} - {self.created_at:%Y-%m-%d}"

    class Meta:
        db_table = 'daily_logs'
        ordering = ['-created_at', '-id']
