from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models
from decimal import Decimal


class Asset(models.Model):
    """Plant, vehicles and tools owned by the company"""
    STATUS_CHOICES = [
        ('Available', 'Available'),
        ('In Use', 'In Use'),
        ('Under Maintenance', 'Under Maintenance'),
        ('Decommissioned', 'Decommissioned'),
    ]

    name = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    category = models.CharField(max_length=100)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Available')
    purchase_date = models.DateField()
    purchase_cost = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    current_project = models.ForeignKey(
        'projects.Project', on_delete=models.SET_NULL, null=True, blank=True, related_name='assets'
    )
    next_maintenance_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'assets'
        ordering = ['name']
        indexes = [
            models.Index(fields=['status'], name='idx_asset_status'),
        ]


class MaintenanceLog(models.Model):
    asset = models.ForeignKey(Asset, on_delete=models.CASCADE, related_name='maintenance_logs')
    date = models.DateField()
    type = models.CharField(max_length=100)
    description = models.TextField(validators=[MinLengthValidator(5)])
    cost = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(Decimal('0.00'))])
    completed_by = models.CharField(max_length=200, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.asset.name} - {self.type} on {self.date}"

    class Meta:
        db_table = 'asset_maintenance_logs'
        ordering = ['-date', '-id']
