from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import F, Q
from decimal import Decimal
from buildops.core.models import User
from buildops.parties.models import Client


class Invoice(models.Model):
    """Client invoice; the total is the sum of its line items"""
    STATUS_CHOICES = [
        ('Draft', 'Draft'),
        ('Sent', 'Sent'),
        ('Paid', 'Paid'),
        ('Void', 'Void'),
    ]

    invoice_number = models.CharField(max_length=20, unique=True)
    client = models.ForeignKey(Client, on_delete=models.PROTECT, related_name='invoices')
    project = models.ForeignKey('projects.Project', on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices')
    issue_date = models.DateField()
    due_date = models.DateField()
    total_amount = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default='Draft')
    paid_at = models.DateTimeField(null=True, blank=True)
    payment_transaction = models.OneToOneField(
        'financials.Transaction', on_delete=models.SET_NULL, null=True, blank=True, related_name='invoice'
    )
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='invoices')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.invoice_number

    def recalculate_total(self):
        self.total_amount = sum((line.amount for line in self.line_items.all()), Decimal('0.00'))
        return self.total_amount

    class Meta:
        db_table = 'invoices'
        ordering = ['-issue_date', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_invoice_status'),
            models.Index(fields=['client', 'status'], name='idx_invoice_client_status'),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(due_date__gte=F('issue_date')), name='invoice_due_after_issue'),
        ]


class InvoiceLineItem(models.Model):
    invoice = models.ForeignKey(Invoice, on_delete=models.CASCADE, related_name='line_items')
    description = models.CharField(max_length=500)
    quantity = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    unit_price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])

    @property
    def amount(self):
        return (self.quantity * self.unit_price).quantize(Decimal('0.01'))

    def __str__(self):
        return f"{self.description} ({self.quantity} x {self.unit_price})"

    class Meta:
        db_table = 'invoice_line_items'
        ordering = ['id']
