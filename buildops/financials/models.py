from django.core.validators import MinValueValidator
from django.db import models
from django.db.models import Sum
from decimal import Decimal
from buildops.core.models import User


class Account(models.Model):
    """Bank or cash account that transactions post to"""
    name = models.CharField(max_length=200)
    bank_name = models.CharField(max_length=200, blank=True)
    account_number = models.CharField(max_length=50, blank=True)
    initial_balance = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'))
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    @property
    def current_balance(self):
        totals = self.transactions.values('type').annotate(total=Sum('amount'))
        by_type = {row['type']: row['total'] or Decimal('0.00') for row in totals}
        return self.initial_balance + by_type.get('Income', Decimal('0.00')) - by_type.get('Expense', Decimal('0.00'))

    class Meta:
        db_table = 'accounts'
        ordering = ['name']


class Transaction(models.Model):
    """Income or expense posted to an account"""
    TYPE_CHOICES = [
        ('Income', 'Income'),
        ('Expense', 'Expense'),
    ]

    description = models.CharField(max_length=500)
    amount = models.DecimalField(max_digits=14, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    type = models.CharField(max_length=10, choices=TYPE_CHOICES)
    date = models.DateField()
    account = models.ForeignKey(Account, on_delete=models.PROTECT, related_name='transactions')
    project = models.ForeignKey('projects.Project', on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    client = models.ForeignKey('parties.Client', on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    supplier = models.ForeignKey('parties.Supplier', on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    purchase_order = models.ForeignKey('procurement.PurchaseOrder', on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='transactions')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"{self.type} - {self.amount} - {self.description}"

    class Meta:
        db_table = 'transactions'
        ordering = ['-date', '-id']
        indexes = [
            models.Index(fields=['type', 'date'], name='idx_transaction_type_date'),
        ]
