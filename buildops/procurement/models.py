from django.core.validators import MinValueValidator
from django.db import models
from decimal import Decimal
from buildops.core.models import User
from buildops.inventory.models import InventoryItem
from buildops.parties.models import Supplier


class PurchaseOrder(models.Model):
    """Purchase order for one inventory item from a supplier"""
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Approved', 'Approved'),
        ('Rejected', 'Rejected'),
        ('Ordered', 'Ordered'),
        ('Received', 'Received'),
    ]

    # status -> statuses it may move to
    ALLOWED_TRANSITIONS = {
        'Pending': ('Approved', 'Rejected'),
        'Approved': ('Ordered',),
        'Ordered': ('Received',),
    }

    item = models.ForeignKey(InventoryItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders')
    item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_cost = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.00'))])
    total_cost = models.DecimalField(max_digits=14, decimal_places=2, default=Decimal('0.00'), editable=False)
    supplier = models.ForeignKey(Supplier, on_delete=models.PROTECT, related_name='purchase_orders')
    project = models.ForeignKey('projects.Project', on_delete=models.PROTECT, related_name='purchase_orders')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    created_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='purchase_orders')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"PO-{self.id} {self.quantity}x {self.item_name}"

    def can_transition_to(self, new_status):
        return new_status in self.ALLOWED_TRANSITIONS.get(self.status, ())

    def save(self, *args, **kwargs):
        self.total_cost = Decimal(self.quantity or 0) * (self.unit_cost or Decimal('0.00'))
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_po_status'),
            models.Index(fields=['supplier', 'status'], name='idx_po_supplier_status'),
        ]
