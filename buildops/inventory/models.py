from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models
from buildops.core.models import User

LOW_STOCK_THRESHOLD = 10

IN_STOCK = 'In Stock'
LOW_STOCK = 'Low Stock'
OUT_OF_STOCK = 'Out of Stock'


def derive_stock_status(quantity):
    """Map a quantity to its stock status label"""
    if quantity > LOW_STOCK_THRESHOLD:
        return IN_STOCK
    if quantity >= 1:
        return LOW_STOCK
    return OUT_OF_STOCK


class Warehouse(models.Model):
    name = models.CharField(max_length=200, unique=True)
    location = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'warehouses'
        ordering = ['name']


class InventoryCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name

    class Meta:
        db_table = 'inventory_categories'
        ordering = ['name']
        verbose_name_plural = 'inventory categories'


class InventoryItem(models.Model):
    """Stocked material; status always follows quantity"""
    STATUS_CHOICES = [
        (IN_STOCK, IN_STOCK),
        (LOW_STOCK, LOW_STOCK),
        (OUT_OF_STOCK, OUT_OF_STOCK),
    ]

    name = models.CharField(max_length=200, validators=[MinLengthValidator(2)])
    category = models.ForeignKey(InventoryCategory, on_delete=models.SET_NULL, null=True, blank=True, related_name='items')
    warehouse = models.ForeignKey(Warehouse, on_delete=models.SET_NULL, null=True, blank=True, related_name='items')
    quantity = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=OUT_OF_STOCK, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.status = derive_stock_status(self.quantity)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'quantity' in update_fields and 'status' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['status']
        super().save(*args, **kwargs)

    class Meta:
        db_table = 'inventory_items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['status'], name='idx_inventory_status'),
        ]
        constraints = [
            models.CheckConstraint(condition=models.Q(quantity__gte=0), name='inventory_quantity_non_negative'),
        ]


class MaterialRequest(models.Model):
    """Request from a project site to draw material from inventory"""
    STATUS_CHOICES = [
        ('Pending', 'Pending'),
        ('Approved', 'Approved'),
        ('Rejected', 'Rejected'),
    ]

    project = models.ForeignKey('projects.Project', on_delete=models.CASCADE, related_name='material_requests')
    item = models.ForeignKey(InventoryItem, on_delete=models.SET_NULL, null=True, blank=True, related_name='material_requests')
    item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='Pending')
    requested_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='material_requests')
    requested_at = models.DateTimeField(auto_now_add=True)
    actioned_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='actioned_material_requests')
    actioned_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        return f"{self.quantity}x {self.item_name} ({self.status})"

    class Meta:
        db_table = 'material_requests'
        ordering = ['-requested_at', '-id']
        indexes = [
            models.Index(fields=['status'], name='idx_material_request_status'),
        ]
