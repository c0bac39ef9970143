from django.contrib import admin
from .models import PurchaseOrder


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['id', 'item_name', 'quantity', 'unit_cost', 'total_cost', 'supplier', 'project', 'status', 'created_at']
    list_filter = ['status', 'supplier', 'created_at']
    search_fields = ['item_name', 'supplier__name', 'project__name']
    ordering = ['-created_at']
    readonly_fields = ['total_cost', 'created_at', 'updated_at']
