from django.contrib import admin
from .models import Warehouse, InventoryCategory, InventoryItem, MaterialRequest


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'created_at']
    search_fields = ['name', 'location']


@admin.register(InventoryCategory)
class InventoryCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'created_at']
    search_fields = ['name']


@admin.register(InventoryItem)
class InventoryItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'warehouse', 'quantity', 'status', 'updated_at']
    list_filter = ['status', 'category', 'warehouse']
    search_fields = ['name']
    readonly_fields = ['status', 'created_at', 'updated_at']
    ordering = ['name']


@admin.register(MaterialRequest)
class MaterialRequestAdmin(admin.ModelAdmin):
    list_display = ['id', 'project', 'item_name', 'quantity', 'status', 'requested_by', 'requested_at', 'actioned_by']
    list_filter = ['status', 'requested_at']
    search_fields = ['item_name', 'project__name']
    readonly_fields = ['requested_at', 'actioned_at']
    ordering = ['-requested_at']
