from django.contrib import admin
from .models import Asset, MaintenanceLog


class MaintenanceLogInline(admin.TabularInline):
    model = MaintenanceLog
    extra = 0


@admin.register(Asset)
class AssetAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'status', 'current_project', 'purchase_cost', 'next_maintenance_date']
    list_filter = ['status', 'category']
    search_fields = ['name', 'category']
    inlines = [MaintenanceLogInline]
