from django.contrib import admin
from .models import Account, Transaction


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = ['name', 'bank_name', 'account_number', 'initial_balance', 'created_at']
    search_fields = ['name', 'bank_name', 'account_number']
    ordering = ['name']


@admin.register(Transaction)
class TransactionAdmin(admin.ModelAdmin):
    list_display = ['id', 'date', 'type', 'amount', 'description', 'account', 'project', 'created_by']
    list_filter = ['type', 'account', 'date']
    search_fields = ['description']
    readonly_fields = ['created_at']
    ordering = ['-date']
    date_hierarchy = 'date'
