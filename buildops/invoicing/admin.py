from django.contrib import admin
from .models import Invoice, InvoiceLineItem


class InvoiceLineItemInline(admin.TabularInline):
    model = InvoiceLineItem
    extra = 1


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['invoice_number', 'client', 'project', 'issue_date', 'due_date', 'total_amount', 'status']
    list_filter = ['status', 'issue_date']
    search_fields = ['invoice_number', 'client__name']
    readonly_fields = ['invoice_number', 'total_amount', 'paid_at', 'payment_transaction', 'created_at', 'updated_at']
    inlines = [InvoiceLineItemInline]
    ordering = ['-issue_date']
