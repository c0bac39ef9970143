from django.contrib import admin
from .models import Client, ClientInteraction, ClientContract, Supplier, SupplierContract


class ClientInteractionInline(admin.TabularInline):
    model = ClientInteraction
    extra = 0


class ClientContractInline(admin.TabularInline):
    model = ClientContract
    extra = 0


@admin.register(Client)
class ClientAdmin(admin.ModelAdmin):
    list_display = ['name', 'company', 'email', 'phone', 'status', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['name', 'company', 'email', 'phone']
    ordering = ['name']
    inlines = [ClientInteractionInline, ClientContractInline]


class SupplierContractInline(admin.TabularInline):
    model = SupplierContract
    extra = 0


@admin.register(Supplier)
class SupplierAdmin(admin.ModelAdmin):
    list_display = ['name', 'contact_person', 'phone', 'email', 'status', 'rating', 'created_at']
    list_filter = ['status', 'rating', 'created_at']
    search_fields = ['name', 'contact_person', 'email']
    ordering = ['name']
    inlines = [SupplierContractInline]
