"""
URL configuration for the BuildOps ERP backend.

Every business module mounts its endpoints under ``/api/v1/``.
"""
from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "BuildOps ERP Admin Panel"
admin.site.site_title = "BuildOps ERP Admin Portal"
admin.site.index_title = "Welcome to BuildOps ERP"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('api/v1/', include('buildops.core.urls')),
    path('api/v1/', include('buildops.parties.urls')),
    path('api/v1/', include('buildops.hr.urls')),
    path('api/v1/', include('buildops.projects.urls')),
    path('api/v1/', include('buildops.inventory.urls')),
    path('api/v1/', include('buildops.procurement.urls')),
    path('api/v1/', include('buildops.financials.urls')),
    path('api/v1/', include('buildops.invoicing.urls')),
    path('api/v1/', include('buildops.assets.urls')),
    path('api/v1/', include('buildops.ai.urls')),
    path('api/v1/', include('buildops.reports.urls')),
]
