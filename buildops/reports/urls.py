from django.urls import path
from . import views

urlpatterns = [
    path('reports/dashboard-kpis/', views.dashboard_kpis, name='dashboard-kpis'),
    path('reports/inventory-status/', views.inventory_status_report, name='inventory-status-report'),
    path('reports/project-status/', views.project_status_report, name='project-status-report'),
    path('approvals/', views.approvals_queue, name='approvals-queue'),
]
