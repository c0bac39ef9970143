from django.urls import path
from .views import asset_list_create, asset_detail, asset_maintenance_list_create

urlpatterns = [
    path('assets/', asset_list_create, name='asset-list-create'),
    path('assets/<int:pk>/', asset_detail, name='asset-detail'),
    path('assets/<int:pk>/maintenance/', asset_maintenance_list_create, name='asset-maintenance-list-create'),
]
