from django.urls import path
from .views import (
    item_list_create, item_detail, item_adjust_stock, item_low_stock, item_out_of_stock,
    material_request_list_create, material_request_detail, material_request_approve, material_request_reject,
    warehouse_list_create, warehouse_detail, category_list_create, category_detail
)

urlpatterns = [
    # Inventory item endpoints
    path('inventory/items/', item_list_create, name='inventory-item-list-create'),
    path('inventory/items/low-stock/', item_low_stock, name='inventory-item-low-stock'),
    path('inventory/items/out-of-stock/', item_out_of_stock, name='inventory-item-out-of-stock'),
    path('inventory/items/<int:pk>/', item_detail, name='inventory-item-detail'),
    path('inventory/items/<int:pk>/adjust/', item_adjust_stock, name='inventory-item-adjust'),

    # Material request endpoints
    path('material-requests/', material_request_list_create, name='material-request-list-create'),
    path('material-requests/<int:pk>/', material_request_detail, name='material-request-detail'),
    path('material-requests/<int:pk>/approve/', material_request_approve, name='material-request-approve'),
    path('material-requests/<int:pk>/reject/', material_request_reject, name='material-request-reject'),

    # Settings lists
    path('inventory/warehouses/', warehouse_list_create, name='warehouse-list-create'),
    path('inventory/warehouses/<int:pk>/', warehouse_detail, name='warehouse-detail'),
    path('inventory/categories/', category_list_create, name='inventory-category-list-create'),
    path('inventory/categories/<int:pk>/', category_detail, name='inventory-category-detail'),
]
