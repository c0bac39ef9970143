from django.urls import path
from .views import (
    client_list_create, client_detail, client_interaction_list_create,
    client_contract_list_create, client_contract_delete, client_ai_summary,
    supplier_list_create, supplier_detail, supplier_evaluate,
    supplier_contract_list_create, supplier_contract_delete, supplier_ai_summary
)

urlpatterns = [
    # Client endpoints
    path('clients/', client_list_create, name='client-list-create'),
    path('clients/<int:pk>/', client_detail, name='client-detail'),
    path('clients/<int:pk>/interactions/', client_interaction_list_create, name='client-interactions'),
    path('clients/<int:pk>/contracts/', client_contract_list_create, name='client-contracts'),
    path('clients/<int:pk>/contracts/<int:contract_id>/', client_contract_delete, name='client-contract-delete'),
    path('clients/<int:pk>/ai-summary/', client_ai_summary, name='client-ai-summary'),

    # Supplier endpoints
    path('suppliers/', supplier_list_create, name='supplier-list-create'),
    path('suppliers/<int:pk>/', supplier_detail, name='supplier-detail'),
    path('suppliers/<int:pk>/evaluate/', supplier_evaluate, name='supplier-evaluate'),
    path('suppliers/<int:pk>/contracts/', supplier_contract_list_create, name='supplier-contracts'),
    path('suppliers/<int:pk>/contracts/<int:contract_id>/', supplier_contract_delete, name='supplier-contract-delete'),
    path('suppliers/<int:pk>/ai-summary/', supplier_ai_summary, name='supplier-ai-summary'),
]
