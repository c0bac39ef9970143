from django.urls import path
from .views import (
    account_list_create, account_detail,
    transaction_list_create, transaction_detail, financial_summary
)

urlpatterns = [
    path('accounts/', account_list_create, name='account-list-create'),
    path('accounts/<int:pk>/', account_detail, name='account-detail'),
    path('transactions/', transaction_list_create, name='transaction-list-create'),
    path('transactions/<int:pk>/', transaction_detail, name='transaction-detail'),
    path('financials/summary/', financial_summary, name='financial-summary'),
]
