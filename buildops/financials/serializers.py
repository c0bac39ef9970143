from rest_framework import serializers
from .models import Account, Transaction


class AccountSerializer(serializers.ModelSerializer):
    current_balance = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = Account
        fields = ['id', 'name', 'bank_name', 'account_number', 'initial_balance', 'current_balance', 'created_at', 'updated_at']


class TransactionSerializer(serializers.ModelSerializer):
    account_name = serializers.CharField(source='account.name', read_only=True)
    project_name = serializers.CharField(source='project.name', read_only=True, default=None)
    created_by_username = serializers.CharField(source='created_by.username', read_only=True, default=None)

    class Meta:
        model = Transaction
        fields = [
            'id', 'description', 'amount', 'type', 'date', 'account', 'account_name',
            'project', 'project_name', 'client', 'supplier', 'purchase_order',
            'created_by', 'created_by_username', 'created_at'
        ]
        read_only_fields = ['purchase_order', 'created_by']
