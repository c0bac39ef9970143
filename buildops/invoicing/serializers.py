from rest_framework import serializers
from buildops.financials.models import Account
from .models import Invoice, InvoiceLineItem


class InvoiceLineItemSerializer(serializers.ModelSerializer):
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)

    class Meta:
        model = InvoiceLineItem
        fields = ['id', 'description', 'quantity', 'unit_price', 'amount']

    def validate_quantity(self, value):
        if value <= 0:
            raise serializers.ValidationError('Quantity must be greater than 0.')
        return value

    def validate_unit_price(self, value):
        if value < 0:
            raise serializers.ValidationError('Unit price must be a non-negative number.')
        return value


class InvoiceSerializer(serializers.ModelSerializer):
    line_items = InvoiceLineItemSerializer(many=True)
    client_name = serializers.CharField(source='client.name', read_only=True)
    project_name = serializers.CharField(source='project.name', read_only=True, default=None)

    class Meta:
        model = Invoice
        fields = [
            'id', 'invoice_number', 'client', 'client_name', 'project', 'project_name',
            'issue_date', 'due_date', 'line_items', 'total_amount', 'status',
            'paid_at', 'payment_transaction', 'created_at', 'updated_at'
        ]
        read_only_fields = ['invoice_number', 'total_amount', 'status', 'paid_at', 'payment_transaction']

    def validate_line_items(self, value):
        if not value:
            raise serializers.ValidationError('At least one line item is required.')
        return value

    def validate(self, data):
        issue_date = data.get('issue_date', getattr(self.instance, 'issue_date', None))
        due_date = data.get('due_date', getattr(self.instance, 'due_date', None))
        if issue_date and due_date and due_date < issue_date:
            raise serializers.ValidationError({'due_date': 'Due date cannot be before the issue date.'})
        return data


class InvoiceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['Sent', 'Void'])


class MarkPaidSerializer(serializers.Serializer):
    account = serializers.PrimaryKeyRelatedField(
        queryset=Account.objects.all(),
        error_messages={'does_not_exist': 'Account not found.', 'required': 'An account is required.'},
    )
