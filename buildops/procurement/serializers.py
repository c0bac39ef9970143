from rest_framework import serializers
from buildops.inventory.models import InventoryItem
from .models import PurchaseOrder


class PurchaseOrderSerializer(serializers.ModelSerializer):
    supplier_name = serializers.CharField(source='supplier.name', read_only=True)
    project_name = serializers.CharField(source='project.name', read_only=True)
    item = serializers.PrimaryKeyRelatedField(
        queryset=InventoryItem.objects.all(),
        error_messages={'does_not_exist': 'Selected inventory item not found.'},
    )

    class Meta:
        model = PurchaseOrder
        fields = [
            'id', 'item', 'item_name', 'quantity', 'unit_cost', 'total_cost',
            'supplier', 'supplier_name', 'project', 'project_name', 'status',
            'created_by', 'created_at', 'updated_at'
        ]
        read_only_fields = ['item_name', 'total_cost', 'status', 'created_by']

    def validate_quantity(self, value):
        if value < 1:
            raise serializers.ValidationError('Quantity must be at least 1.')
        return value

    def _snapshot_item_name(self, validated_data):
        item = validated_data.get('item')
        if item is not None:
            validated_data['item_name'] = item.name
        return validated_data

    def create(self, validated_data):
        return super().create(self._snapshot_item_name(validated_data))

    def update(self, instance, validated_data):
        return super().update(instance, self._snapshot_item_name(validated_data))


class PurchaseOrderStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['Approved', 'Rejected', 'Ordered', 'Received'])
