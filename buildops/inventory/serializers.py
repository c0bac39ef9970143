from rest_framework import serializers
from .models import Warehouse, InventoryCategory, InventoryItem, MaterialRequest


class WarehouseSerializer(serializers.ModelSerializer):
    class Meta:
        model = Warehouse
        fields = ['id', 'name', 'location', 'created_at']


class InventoryCategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = InventoryCategory
        fields = ['id', 'name', 'created_at']


class InventoryItemSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    warehouse_name = serializers.CharField(source='warehouse.name', read_only=True, default=None)
    quantity = serializers.IntegerField(min_value=0, error_messages={'min_value': 'Stock quantity cannot be negative.'})

    class Meta:
        model = InventoryItem
        fields = [
            'id', 'name', 'category', 'category_name', 'warehouse', 'warehouse_name',
            'quantity', 'status', 'created_at', 'updated_at'
        ]
        read_only_fields = ['status']


class InventoryItemUpdateSerializer(InventoryItemSerializer):
    """Quantity changes go through stock adjustments"""
    quantity = serializers.IntegerField(read_only=True)


class StockAdjustmentSerializer(serializers.Serializer):
    quantity = serializers.IntegerField()

    def validate_quantity(self, value):
        if value == 0:
            raise serializers.ValidationError('Adjustment cannot be zero.')
        return value


class MaterialRequestSerializer(serializers.ModelSerializer):
    project_name = serializers.CharField(source='project.name', read_only=True)
    requested_by_username = serializers.CharField(source='requested_by.username', read_only=True, default=None)
    actioned_by_username = serializers.CharField(source='actioned_by.username', read_only=True, default=None)
    item = serializers.PrimaryKeyRelatedField(
        queryset=InventoryItem.objects.all(),
        error_messages={'does_not_exist': 'Inventory item not found.'},
    )

    class Meta:
        model = MaterialRequest
        fields = [
            'id', 'project', 'project_name', 'item', 'item_name', 'quantity', 'status',
            'requested_by', 'requested_by_username', 'requested_at',
            'actioned_by', 'actioned_by_username', 'actioned_at'
        ]
        read_only_fields = ['item_name', 'status', 'requested_by', 'requested_at', 'actioned_by', 'actioned_at']
