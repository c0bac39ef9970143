from rest_framework import serializers
from .models import Asset, MaintenanceLog


class AssetSerializer(serializers.ModelSerializer):
    current_project_name = serializers.CharField(source='current_project.name', read_only=True, default=None)

    class Meta:
        model = Asset
        fields = [
            'id', 'name', 'category', 'status', 'purchase_date', 'purchase_cost',
            'current_project', 'current_project_name', 'next_maintenance_date',
            'created_at', 'updated_at'
        ]


class MaintenanceLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = MaintenanceLog
        fields = ['id', 'asset', 'date', 'type', 'description', 'cost', 'completed_by', 'created_at']
        read_only_fields = ['asset']
