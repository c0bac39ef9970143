from rest_framework import serializers
from .models import Client, ClientInteraction, ClientContract, Supplier, SupplierContract


class ClientSerializer(serializers.ModelSerializer):
    class Meta:
        model = Client
        fields = ['id', 'name', 'company', 'email', 'phone', 'status', 'created_at', 'updated_at']


class ClientInteractionSerializer(serializers.ModelSerializer):
    class Meta:
        model = ClientInteraction
        fields = ['id', 'client', 'type', 'notes', 'date', 'created_at']
        read_only_fields = ['client']


class ClientContractSerializer(serializers.ModelSerializer):
    class Meta:
        model = ClientContract
        fields = ['id', 'client', 'title', 'effective_date', 'value', 'file_url', 'created_at']
        read_only_fields = ['client']


class SupplierSerializer(serializers.ModelSerializer):
    class Meta:
        model = Supplier
        fields = [
            'id', 'name', 'contact_person', 'email', 'phone', 'status',
            'rating', 'evaluation_notes', 'created_at', 'updated_at'
        ]
        read_only_fields = ['rating', 'evaluation_notes']


class SupplierEvaluationSerializer(serializers.ModelSerializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)

    class Meta:
        model = Supplier
        fields = ['rating', 'evaluation_notes']


class SupplierContractSerializer(serializers.ModelSerializer):
    class Meta:
        model = SupplierContract
        fields = ['id', 'supplier', 'title', 'effective_date', 'file_url', 'created_at']
        read_only_fields = ['supplier']
