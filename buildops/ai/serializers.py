from rest_framework import serializers


class ISOComplianceRequestSerializer(serializers.Serializer):
    erpDescription = serializers.CharField(
        min_length=50,
        trim_whitespace=True,
        error_messages={'min_length': 'Please provide a more detailed description (at least 50 characters).'},
    )
