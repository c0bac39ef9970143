from rest_framework import serializers
from .models import User, Setting, CompanyProfile, ActivityLog


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'phone', 'role', 'is_active', 'is_staff', 'is_superuser', 'created_at', 'updated_at']
        read_only_fields = ['is_staff', 'is_superuser', 'created_at', 'updated_at']


class UserRoleSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ['role']


class SettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = Setting
        fields = ['id', 'key', 'value', 'description', 'updated_at']


class CompanyProfileSerializer(serializers.ModelSerializer):
    name = serializers.CharField(min_length=2, max_length=200)

    class Meta:
        model = CompanyProfile
        fields = ['name', 'address', 'phone', 'email', 'updated_at']
        read_only_fields = ['updated_at']


class ActivityLogSerializer(serializers.ModelSerializer):
    user = serializers.CharField(source='user.username', read_only=True, default=None)

    class Meta:
        model = ActivityLog
        fields = ['id', 'type', 'message', 'link', 'user', 'model_name', 'object_id', 'changes', 'ip_address', 'created_at']
