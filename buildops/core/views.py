from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer, TokenRefreshSerializer
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError, AuthenticationFailed
from django.contrib.auth import get_user_model
from django.core.exceptions import ObjectDoesNotExist
from django.shortcuts import get_object_or_404
from django.utils.dateparse import parse_date
from .models import Setting, CompanyProfile, ActivityLog
from .search import global_search as run_global_search
from .serializers import (
    UserSerializer, UserRoleSerializer, SettingSerializer,
    CompanyProfileSerializer, ActivityLogSerializer
)

User = get_user_model()


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    def validate(self, attrs):
        data = super().validate(attrs)
        if not self.user.is_active:
            raise AuthenticationFailed('User account is disabled.')
        return data

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['username'] = user.username
        token['role'] = user.role
        return token


class CustomTokenObtainPairView(TokenObtainPairView):
    serializer_class = CustomTokenObtainPairSerializer


class CustomTokenRefreshSerializer(TokenRefreshSerializer):
    """Token refresh serializer that handles deleted users gracefully"""
    def validate(self, attrs):
        try:
            return super().validate(attrs)
        except (InvalidToken, TokenError):
            raise InvalidToken('Token is invalid or expired.')
        except ObjectDoesNotExist:
            raise InvalidToken('Token is invalid. User no longer exists.')


class CustomTokenRefreshView(TokenRefreshView):
    serializer_class = CustomTokenRefreshSerializer


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def user_me(request):
    """Get current user with role-derived permissions"""
    user = request.user
    user_data = UserSerializer(user).data
    is_admin = user.role == 'admin' or user.is_superuser
    is_manager = is_admin or user.role == 'manager'
    user_data['is_admin'] = is_admin
    user_data['can_approve'] = is_manager
    user_data['can_access_financials'] = is_manager
    return Response(user_data)


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminUser])
def user_list(request):
    """List all users"""
    users = User.objects.all().order_by('username')
    return Response(UserSerializer(users, many=True).data)


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdminUser])
def user_role_update(request, pk):
    """Change a user's application role"""
    user = get_object_or_404(User, pk=pk)
    serializer = UserRoleSerializer(user, data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(UserSerializer(user).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# Setting views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminUser])
def setting_list_create(request):
    """List all settings or create a new setting"""
    if request.method == 'GET':
        settings = Setting.objects.all()
        serializer = SettingSerializer(settings, many=True)
        return Response(serializer.data)
    else:
        serializer = SettingSerializer(data=request.data)
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminUser])
def setting_detail(request, pk):
    """Retrieve, update or delete a setting"""
    setting = get_object_or_404(Setting, pk=pk)

    if request.method == 'GET':
        return Response(SettingSerializer(setting).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SettingSerializer(setting, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        setting.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated])
def company_profile(request):
    """Get or update the company profile"""
    profile = CompanyProfile.load()
    if request.method == 'GET':
        return Response(CompanyProfileSerializer(profile).data)

    if not (request.user.is_staff or request.user.role == 'admin'):
        return Response({'error': 'Permission denied'}, status=status.HTTP_403_FORBIDDEN)
    serializer = CompanyProfileSerializer(profile, data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# ActivityLog views (read-only)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def activity_log_list(request):
    """List the activity feed with filtering"""
    queryset = ActivityLog.objects.select_related('user')

    type_filter = request.query_params.get('type', None)
    if type_filter:
        queryset = queryset.filter(type=type_filter)

    model_filter = request.query_params.get('model', None)
    if model_filter:
        queryset = queryset.filter(model_name=model_filter)

    for param, lookup in (('date_from', 'created_at__date__gte'), ('date_to', 'created_at__date__lte')):
        value = request.query_params.get(param, None)
        if not value:
            continue
        try:
            parsed = parse_date(value)
        except ValueError:
            parsed = None
        if parsed is None:
            return Response({'error': f'{param} must be a date (YYYY-MM-DD)'}, status=status.HTTP_400_BAD_REQUEST)
        queryset = queryset.filter(**{lookup: parsed})

    try:
        limit = int(request.query_params.get('limit', 100))
    except ValueError:
        return Response({'error': 'limit must be an integer'}, status=status.HTTP_400_BAD_REQUEST)

    queryset = queryset.order_by('-created_at', '-id')[:max(limit, 1)]
    return Response(ActivityLogSerializer(queryset, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def activity_log_detail(request, pk):
    """Retrieve one activity log entry"""
    entry = get_object_or_404(ActivityLog, pk=pk)
    return Response(ActivityLogSerializer(entry).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def global_search(request):
    """Prefix search across projects, clients, employees, suppliers, inventory, assets and invoices"""
    query = request.query_params.get('q', '')
    return Response(run_global_search(query))
