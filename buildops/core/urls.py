from django.urls import path
from .views import (
    CustomTokenObtainPairView, CustomTokenRefreshView, user_me,
    user_list, user_role_update,
    setting_list_create, setting_detail, company_profile,
    activity_log_list, activity_log_detail,
    global_search
)

urlpatterns = [
    # Auth endpoints
    path('auth/login/', CustomTokenObtainPairView.as_view(), name='token_obtain_pair'),
    path('auth/refresh/', CustomTokenRefreshView.as_view(), name='token_refresh'),
    path('auth/me/', user_me, name='user-me'),

    # User endpoints
    path('users/', user_list, name='user-list'),
    path('users/<int:pk>/role/', user_role_update, name='user-role-update'),

    # Setting endpoints
    path('settings/', setting_list_create, name='setting-list-create'),
    path('settings/<int:pk>/', setting_detail, name='setting-detail'),
    path('company-profile/', company_profile, name='company-profile'),

    # Activity log endpoints
    path('activity-log/', activity_log_list, name='activity-log-list'),
    path('activity-log/<int:pk>/', activity_log_detail, name='activity-log-detail'),

    # Global search endpoint
    path('search/', global_search, name='global-search'),
]
