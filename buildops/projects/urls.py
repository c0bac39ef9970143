from django.urls import path
from .views import (
    project_list_create, project_detail, project_assign_team,
    project_task_list_create, project_task_detail, project_task_status,
    project_daily_log_list_create, project_risk_analysis, project_daily_log_summary,
    project_suggest_tasks, project_financial_summary
)

urlpatterns = [
    path('projects/', project_list_create, name='project-list-create'),
    path('projects/<int:pk>/', project_detail, name='project-detail'),
    path('projects/<int:pk>/team/', project_assign_team, name='project-assign-team'),
    path('projects/<int:pk>/tasks/', project_task_list_create, name='project-tasks'),
    path('projects/<int:pk>/tasks/<int:task_id>/', project_task_detail, name='project-task-detail'),
    path('projects/<int:pk>/tasks/<int:task_id>/status/', project_task_status, name='project-task-status'),
    path('projects/<int:pk>/daily-logs/', project_daily_log_list_create, name='project-daily-logs'),
    path('projects/<int:pk>/daily-logs/summary/', project_daily_log_summary, name='project-daily-log-summary'),
    path('projects/<int:pk>/risk-analysis/', project_risk_analysis, name='project-risk-analysis'),
    path('projects/<int:pk>/suggest-tasks/', project_suggest_tasks, name='project-suggest-tasks'),
    path('projects/<int:pk>/financial-summary/', project_financial_summary, name='project-financial-summary'),
]
