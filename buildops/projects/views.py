from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from decimal import Decimal
from buildops.ai import flows
from buildops.core.exceptions import AIServiceError, error_response
from buildops.core.utils import log_activity
from buildops.financials.services import summarize
from .models import Project, ProjectTask, DailyLog
from .serializers import (
    ProjectSerializer, AssignTeamSerializer, ProjectTaskSerializer,
    TaskStatusSerializer, DailyLogSerializer
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_list_create(request):
    """List all projects or create a new project"""
    if request.method == 'GET':
        queryset = Project.objects.select_related('client').prefetch_related('team').order_by('-created_at')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(location__icontains=search))
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        client = request.query_params.get('client', None)
        if client:
            queryset = queryset.filter(client_id=client)
        return Response(ProjectSerializer(queryset, many=True).data)

    serializer = ProjectSerializer(data=request.data)
    if serializer.is_valid():
        project = serializer.save()
        log_activity(
            request=request,
            type='PROJECT_CREATED',
            message=f'New project "{project.name}" was created.',
            link=f'/projects/{project.id}',
            model_name='Project',
            object_id=project.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def project_detail(request, pk):
    """Retrieve, update or delete a project"""
    project = get_object_or_404(Project, pk=pk)

    if request.method == 'GET':
        return Response(ProjectSerializer(project).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProjectSerializer(project, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            old_data = {'status': project.status, 'progress': project.progress, 'budget': str(project.budget)}
            serializer.save()
            new_data = {'status': project.status, 'progress': project.progress, 'budget': str(project.budget)}
            changes = {k: {'old': old_data[k], 'new': new_data[k]} for k in old_data if old_data[k] != new_data[k]}
            log_activity(
                request=request,
                type='PROJECT_UPDATED',
                message=f'Project "{project.name}" was updated.',
                link=f'/projects/{project.id}',
                model_name='Project',
                object_id=project.id,
                changes=changes,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if project.purchase_orders.exists():
            return Response(
                {'error': 'Cannot delete project. It has purchase orders.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        project_name = project.name
        project_id = project.id
        project.delete()
        log_activity(
            request=request,
            type='PROJECT_DELETED',
            message=f'Project "{project_name}" was deleted.',
            link='/projects',
            model_name='Project',
            object_id=project_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['PUT'])
@permission_classes([IsAuthenticated])
def project_assign_team(request, pk):
    """Replace the project team with the given employees"""
    project = get_object_or_404(Project, pk=pk)
    serializer = AssignTeamSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    employees = serializer.validated_data['employee_ids']
    with transaction.atomic():
        project.team.set(employees)
    log_activity(
        request=request,
        type='PROJECT_TEAM_UPDATED',
        message=f'Team for project "{project.name}" was updated ({len(employees)} members).',
        link=f'/projects/{project.id}',
        model_name='Project',
        object_id=project.id,
        changes={'team': [e.id for e in employees]},
    )
    return Response(ProjectSerializer(project).data)


# Task views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_task_list_create(request, pk):
    """List or add tasks for a project"""
    project = get_object_or_404(Project, pk=pk)
    if request.method == 'GET':
        tasks = project.tasks.select_related('assignee').order_by('created_at', 'id')
        status_filter = request.query_params.get('status', None)
        if status_filter:
            tasks = tasks.filter(status=status_filter)
        return Response(ProjectTaskSerializer(tasks, many=True).data)

    serializer = ProjectTaskSerializer(data=request.data)
    if serializer.is_valid():
        task = serializer.save(project=project)
        log_activity(
            request=request,
            type='TASK_CREATED',
            message=f'Task "{task.name}" added to project "{project.name}".',
            link=f'/projects/{project.id}',
            model_name='ProjectTask',
            object_id=task.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def project_task_detail(request, pk, task_id):
    """Retrieve, update or delete a project task"""
    task = get_object_or_404(ProjectTask, pk=task_id, project_id=pk)

    if request.method == 'GET':
        return Response(ProjectTaskSerializer(task).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ProjectTaskSerializer(task, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        task_name = task.name
        task.delete()
        log_activity(
            request=request,
            type='TASK_DELETED',
            message=f'Task "{task_name}" was deleted.',
            link=f'/projects/{pk}',
            model_name='ProjectTask',
            object_id=task_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def project_task_status(request, pk, task_id):
    """Move a task between To Do, In Progress and Done"""
    task = get_object_or_404(ProjectTask, pk=task_id, project_id=pk)
    serializer = TaskStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    old_status = task.status
    task.status = serializer.validated_data['status']
    task.save(update_fields=['status', 'updated_at'])
    if old_status != task.status:
        log_activity(
            request=request,
            type='TASK_STATUS_CHANGED',
            message=f'Task "{task.name}" moved from {old_status} to {task.status}.',
            link=f'/projects/{pk}',
            model_name='ProjectTask',
            object_id=task.id,
            changes={'status': {'old': old_status, 'new': task.status}},
        )
    return Response(ProjectTaskSerializer(task).data)


# Daily log views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def project_daily_log_list_create(request, pk):
    """List or add daily site logs for a project"""
    project = get_object_or_404(Project, pk=pk)
    if request.method == 'GET':
        logs = project.daily_logs.order_by('-created_at', '-id')
        return Response(DailyLogSerializer(logs, many=True).data)

    serializer = DailyLogSerializer(data=request.data)
    if serializer.is_valid():
        log = serializer.save(project=project, author=request.user, author_email=request.user.email or '')
        log_activity(
            request=request,
            type='DAILY_LOG_ADDED',
            message=f'Daily log added to project "{project.name}".',
            link=f'/projects/{project.id}',
            model_name='DailyLog',
            object_id=log.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


# AI views
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def project_risk_analysis(request, pk):
    project = get_object_or_404(Project, pk=pk)
    try:
        result = flows.analyze_project_risks(project.name, project.description, project.budget, project.location)
    except AIServiceError as e:
        return error_response(e)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def project_daily_log_summary(request, pk):
    project = get_object_or_404(Project, pk=pk)
    logs = DailyLog.objects.filter(project=project).order_by('-created_at', '-id')
    try:
        result = flows.summarize_daily_logs((log.created_at, log.author_email, log.notes) for log in logs)
    except AIServiceError as e:
        return error_response(e)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def project_suggest_tasks(request, pk):
    project = get_object_or_404(Project, pk=pk)
    try:
        result = flows.suggest_project_tasks(project.name, project.description)
    except AIServiceError as e:
        return error_response(e)
    return Response(result)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def project_financial_summary(request, pk):
    """Budget against income and expenses booked to the project"""
    project = get_object_or_404(Project, pk=pk)
    totals = summarize(project.transactions.all())
    budget_used = Decimal('0.00')
    if project.budget:
        budget_used = (totals['expenses'] / project.budget * 100).quantize(Decimal('0.01'))
    return Response({
        'budget': project.budget,
        'income': totals['income'],
        'expenses': totals['expenses'],
        'net': totals['net'],
        'remaining_budget': project.budget - totals['expenses'],
        'budget_used_percent': budget_used,
    })
