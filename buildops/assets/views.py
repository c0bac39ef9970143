from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from buildops.core.utils import log_activity
from .models import Asset
from .serializers import AssetSerializer, MaintenanceLogSerializer


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def asset_list_create(request):
    """List all assets or register a new one"""
    if request.method == 'GET':
        queryset = Asset.objects.select_related('current_project')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(Q(name__icontains=search) | Q(category__icontains=search))
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        project = request.query_params.get('project', None)
        if project:
            queryset = queryset.filter(current_project_id=project)
        return Response(AssetSerializer(queryset, many=True).data)

    serializer = AssetSerializer(data=request.data)
    if serializer.is_valid():
        asset = serializer.save()
        log_activity(
            request=request,
            type='ASSET_ADDED',
            message=f'New asset added: {asset.name}',
            link=f'/assets/{asset.id}',
            model_name='Asset',
            object_id=asset.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def asset_detail(request, pk):
    """Retrieve, update or delete an asset"""
    asset = get_object_or_404(Asset, pk=pk)

    if request.method == 'GET':
        return Response(AssetSerializer(asset).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = AssetSerializer(asset, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            old_status = asset.status
            serializer.save()
            changes = {}
            if old_status != asset.status:
                changes['status'] = {'old': old_status, 'new': asset.status}
            log_activity(
                request=request,
                type='ASSET_UPDATED',
                message=f'Asset updated: {asset.name}',
                link=f'/assets/{asset.id}',
                model_name='Asset',
                object_id=asset.id,
                changes=changes,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        asset_name = asset.name
        asset_id = asset.id
        asset.delete()
        log_activity(
            request=request,
            type='ASSET_DELETED',
            message=f'Asset deleted: {asset_name}',
            link='/assets',
            model_name='Asset',
            object_id=asset_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def asset_maintenance_list_create(request, pk):
    """List or record maintenance for an asset"""
    asset = get_object_or_404(Asset, pk=pk)
    if request.method == 'GET':
        return Response(MaintenanceLogSerializer(asset.maintenance_logs.all(), many=True).data)

    serializer = MaintenanceLogSerializer(data=request.data)
    if serializer.is_valid():
        entry = serializer.save(asset=asset)
        log_activity(
            request=request,
            type='ASSET_MAINTENANCE_LOGGED',
            message=f'{entry.type} maintenance logged for {asset.name}.',
            link=f'/assets/{asset.id}',
            model_name='MaintenanceLog',
            object_id=entry.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
