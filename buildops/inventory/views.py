from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from buildops.core.exceptions import DomainError, error_response
from buildops.core.utils import log_activity
from .filters import InventoryItemFilter, MaterialRequestFilter
from .models import Warehouse, InventoryCategory, InventoryItem, MaterialRequest, LOW_STOCK, OUT_OF_STOCK
from .serializers import (
    WarehouseSerializer, InventoryCategorySerializer, InventoryItemSerializer,
    InventoryItemUpdateSerializer, StockAdjustmentSerializer, MaterialRequestSerializer
)
from . import services


# Inventory item views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def item_list_create(request):
    """List inventory items with filtering or add a new item"""
    if request.method == 'GET':
        queryset = InventoryItem.objects.select_related('category', 'warehouse').order_by('name')
        filterset = InventoryItemFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(InventoryItemSerializer(filterset.qs, many=True).data)

    serializer = InventoryItemSerializer(data=request.data)
    if serializer.is_valid():
        item = serializer.save()
        log_activity(
            request=request,
            type='INVENTORY_ADDED',
            message=f'New item "{item.name}" was added to inventory.',
            link='/inventory',
            model_name='InventoryItem',
            object_id=item.id,
            changes={'quantity': item.quantity, 'status': item.status},
        )
        return Response(InventoryItemSerializer(item).data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def item_detail(request, pk):
    """Retrieve, update or delete an inventory item"""
    item = get_object_or_404(InventoryItem, pk=pk)

    if request.method == 'GET':
        return Response(InventoryItemSerializer(item).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryItemUpdateSerializer(item, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            log_activity(
                request=request,
                type='INVENTORY_UPDATED',
                message=f'Item "{item.name}" was updated.',
                link='/inventory',
                model_name='InventoryItem',
                object_id=item.id,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        item_name = item.name
        item_id = item.id
        item.delete()
        log_activity(
            request=request,
            type='INVENTORY_DELETED',
            message=f'Item "{item_name}" was removed from inventory.',
            link='/inventory',
            model_name='InventoryItem',
            object_id=item_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def item_adjust_stock(request, pk):
    """Add or remove stock; the result may never go below zero"""
    get_object_or_404(InventoryItem, pk=pk)
    serializer = StockAdjustmentSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        item = services.adjust_stock(pk, serializer.validated_data['quantity'], user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(InventoryItemSerializer(item).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_low_stock(request):
    """Items with between 1 and the low-stock threshold units"""
    items = InventoryItem.objects.filter(status=LOW_STOCK).order_by('quantity', 'name')
    return Response(InventoryItemSerializer(items, many=True).data)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def item_out_of_stock(request):
    """Items with no units left"""
    items = InventoryItem.objects.filter(status=OUT_OF_STOCK).order_by('name')
    return Response(InventoryItemSerializer(items, many=True).data)


# Material request views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def material_request_list_create(request):
    """List material requests (filter by project, item, status) or raise one"""
    if request.method == 'GET':
        queryset = MaterialRequest.objects.select_related('project', 'requested_by', 'actioned_by').order_by('-requested_at', '-id')
        filterset = MaterialRequestFilter(request.query_params, queryset=queryset)
        if not filterset.is_valid():
            return Response(filterset.errors, status=status.HTTP_400_BAD_REQUEST)
        return Response(MaterialRequestSerializer(filterset.qs, many=True).data)

    serializer = MaterialRequestSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        material_request = services.create_material_request(
            project=serializer.validated_data['project'],
            item=serializer.validated_data['item'],
            quantity=serializer.validated_data['quantity'],
            user=request.user,
            request=request,
        )
    except DomainError as e:
        return error_response(e)
    return Response(MaterialRequestSerializer(material_request).data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def material_request_detail(request, pk):
    material_request = get_object_or_404(MaterialRequest, pk=pk)
    return Response(MaterialRequestSerializer(material_request).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def material_request_approve(request, pk):
    """Approve a pending request and draw the stock"""
    get_object_or_404(MaterialRequest, pk=pk)
    try:
        material_request = services.approve_material_request(pk, user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(MaterialRequestSerializer(material_request).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def material_request_reject(request, pk):
    """Reject a pending request"""
    get_object_or_404(MaterialRequest, pk=pk)
    try:
        material_request = services.reject_material_request(pk, user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(MaterialRequestSerializer(material_request).data)


# Warehouse and category views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def warehouse_list_create(request):
    if request.method == 'GET':
        return Response(WarehouseSerializer(Warehouse.objects.order_by('name'), many=True).data)
    serializer = WarehouseSerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def warehouse_detail(request, pk):
    warehouse = get_object_or_404(Warehouse, pk=pk)
    if request.method == 'GET':
        return Response(WarehouseSerializer(warehouse).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = WarehouseSerializer(warehouse, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        warehouse.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def category_list_create(request):
    if request.method == 'GET':
        return Response(InventoryCategorySerializer(InventoryCategory.objects.order_by('name'), many=True).data)
    serializer = InventoryCategorySerializer(data=request.data)
    if serializer.is_valid():
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def category_detail(request, pk):
    category = get_object_or_404(InventoryCategory, pk=pk)
    if request.method == 'GET':
        return Response(InventoryCategorySerializer(category).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InventoryCategorySerializer(category, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        category.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)
