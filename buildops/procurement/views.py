from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from buildops.core.exceptions import DomainError, error_response
from buildops.core.utils import log_activity
from .models import PurchaseOrder
from .serializers import PurchaseOrderSerializer, PurchaseOrderStatusSerializer
from . import services


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def purchase_order_list_create(request):
    """List purchase orders or raise a new one"""
    if request.method == 'GET':
        queryset = PurchaseOrder.objects.select_related('supplier', 'project').order_by('-created_at', '-id')
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        supplier = request.query_params.get('supplier', None)
        if supplier:
            queryset = queryset.filter(supplier_id=supplier)
        project = request.query_params.get('project', None)
        if project:
            queryset = queryset.filter(project_id=project)
        return Response(PurchaseOrderSerializer(queryset, many=True).data)

    serializer = PurchaseOrderSerializer(data=request.data)
    if serializer.is_valid():
        po = serializer.save(created_by=request.user)
        log_activity(
            request=request,
            type='PO_CREATED',
            message=f'New PO created for {po.item_name}',
            link=f'/procurement/{po.id}',
            model_name='PurchaseOrder',
            object_id=po.id,
            changes={'quantity': po.quantity, 'total_cost': str(po.total_cost)},
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def purchase_order_detail(request, pk):
    """Retrieve, edit (Pending only) or delete a purchase order"""
    po = get_object_or_404(PurchaseOrder, pk=pk)

    if request.method == 'GET':
        return Response(PurchaseOrderSerializer(po).data)
    elif request.method in ('PUT', 'PATCH'):
        if po.status != 'Pending':
            return Response(
                {'error': f'Cannot edit purchase order with status {po.status}. Only pending orders can be edited.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        serializer = PurchaseOrderSerializer(po, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            log_activity(
                request=request,
                type='PO_UPDATED',
                message=f'PO for "{po.item_name}" was updated.',
                link=f'/procurement/{po.id}',
                model_name='PurchaseOrder',
                object_id=po.id,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        item_name = po.item_name
        po_id = po.id
        po.delete()
        log_activity(
            request=request,
            type='PO_DELETED',
            message=f'Purchase Order deleted for: {item_name}',
            link='/procurement',
            model_name='PurchaseOrder',
            object_id=po_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_status(request, pk):
    """Approve, reject, order or receive a purchase order"""
    get_object_or_404(PurchaseOrder, pk=pk)
    serializer = PurchaseOrderStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        po = services.change_status(pk, serializer.validated_data['status'], user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(PurchaseOrderSerializer(po).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def purchase_order_receive(request, pk):
    """Mark an ordered purchase order as received and restock its item"""
    get_object_or_404(PurchaseOrder, pk=pk)
    try:
        po = services.receive_purchase_order(pk, user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(PurchaseOrderSerializer(po).data)
