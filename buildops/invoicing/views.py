from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from buildops.core.exceptions import DomainError, error_response
from .models import Invoice
from .serializers import InvoiceSerializer, InvoiceStatusSerializer, MarkPaidSerializer
from . import services


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def invoice_list_create(request):
    """List invoices or create a draft invoice"""
    if request.method == 'GET':
        queryset = Invoice.objects.select_related('client', 'project').prefetch_related('line_items')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(Q(invoice_number__icontains=search) | Q(client__name__icontains=search))
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        client = request.query_params.get('client', None)
        if client:
            queryset = queryset.filter(client_id=client)
        project = request.query_params.get('project', None)
        if project:
            queryset = queryset.filter(project_id=project)
        return Response(InvoiceSerializer(queryset, many=True).data)

    serializer = InvoiceSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    data = dict(serializer.validated_data)
    line_items = data.pop('line_items')
    invoice = services.create_invoice(line_items=line_items, user=request.user, request=request, **data)
    return Response(InvoiceSerializer(invoice).data, status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def invoice_detail(request, pk):
    """Retrieve, edit or delete an invoice; edits and deletes need a Draft"""
    invoice = get_object_or_404(Invoice, pk=pk)

    if request.method == 'GET':
        return Response(InvoiceSerializer(invoice).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = InvoiceSerializer(invoice, data=request.data, partial=request.method == 'PATCH')
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = dict(serializer.validated_data)
        line_items = data.pop('line_items', None)
        try:
            invoice = services.update_invoice(pk, line_items=line_items, user=request.user, request=request, **data)
        except DomainError as e:
            return error_response(e)
        return Response(InvoiceSerializer(invoice).data)
    else:  # DELETE
        try:
            services.delete_invoice(pk, user=request.user, request=request)
        except DomainError as e:
            return error_response(e)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_status(request, pk):
    """Mark an invoice as Sent or Void"""
    get_object_or_404(Invoice, pk=pk)
    serializer = InvoiceStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        invoice = services.change_status(pk, serializer.validated_data['status'], user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(InvoiceSerializer(invoice).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def invoice_mark_paid(request, pk):
    """Record payment into an account and mark the invoice Paid"""
    get_object_or_404(Invoice, pk=pk)
    serializer = MarkPaidSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    try:
        invoice = services.mark_paid(pk, serializer.validated_data['account'], user=request.user, request=request)
    except DomainError as e:
        return error_response(e)
    return Response(InvoiceSerializer(invoice).data)
