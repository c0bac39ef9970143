from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.db.models import Q
from django.shortcuts import get_object_or_404
from buildops.ai import flows
from buildops.core.exceptions import AIServiceError, error_response
from buildops.core.utils import log_activity
from .models import Client, ClientInteraction, ClientContract, Supplier, SupplierContract
from .serializers import (
    ClientSerializer, ClientInteractionSerializer, ClientContractSerializer,
    SupplierSerializer, SupplierEvaluationSerializer, SupplierContractSerializer
)


# Client views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def client_list_create(request):
    """List all clients or create a new client"""
    if request.method == 'GET':
        queryset = Client.objects.all().order_by('name')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(company__icontains=search) |
                Q(email__icontains=search)
            )
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        serializer = ClientSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = ClientSerializer(data=request.data)
        if serializer.is_valid():
            client = serializer.save()
            log_activity(
                request=request,
                type='CLIENT_CREATED',
                message=f'New client "{client.name}" was added.',
                link=f'/clients/{client.id}',
                model_name='Client',
                object_id=client.id,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def client_detail(request, pk):
    """Retrieve, update or delete a client"""
    client = get_object_or_404(Client, pk=pk)

    if request.method == 'GET':
        return Response(ClientSerializer(client).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = ClientSerializer(client, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            old_status = client.status
            serializer.save()
            changes = {}
            if old_status != client.status:
                changes['status'] = {'old': old_status, 'new': client.status}
            log_activity(
                request=request,
                type='CLIENT_UPDATED',
                message=f'Client "{client.name}" was updated.',
                link=f'/clients/{client.id}',
                model_name='Client',
                object_id=client.id,
                changes=changes,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if client.projects.exists() or client.transactions.exists() or client.invoices.exists():
            return Response(
                {'error': 'Cannot delete client. It is linked to existing projects, transactions or invoices.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        client_name = client.name
        client_id = client.id
        client.delete()
        log_activity(
            request=request,
            type='CLIENT_DELETED',
            message=f'Client "{client_name}" was deleted.',
            link='/clients',
            model_name='Client',
            object_id=client_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def client_interaction_list_create(request, pk):
    """List or log interactions with a client"""
    client = get_object_or_404(Client, pk=pk)
    if request.method == 'GET':
        interactions = client.interactions.all().order_by('-date')
        return Response(ClientInteractionSerializer(interactions, many=True).data)

    serializer = ClientInteractionSerializer(data=request.data)
    if serializer.is_valid():
        interaction = serializer.save(client=client)
        log_activity(
            request=request,
            type='CLIENT_INTERACTION_ADDED',
            message=f'{interaction.type} logged for client "{client.name}".',
            link=f'/clients/{client.id}',
            model_name='ClientInteraction',
            object_id=interaction.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def client_contract_list_create(request, pk):
    """List or attach contracts for a client"""
    client = get_object_or_404(Client, pk=pk)
    if request.method == 'GET':
        return Response(ClientContractSerializer(client.contracts.all(), many=True).data)

    serializer = ClientContractSerializer(data=request.data)
    if serializer.is_valid():
        contract = serializer.save(client=client)
        log_activity(
            request=request,
            type='CLIENT_CONTRACT_ADDED',
            message=f'Contract "{contract.title}" added for client "{client.name}".',
            link=f'/clients/{client.id}',
            model_name='ClientContract',
            object_id=contract.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def client_contract_delete(request, pk, contract_id):
    """Remove a contract from a client"""
    contract = get_object_or_404(ClientContract, pk=contract_id, client_id=pk)
    title = contract.title
    contract.delete()
    log_activity(
        request=request,
        type='CLIENT_CONTRACT_DELETED',
        message=f'Contract "{title}" was removed.',
        link=f'/clients/{pk}',
        model_name='ClientContract',
        object_id=contract_id,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def client_ai_summary(request, pk):
    """Summarize the interaction history of a client"""
    client = get_object_or_404(Client, pk=pk)
    interactions = ClientInteraction.objects.filter(client=client).order_by('date')
    try:
        result = flows.summarize_client_interactions(
            (i.date, i.type, i.notes) for i in interactions
        )
    except AIServiceError as e:
        return error_response(e)
    return Response(result)


# Supplier views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_list_create(request):
    """List all suppliers or create a new supplier"""
    if request.method == 'GET':
        queryset = Supplier.objects.all().order_by('name')
        search = request.query_params.get('search', None)
        if search:
            queryset = queryset.filter(
                Q(name__icontains=search) |
                Q(contact_person__icontains=search) |
                Q(email__icontains=search)
            )
        status_filter = request.query_params.get('status', None)
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        serializer = SupplierSerializer(queryset, many=True)
        return Response(serializer.data)
    else:
        serializer = SupplierSerializer(data=request.data)
        if serializer.is_valid():
            supplier = serializer.save()
            log_activity(
                request=request,
                type='SUPPLIER_CREATED',
                message=f'New supplier "{supplier.name}" was added.',
                link=f'/suppliers/{supplier.id}',
                model_name='Supplier',
                object_id=supplier.id,
            )
            return Response(serializer.data, status=status.HTTP_201_CREATED)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def supplier_detail(request, pk):
    """Retrieve, update or delete a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)

    if request.method == 'GET':
        return Response(SupplierSerializer(supplier).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = SupplierSerializer(supplier, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            log_activity(
                request=request,
                type='SUPPLIER_UPDATED',
                message=f'Supplier "{supplier.name}" was updated.',
                link=f'/suppliers/{supplier.id}',
                model_name='Supplier',
                object_id=supplier.id,
            )
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if supplier.purchase_orders.exists():
            return Response(
                {'error': 'Cannot delete supplier. It is linked to existing purchase orders.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        supplier_name = supplier.name
        supplier_id = supplier.id
        supplier.delete()
        log_activity(
            request=request,
            type='SUPPLIER_DELETED',
            message=f'Supplier "{supplier_name}" was deleted.',
            link='/suppliers',
            model_name='Supplier',
            object_id=supplier_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def supplier_evaluate(request, pk):
    """Record a 1-5 rating and evaluation notes for a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)
    serializer = SupplierEvaluationSerializer(supplier, data=request.data)
    if serializer.is_valid():
        serializer.save()
        log_activity(
            request=request,
            type='SUPPLIER_EVALUATED',
            message=f'Supplier "{supplier.name}" was rated {supplier.rating}/5.',
            link=f'/suppliers/{supplier.id}',
            model_name='Supplier',
            object_id=supplier.id,
            changes={'rating': supplier.rating},
        )
        return Response(SupplierSerializer(supplier).data)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def supplier_contract_list_create(request, pk):
    """List or attach contracts for a supplier"""
    supplier = get_object_or_404(Supplier, pk=pk)
    if request.method == 'GET':
        return Response(SupplierContractSerializer(supplier.contracts.all(), many=True).data)

    serializer = SupplierContractSerializer(data=request.data)
    if serializer.is_valid():
        contract = serializer.save(supplier=supplier)
        log_activity(
            request=request,
            type='SUPPLIER_CONTRACT_ADDED',
            message=f'Contract "{contract.title}" added for supplier "{supplier.name}".',
            link=f'/suppliers/{supplier.id}',
            model_name='SupplierContract',
            object_id=contract.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['DELETE'])
@permission_classes([IsAuthenticated])
def supplier_contract_delete(request, pk, contract_id):
    """Remove a contract from a supplier"""
    contract = get_object_or_404(SupplierContract, pk=contract_id, supplier_id=pk)
    title = contract.title
    contract.delete()
    log_activity(
        request=request,
        type='SUPPLIER_CONTRACT_DELETED',
        message=f'Contract "{title}" was removed.',
        link=f'/suppliers/{pk}',
        model_name='SupplierContract',
        object_id=contract_id,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def supplier_ai_summary(request, pk):
    """Summarize supplier reliability from ratings, contracts and purchase orders"""
    supplier = get_object_or_404(Supplier, pk=pk)
    contracts = supplier.contracts.order_by('-effective_date')
    purchase_orders = supplier.purchase_orders.order_by('-created_at')
    try:
        result = flows.summarize_supplier_performance(
            supplier.rating,
            supplier.evaluation_notes,
            [(c.title, c.effective_date) for c in contracts],
            [(po.quantity, po.item_name, po.status, po.created_at) for po in purchase_orders],
        )
    except AIServiceError as e:
        return error_response(e)
    return Response(result)
