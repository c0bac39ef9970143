from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.shortcuts import get_object_or_404
from buildops.core.utils import log_activity
from .models import Account, Transaction
from .serializers import AccountSerializer, TransactionSerializer
from .services import summarize


def _filtered_transactions(params):
    queryset = Transaction.objects.select_related('account', 'project', 'created_by')
    type_filter = params.get('type', None)
    if type_filter:
        queryset = queryset.filter(type=type_filter)
    account = params.get('account', None)
    if account:
        queryset = queryset.filter(account_id=account)
    project = params.get('project', None)
    if project:
        queryset = queryset.filter(project_id=project)
    date_from = params.get('date_from', None)
    if date_from:
        queryset = queryset.filter(date__gte=date_from)
    date_to = params.get('date_to', None)
    if date_to:
        queryset = queryset.filter(date__lte=date_to)
    return queryset


# Account views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def account_list_create(request):
    """List all accounts or create a new account"""
    if request.method == 'GET':
        accounts = Account.objects.all().order_by('name')
        return Response(AccountSerializer(accounts, many=True).data)

    serializer = AccountSerializer(data=request.data)
    if serializer.is_valid():
        account = serializer.save()
        log_activity(
            request=request,
            type='ACCOUNT_CREATED',
            message=f'Account "{account.name}" was created.',
            link='/financials/accounts',
            model_name='Account',
            object_id=account.id,
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([IsAuthenticated])
def account_detail(request, pk):
    """Retrieve, update or delete an account"""
    account = get_object_or_404(Account, pk=pk)

    if request.method == 'GET':
        return Response(AccountSerializer(account).data)
    elif request.method in ('PUT', 'PATCH'):
        serializer = AccountSerializer(account, data=request.data, partial=request.method == 'PATCH')
        if serializer.is_valid():
            serializer.save()
            return Response(serializer.data)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
    else:  # DELETE
        if account.transactions.exists():
            return Response(
                {'error': 'Cannot delete account. It has existing transactions.'},
                status=status.HTTP_400_BAD_REQUEST
            )
        account_name = account.name
        account_id = account.id
        account.delete()
        log_activity(
            request=request,
            type='ACCOUNT_DELETED',
            message=f'Account "{account_name}" was deleted.',
            link='/financials/accounts',
            model_name='Account',
            object_id=account_id,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)


# Transaction views
@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def transaction_list_create(request):
    """List transactions with filters or record a new one"""
    if request.method == 'GET':
        queryset = _filtered_transactions(request.query_params).order_by('-date', '-id')
        return Response(TransactionSerializer(queryset, many=True).data)

    serializer = TransactionSerializer(data=request.data)
    if serializer.is_valid():
        txn = serializer.save(created_by=request.user)
        log_activity(
            request=request,
            type='TRANSACTION_ADDED',
            message=f'{txn.type} of {txn.amount} recorded: "{txn.description}".',
            link='/financials',
            model_name='Transaction',
            object_id=txn.id,
            changes={'amount': str(txn.amount), 'type': txn.type},
        )
        return Response(serializer.data, status=status.HTTP_201_CREATED)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated])
def transaction_detail(request, pk):
    """Retrieve or delete a transaction"""
    txn = get_object_or_404(Transaction, pk=pk)
    if request.method == 'GET':
        return Response(TransactionSerializer(txn).data)

    description = txn.description
    txn_id = txn.id
    txn.delete()
    log_activity(
        request=request,
        type='TRANSACTION_DELETED',
        message=f'Transaction "{description}" was deleted.',
        link='/financials',
        model_name='Transaction',
        object_id=txn_id,
    )
    return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def financial_summary(request):
    """Total income, expenses and net over the filtered transactions"""
    return Response(summarize(_filtered_transactions(request.query_params)))
