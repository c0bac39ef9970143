"""Posting and aggregation helpers shared by procurement, invoicing and payroll"""
import logging
from decimal import Decimal

from django.db.models import Sum, Q
from django.utils import timezone

from buildops.core.exceptions import DomainError
from .models import Account, Transaction

logger = logging.getLogger(__name__)


def get_default_account():
    """First account by creation order; raise when none exists"""
    account = Account.objects.order_by('id').first()
    if account is None:
        raise DomainError('No financial account found. Please create an account first.')
    return account


def record_transaction(*, description, amount, type, account, date=None, user=None, **links):
    """
    Create a transaction row.

    ``links`` may carry ``project``, ``client``, ``supplier`` or ``purchase_order``.
    """
    amount = Decimal(str(amount))
    if amount <= 0:
        raise DomainError('Transaction amount must be positive.')
    txn = Transaction.objects.create(
        description=description,
        amount=amount,
        type=type,
        account=account,
        date=date or timezone.localdate(),
        created_by=user if user and user.is_authenticated else None,
        **links
    )
    logger.info(f"Recorded {type} transaction #{txn.id} of {amount} on account {account.id}")
    return txn


def summarize(queryset=None):
    """Return ``{'income', 'expenses', 'net'}`` over ``queryset`` (all transactions by default)"""
    if queryset is None:
        queryset = Transaction.objects.all()
    totals = queryset.aggregate(
        income=Sum('amount', filter=Q(type='Income')),
        expenses=Sum('amount', filter=Q(type='Expense')),
    )
    income = totals['income'] or Decimal('0.00')
    expenses = totals['expenses'] or Decimal('0.00')
    return {'income': income, 'expenses': expenses, 'net': income - expenses}
