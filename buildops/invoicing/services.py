"""Invoice lifecycle: Draft -> Sent -> Paid, with Void as a dead end"""
import logging
import secrets

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from buildops.core.exceptions import DomainError, ConflictError, InvalidTransitionError
from buildops.core.utils import log_activity
from buildops.financials.services import record_transaction
from .models import Invoice, InvoiceLineItem

logger = logging.getLogger(__name__)

NUMBER_PREFIX = 'INV-'


def generate_invoice_number():
    """Six-digit ``INV-XXXXXX`` number not used by any existing invoice"""
    while True:
        number = f'{NUMBER_PREFIX}{secrets.randbelow(10 ** 6):06d}'
        if not Invoice.objects.filter(invoice_number=number).exists():
            return number


def _replace_line_items(invoice, line_items):
    invoice.line_items.all().delete()
    InvoiceLineItem.objects.bulk_create([
        InvoiceLineItem(invoice=invoice, **line) for line in line_items
    ])
    invoice.recalculate_total()
    invoice.save(update_fields=['total_amount', 'updated_at'])


def create_invoice(*, line_items, user=None, request=None, **fields):
    """Create a Draft invoice with its line items"""
    with transaction.atomic():
        invoice = Invoice.objects.create(
            invoice_number=generate_invoice_number(),
            status='Draft',
            created_by=user if user and user.is_authenticated else None,
            **fields
        )
        _replace_line_items(invoice, line_items)

    log_activity(
        request=request,
        user=user,
        type='INVOICE_CREATED',
        message=f'New invoice created: {invoice.invoice_number}',
        link=f'/invoices/{invoice.id}',
        model_name='Invoice',
        object_id=invoice.id,
        changes={'total_amount': str(invoice.total_amount)},
    )
    return invoice


def update_invoice(invoice_id, *, line_items=None, user=None, request=None, **fields):
    """Edit header fields and/or replace line items of a Draft invoice"""
    with transaction.atomic():
        invoice = get_object_or_404(Invoice.objects.select_for_update(), pk=invoice_id)
        if invoice.status != 'Draft':
            raise DomainError('Only draft invoices can be edited.')
        for name, value in fields.items():
            setattr(invoice, name, value)
        if invoice.due_date < invoice.issue_date:
            raise DomainError('Due date cannot be before the issue date.')
        invoice.save()
        if line_items is not None:
            _replace_line_items(invoice, line_items)

    log_activity(
        request=request,
        user=user,
        type='INVOICE_UPDATED',
        message=f'Invoice {invoice.invoice_number} was edited.',
        link=f'/invoices/{invoice.id}',
        model_name='Invoice',
        object_id=invoice.id,
    )
    return invoice


def change_status(invoice_id, new_status, user=None, request=None):
    """Move an invoice to Sent or Void; paid invoices are final"""
    if new_status not in ('Sent', 'Void'):
        raise InvalidTransitionError(f"Invoices cannot be set to '{new_status}' directly.")

    with transaction.atomic():
        invoice = get_object_or_404(Invoice.objects.select_for_update(), pk=invoice_id)
        old_status = invoice.status
        if old_status == 'Paid':
            raise InvalidTransitionError('Paid invoices cannot change status.')
        if old_status == 'Void':
            raise InvalidTransitionError('Void invoices cannot change status.')
        if old_status == new_status:
            raise ConflictError(f'Invoice is already {new_status}.')
        invoice.status = new_status
        invoice.save(update_fields=['status', 'updated_at'])

    log_activity(
        request=request,
        user=user,
        type='INVOICE_STATUS_CHANGED',
        message=f'Invoice {invoice.invoice_number} status updated to {new_status}',
        link=f'/invoices/{invoice.id}',
        model_name='Invoice',
        object_id=invoice.id,
        changes={'status': {'old': old_status, 'new': new_status}},
    )
    return invoice


def mark_paid(invoice_id, account, user=None, request=None):
    """
    Record the invoice total as income on ``account`` and mark it Paid.
    Zero-total invoices are marked Paid without a transaction.

    Raises:
        ConflictError: the invoice is already paid
        InvalidTransitionError: the invoice is void
    """
    with transaction.atomic():
        invoice = get_object_or_404(Invoice.objects.select_for_update().select_related('client'), pk=invoice_id)
        if invoice.status == 'Paid':
            raise ConflictError(f'Invoice {invoice.invoice_number} has already been paid.')
        if invoice.status == 'Void':
            raise InvalidTransitionError('Void invoices cannot be paid.')

        txn = None
        # Nothing to post for a zero total
        if invoice.total_amount > 0:
            txn = record_transaction(
                description=f'Payment for Invoice {invoice.invoice_number}',
                amount=invoice.total_amount,
                type='Income',
                account=account,
                user=user,
                client_id=invoice.client_id,
                project_id=invoice.project_id,
            )
        old_status = invoice.status
        invoice.status = 'Paid'
        invoice.paid_at = timezone.now()
        invoice.payment_transaction = txn
        invoice.save(update_fields=['status', 'paid_at', 'payment_transaction', 'updated_at'])

    if txn is not None:
        logger.info(f"Invoice {invoice.invoice_number} paid into account {account.id} (transaction #{txn.id})")
        log_activity(
            request=request,
            user=user,
            type='TRANSACTION_ADDED',
            message=f'Payment of {invoice.total_amount:,} received for invoice {invoice.invoice_number}',
            link='/financials',
            model_name='Transaction',
            object_id=txn.id,
        )
    log_activity(
        request=request,
        user=user,
        type='INVOICE_STATUS_CHANGED',
        message=f'Invoice {invoice.invoice_number} status updated to Paid',
        link=f'/invoices/{invoice.id}',
        model_name='Invoice',
        object_id=invoice.id,
        changes={'status': {'old': old_status, 'new': 'Paid'}},
    )
    return invoice


def delete_invoice(invoice_id, user=None, request=None):
    with transaction.atomic():
        invoice = get_object_or_404(Invoice.objects.select_for_update(), pk=invoice_id)
        if invoice.status != 'Draft':
            raise DomainError('Only draft invoices can be deleted.')
        number = invoice.invoice_number
        invoice.delete()

    log_activity(
        request=request,
        user=user,
        type='INVOICE_DELETED',
        message=f'Invoice {number} was deleted.',
        link='/invoices',
        model_name='Invoice',
        object_id=invoice_id,
    )
