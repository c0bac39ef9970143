"""Purchase order lifecycle: Pending -> Approved|Rejected, Approved -> Ordered -> Received"""
import logging

from django.db import transaction
from django.shortcuts import get_object_or_404

from buildops.core.exceptions import DomainError, InvalidTransitionError
from buildops.core.utils import log_activity
from buildops.financials.services import get_default_account, record_transaction
from buildops.inventory.services import receive_stock
from .models import PurchaseOrder

logger = logging.getLogger(__name__)


def _check_transition(po, new_status):
    if not po.can_transition_to(new_status):
        raise InvalidTransitionError(f"Cannot change status from '{po.status}' to '{new_status}'.")


def change_status(po_id, new_status, user=None, request=None):
    """
    Move a purchase order along the allowed transitions.

    Ordering books the expense against the first account (once per order);
    receiving adds the ordered quantity to stock.
    """
    if new_status == 'Received':
        return receive_purchase_order(po_id, user=user, request=request)

    expense = None
    with transaction.atomic():
        po = get_object_or_404(PurchaseOrder.objects.select_for_update(), pk=po_id)
        _check_transition(po, new_status)

        if new_status == 'Ordered' and po.total_cost > 0 and not po.transactions.exists():
            account = get_default_account()
            expense = record_transaction(
                description=f"Purchase Order for: {po.item_name}",
                amount=po.total_cost,
                type='Expense',
                account=account,
                user=user,
                project_id=po.project_id,
                supplier_id=po.supplier_id,
                purchase_order=po,
            )

        old_status = po.status
        po.status = new_status
        po.save(update_fields=['status', 'updated_at'])

    if expense is not None:
        log_activity(
            request=request,
            user=user,
            type='TRANSACTION_ADDED',
            message=f"Expense of {expense.amount:,.2f} recorded for PO: {po.item_name}",
            link='/financials',
            model_name='Transaction',
            object_id=expense.id,
        )
    log_activity(
        request=request,
        user=user,
        type='PO_STATUS_CHANGED',
        message=f'PO for "{po.item_name}" status changed to {new_status}',
        link=f'/procurement/{po.id}',
        model_name='PurchaseOrder',
        object_id=po.id,
        changes={'status': {'old': old_status, 'new': new_status}},
    )
    return po


def receive_purchase_order(po_id, user=None, request=None):
    """Add an ordered PO's quantity to its item and mark it Received"""
    with transaction.atomic():
        po = get_object_or_404(PurchaseOrder.objects.select_for_update(), pk=po_id)
        if po.status != 'Ordered':
            raise InvalidTransitionError("Only 'Ordered' purchase orders can be marked as received.")
        if po.item_id is None:
            raise DomainError('This purchase order is not linked to an inventory item and cannot be received.')

        item = receive_stock(po.item_id, po.quantity)
        po.status = 'Received'
        po.save(update_fields=['status', 'updated_at'])

    logger.info(f"PO {po.id} received; {item.name} now at {item.quantity}")
    log_activity(
        request=request,
        user=user,
        type='PO_RECEIVED',
        message=f'{po.quantity}x {po.item_name} received into inventory.',
        link=f'/procurement/{po.id}',
        model_name='PurchaseOrder',
        object_id=po.id,
        changes={'item_quantity': item.quantity, 'item_status': item.status},
    )
    return po
