"""
Stock movements.

Every path that changes an item's quantity goes through this module. Each
runs in one database transaction, locks the rows it reads before writing
them, and refuses any change that would leave a quantity below zero. The
stored status is re-derived from the quantity on every save.
"""
import logging

from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone

from buildops.core.exceptions import DomainError, ConflictError
from buildops.core.utils import log_activity
from .models import InventoryItem, MaterialRequest, LOW_STOCK_THRESHOLD, derive_stock_status

logger = logging.getLogger(__name__)

__all__ = [
    'LOW_STOCK_THRESHOLD', 'derive_stock_status', 'InsufficientStockError', 'NegativeStockError',
    'create_material_request', 'approve_material_request', 'reject_material_request',
    'adjust_stock', 'receive_stock',
]


class InsufficientStockError(DomainError):
    def __init__(self, item_name, required, available):
        super().__init__(f"Insufficient stock for {item_name}. Required: {required}, Available: {available}.")
        self.required = required
        self.available = available


class NegativeStockError(DomainError):
    def __init__(self):
        super().__init__('Stock quantity cannot be negative.')


def _actor(user):
    return user if user is not None and user.is_authenticated else None


def create_material_request(*, project, item, quantity, user=None, request=None):
    """Open a pending request for ``quantity`` of ``item`` on ``project``"""
    if quantity < 1:
        raise DomainError('Quantity must be at least 1.')
    material_request = MaterialRequest.objects.create(
        project=project,
        item=item,
        item_name=item.name,
        quantity=quantity,
        requested_by=_actor(user),
    )
    log_activity(
        request=request,
        user=user,
        type='MATERIAL_REQUESTED',
        message=f'{quantity}x {item.name} requested for project "{project.name}".',
        link='/material-requests',
        model_name='MaterialRequest',
        object_id=material_request.id,
    )
    return material_request


def approve_material_request(request_id, user=None, request=None):
    """
    Approve a pending material request and draw its quantity from stock.

    Raises:
        ConflictError: the request was already approved or rejected
        InsufficientStockError: approval would take the item below zero
    """
    with transaction.atomic():
        material_request = get_object_or_404(MaterialRequest.objects.select_for_update(), pk=request_id)
        if material_request.status != 'Pending':
            raise ConflictError('This request has already been actioned.')
        if material_request.item_id is None:
            raise DomainError(f'Inventory item "{material_request.item_name}" no longer exists.')

        item = InventoryItem.objects.select_for_update().get(pk=material_request.item_id)
        new_quantity = item.quantity - material_request.quantity
        if new_quantity < 0:
            raise InsufficientStockError(item.name, material_request.quantity, item.quantity)

        item.quantity = new_quantity
        item.save(update_fields=['quantity', 'status', 'updated_at'])

        material_request.status = 'Approved'
        material_request.actioned_by = _actor(user)
        material_request.actioned_at = timezone.now()
        material_request.save(update_fields=['status', 'actioned_by', 'actioned_at'])

    logger.info(f"Material request {request_id} approved; {item.name} now at {item.quantity} ({item.status})")
    log_activity(
        request=request,
        user=user,
        type='MATERIAL_REQUEST_APPROVED',
        message=f'Request for {material_request.quantity}x {material_request.item_name} was approved.',
        link='/material-requests',
        model_name='MaterialRequest',
        object_id=material_request.id,
        changes={'item_quantity': item.quantity, 'item_status': item.status},
    )
    return material_request


def reject_material_request(request_id, user=None, request=None):
    """Reject a pending material request; stock is untouched"""
    with transaction.atomic():
        material_request = get_object_or_404(MaterialRequest.objects.select_for_update(), pk=request_id)
        if material_request.status != 'Pending':
            raise ConflictError('This request has already been actioned.')
        material_request.status = 'Rejected'
        material_request.actioned_by = _actor(user)
        material_request.actioned_at = timezone.now()
        material_request.save(update_fields=['status', 'actioned_by', 'actioned_at'])

    log_activity(
        request=request,
        user=user,
        type='MATERIAL_REQUEST_REJECTED',
        message=f'Request for {material_request.quantity}x {material_request.item_name} was rejected.',
        link='/material-requests',
        model_name='MaterialRequest',
        object_id=material_request.id,
    )
    return material_request


def adjust_stock(item_id, delta, user=None, request=None):
    """Add ``delta`` (positive or negative, never zero) to an item's quantity"""
    if isinstance(delta, bool) or not isinstance(delta, int):
        raise DomainError('Adjustment must be a whole number.')
    if delta == 0:
        raise DomainError('Adjustment cannot be zero.')

    with transaction.atomic():
        item = get_object_or_404(InventoryItem.objects.select_for_update(), pk=item_id)
        new_quantity = item.quantity + delta
        if new_quantity < 0:
            raise NegativeStockError()
        old_quantity = item.quantity
        item.quantity = new_quantity
        item.save(update_fields=['quantity', 'status', 'updated_at'])

    log_activity(
        request=request,
        user=user,
        type='INVENTORY_ADJUSTED',
        message=f'Stock for "{item.name}" adjusted by {delta:+d}',
        link='/inventory',
        model_name='InventoryItem',
        object_id=item.id,
        changes={'quantity': {'old': old_quantity, 'new': item.quantity}},
    )
    return item


def receive_stock(item_id, quantity):
    """
    Add received goods to an item. Runs inside the caller's transaction
    when there is one.
    """
    if quantity < 1:
        raise DomainError('Received quantity must be at least 1.')
    with transaction.atomic():
        item = InventoryItem.objects.select_for_update().get(pk=item_id)
        item.quantity += quantity
        item.save(update_fields=['quantity', 'status', 'updated_at'])
    logger.info(f"Received {quantity}x {item.name}; now at {item.quantity}")
    return item
