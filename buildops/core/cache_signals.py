"""
Cache invalidation signals
Automatically invalidate cached read models when data changes
"""
from django.db import transaction
from django.db.models.signals import post_save, post_delete
from django.dispatch import receiver
import logging
import threading
from contextlib import contextmanager

from .cache_utils import invalidate_dashboard_cache, invalidate_reports_cache

logger = logging.getLogger(__name__)

# Thread-local storage to track signal suspension
_thread_locals = threading.local()

# Models whose writes change dashboard KPIs and reports
TRACKED_MODELS = {
    'Project',
    'Employee',
    'InventoryItem',
    'MaterialRequest',
    'PurchaseOrder',
    'Transaction',
    'Invoice',
    'Asset',
}


@contextmanager
def suspend_cache_signals():
    """
    Context manager to temporarily suspend cache invalidation signals.
    Useful for bulk operations (payroll runs, seeding) to prevent excessive
    cache clearing. Invalidate manually after the block.
    """
    try:
        _thread_locals.suspended = True
        yield
    finally:
        _thread_locals.suspended = False


def is_suspended():
    return getattr(_thread_locals, 'suspended', False)


def invalidate_read_models():
    """Invalidate every cached read model"""
    try:
        invalidate_dashboard_cache()
        invalidate_reports_cache()
    except Exception as e:
        logger.warning(f"Error invalidating read models: {e}")


@receiver([post_save, post_delete])
def invalidate_on_tracked_change(sender, instance, **kwargs):
    """Invalidate dashboard and report caches when a tracked model changes"""
    if is_suspended():
        return

    if sender.__name__ not in TRACKED_MODELS:
        return

    # Invalidate AFTER commit so the cache is not repopulated with stale rows
    transaction.on_commit(invalidate_read_models)
