"""Utility functions for activity logging"""
import logging

from django.db import transaction

from .models import ActivityLog

logger = logging.getLogger(__name__)


def get_client_ip(request):
    """Extract client IP address from request"""
    if not request or not hasattr(request, 'META'):
        return None
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        ip = x_forwarded_for.split(',')[0].strip()
    else:
        ip = request.META.get('REMOTE_ADDR')
    return ip or None


def log_activity(request=None, type=None, message=None, link='', model_name='',
                 object_id='', changes=None, user=None):
    """
    Append an activity log entry

    Args:
        request: Django request object (for user and IP) - optional if user is provided
        type: Event code (PROJECT_CREATED, MATERIAL_REQUEST_APPROVED, ...)
        message: Human-readable description shown in the activity feed
        link: Frontend route of the affected record
        model_name: Name of the model being acted upon
        object_id: ID of the object
        changes: Dictionary of changes made
        user: Optional user override (defaults to request.user if request provided)
    """
    try:
        actor = None
        if user:
            actor = user
        elif request and hasattr(request, 'user'):
            actor = request.user

        if not type or not message:
            logger.warning(f"Activity log skipped: missing required fields (type={type}, message={message})")
            return None

        # Savepoint so a failed insert does not poison an outer atomic block
        with transaction.atomic():
            return ActivityLog.objects.create(
                type=type,
                message=message,
                link=link or '',
                user=actor if actor and actor.is_authenticated else None,
                model_name=model_name or '',
                object_id=str(object_id) if object_id not in (None, '') else '',
                changes=changes or {},
                ip_address=get_client_ip(request) if request else None,
            )
    except Exception as e:
        # The activity feed must never fail the main operation
        logger.error(f"Failed to create activity log: {str(e)}")
        return None
