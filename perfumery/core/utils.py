"""Audit trail helpers for catalog and order mutations"""
import logging

from .models import AuditLog

logger = logging.getLogger(__name__)

AUDIT_ACTIONS = {key for key, _ in AuditLog.ACTION_CHOICES}


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


def describe_instance(instance):
    """
    (model_name, object_id, object_name) for a perfume, component or order.
    Catalog items are named by their ``name``, orders by ``str()`` (Order-<id>).
    """
    object_name = getattr(instance, 'name', None) or str(instance)
    return instance.__class__.__name__, str(instance.pk), object_name


def create_audit_log(request=None, action=None, instance=None, changes=None, user=None,
                     model_name=None, object_id=None, object_name=None):
    """
    Record a mutation in the audit trail. Never raises.

    The target is given either as ``instance`` (model, id and name are read
    from it) or explicitly through ``model_name``/``object_id``/``object_name``,
    which is what deletes use once the row is gone. ``action`` must be one of
    ``AuditLog.ACTION_CHOICES``; anything else is logged and skipped.

    The user defaults to ``request.user``; the IP is taken from the request.
    """
    try:
        if action not in AUDIT_ACTIONS:
            logger.warning(f"Audit log skipped: unknown action {action!r}")
            return None

        if instance is not None:
            model_name, object_id, default_name = describe_instance(instance)
            object_name = object_name or default_name

        if not model_name or not object_id:
            logger.warning(f"Audit log skipped for {action}: no target (model_name={model_name}, object_id={object_id})")
            return None

        audit_user = user
        if audit_user is None and request is not None:
            audit_user = getattr(request, 'user', None)
        if audit_user is not None and not audit_user.is_authenticated:
            audit_user = None

        return AuditLog.objects.create(
            user=audit_user,
            action=action,
            model_name=model_name,
            object_id=str(object_id),
            object_name=object_name,
            changes=changes or {},
            ip_address=get_client_ip(request)
        )
    except Exception as e:
        # Don't fail the main operation if audit logging fails
        logger.error(f"Failed to create audit log for {action} on {model_name} {object_id}: {e}")
        return None
