"""
Audit Logging Helper Functions

Persists activity events and auth events to the audit log.
"""

from audit.models import AuditLog
import logging

logger = logging.getLogger(__name__)


def log_action(user_id, action, resource_type, resource_id, description, branch_id=None,
               request=None, metadata=None, timestamp=None):
    """
    Log an action to the audit log.

    Args:
        user_id: ID of the user who performed the action (None for system jobs)
        action: Action type (an EventType value, login or logout)
        resource_type: Type of resource (Resident, Payment, ...)
        resource_id: ID of the resource
        description: Human-readable description
        branch_id: Branch the action belongs to
        request: Django request object (optional)
        metadata: Additional context data (optional)
        timestamp: When the action happened (defaults to now)

    Returns:
        AuditLog instance, or None if it could not be written
    """
    try:
        fields = {
            'branch_id': branch_id,
            'user_id': user_id,
            'action': action,
            'resource_type': resource_type,
            'resource_id': resource_id,
            'description': description,
            'ip_address': get_client_ip(request) if request else None,
            'metadata': metadata or {},
        }
        if timestamp is not None:
            fields['timestamp'] = timestamp
        audit_log = AuditLog.objects.create(**fields)

        logger.info(f"Audit: user #{user_id} - {action} - {resource_type} #{resource_id}")
        return audit_log

    except Exception as e:
        # The audited operation has already committed
        logger.error(f"Failed to create audit log: {e}", exc_info=True)
        return None


def record_activity(event):
    """Persist an ActivityEvent published by a service"""
    return log_action(
        user_id=event.user_id,
        action=event.type,
        resource_type=event.entity_type,
        resource_id=event.entity_id,
        description=event.description or f"{event.type} {event.entity_type} #{event.entity_id}",
        branch_id=event.branch_id,
        metadata=event.metadata,
        timestamp=event.timestamp,
    )


def get_client_ip(request):
    """
    Extract client IP address from request.
    Handles proxies and load balancers.
    """
    x_forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR')
    if x_forwarded_for:
        return x_forwarded_for.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def log_login(user, request, success=True):
    """Log user login"""
    description = f"User {user.username} logged in successfully" if success else f"Failed login attempt for {user.username}"
    return log_action(
        user_id=user.id,
        action=AuditLog.ACTION_LOGIN,
        resource_type=AuditLog.RESOURCE_USER,
        resource_id=user.id,
        description=description,
        request=request,
        metadata={'success': success}
    )


def log_logout(user, request):
    """Log user logout"""
    return log_action(
        user_id=user.id,
        action=AuditLog.ACTION_LOGOUT,
        resource_type=AuditLog.RESOURCE_USER,
        resource_id=user.id,
        description=f"User {user.username} logged out",
        request=request
    )


def get_resource_audit_trail(resource_type, resource_id, limit=50):
    """Get the audit trail for a specific resource"""
    return AuditLog.objects.for_resource(resource_type, resource_id).order_by('-timestamp')[:limit]
