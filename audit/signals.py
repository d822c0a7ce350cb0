"""
Audit Logging Signals

Activity events from core services and auth events are written to the audit log.
"""

from django.dispatch import receiver
from django.contrib.auth.signals import user_logged_in, user_logged_out

from core.events import activity_recorded
from audit.helpers import record_activity, log_login, log_logout


@receiver(activity_recorded)
def persist_activity(sender, event, **kwargs):
    """Write a committed service event to the audit log"""
    record_activity(event)


@receiver(user_logged_in)
def log_user_login(sender, request, user, **kwargs):
    """Log successful login"""
    log_login(user, request, success=True)


@receiver(user_logged_out)
def log_user_logout(sender, request, user, **kwargs):
    """Log logout"""
    if user:
        log_logout(user, request)
