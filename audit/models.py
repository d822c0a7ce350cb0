"""
Activity log.

Rows are append-only: one per committed activity event (allocation, room
switch, notice, move-out, payment) plus staff login/logout.
"""

from django.db import models
from django.conf import settings
from django.core.exceptions import PermissionDenied
from django.utils import timezone

from core.events import EventType


class AuditLogQuerySet(models.QuerySet):

    def for_resource(self, resource_type, resource_id):
        return self.filter(resource_type=resource_type, resource_id=resource_id)

    def for_action(self, action):
        return self.filter(action=action)

    def since(self, moment):
        return self.filter(timestamp__gte=moment)


class AuditLog(models.Model):
    """One activity event. Cannot be edited or deleted once written."""

    ACTION_LOGIN = 'login'
    ACTION_LOGOUT = 'logout'
    ACTION_CHOICES = EventType.CHOICES + [
        (ACTION_LOGIN, 'Login'),
        (ACTION_LOGOUT, 'Logout'),
    ]

    RESOURCE_RESIDENT = 'Resident'
    RESOURCE_PAYMENT = 'Payment'
    RESOURCE_ROOM = 'Room'
    RESOURCE_USER = 'User'
    RESOURCE_TYPE_CHOICES = [
        (RESOURCE_RESIDENT, 'Resident'),
        (RESOURCE_PAYMENT, 'Payment'),
        (RESOURCE_ROOM, 'Room'),
        (RESOURCE_USER, 'User'),
    ]

    branch = models.ForeignKey(
        'branches.Branch', on_delete=models.CASCADE, null=True, blank=True, related_name='audit_logs',
        help_text="Branch this action belongs to"
    )
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='audit_logs',
        help_text="User who performed the action (empty for scheduled jobs and self-registration)"
    )
    action = models.CharField(max_length=30, choices=ACTION_CHOICES, db_index=True,
                              help_text="Type of action performed")
    resource_type = models.CharField(max_length=50, choices=RESOURCE_TYPE_CHOICES, db_index=True,
                                     help_text="Type of resource affected")
    resource_id = models.IntegerField(null=True, blank=True, db_index=True, help_text="ID of the resource affected")
    description = models.TextField(help_text="Human-readable description of the action")
    ip_address = models.GenericIPAddressField(null=True, blank=True, help_text="IP address of the user")
    metadata = models.JSONField(default=dict, blank=True, help_text="Additional context data")
    timestamp = models.DateTimeField(default=timezone.now, db_index=True, help_text="When the action occurred")

    objects = AuditLogQuerySet.as_manager()

    class Meta:
        verbose_name = "Audit Log"
        verbose_name_plural = "Audit Logs"
        ordering = ['-timestamp']
        indexes = [
            models.Index(fields=['branch', '-timestamp'], name='audit_audit_branch__6f20c8_idx'),
            models.Index(fields=['user', '-timestamp'], name='audit_audit_user_id_d18a35_idx'),
            models.Index(fields=['resource_type', 'resource_id'], name='audit_audit_resourc_4b9e72_idx'),
            models.Index(fields=['action', '-timestamp'], name='audit_audit_action_0c57af_idx'),
        ]

    def __str__(self):
        return f"{self.timestamp:%Y-%m-%d %H:%M} {self.action} {self.resource_type} #{self.resource_id}"

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise PermissionDenied("Audit logs are immutable and cannot be modified after creation.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise PermissionDenied("Audit logs are immutable and cannot be deleted.")

    @property
    def user_display(self):
        if self.user:
            return self.user.get_full_name() or self.user.username
        return "System"

    @property
    def action_display(self):
        return dict(self.ACTION_CHOICES).get(self.action, self.action)

    @property
    def resource_display(self):
        return dict(self.RESOURCE_TYPE_CHOICES).get(self.resource_type, self.resource_type)
