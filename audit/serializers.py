from rest_framework import serializers

from audit.models import AuditLog


class AuditLogSerializer(serializers.ModelSerializer):
    """Read-only view of one activity event."""

    performed_by = serializers.CharField(source='user_display', read_only=True)
    action_label = serializers.CharField(source='action_display', read_only=True)
    resource_label = serializers.CharField(source='resource_display', read_only=True)
    branch_name = serializers.CharField(source='branch.name', read_only=True, default=None)

    class Meta:
        model = AuditLog
        fields = [
            'id', 'branch', 'branch_name', 'user', 'performed_by',
            'action', 'action_label', 'resource_type', 'resource_label', 'resource_id',
            'description', 'ip_address', 'metadata', 'timestamp',
        ]
        read_only_fields = fields
