"""
Read-only API over the activity log
"""

from datetime import timedelta
from django.db.models import Count
from django.utils import timezone
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.filters import BranchFilterBackend
from api.permissions import IsStaffRole
from audit.helpers import get_resource_audit_trail
from audit.models import AuditLog
from audit.serializers import AuditLogSerializer
from core.exceptions import ValidationError


class AuditLogViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Activity log entries, newest first.
    Filters: ?branch=, ?action=, ?resource_type=, ?resource_id=, ?user=
    """
    serializer_class = AuditLogSerializer
    permission_classes = [IsAuthenticated, IsStaffRole]
    filter_backends = [BranchFilterBackend]

    def get_queryset(self):
        params = self.request.query_params
        queryset = AuditLog.objects.select_related('user', 'branch')

        if params.get('action'):
            queryset = queryset.for_action(params['action'])
        if params.get('resource_type'):
            queryset = queryset.filter(resource_type=params['resource_type'])
        if params.get('resource_id'):
            queryset = queryset.filter(resource_id=params['resource_id'])
        if params.get('user'):
            queryset = queryset.filter(user_id=params['user'])

        return queryset.order_by('-timestamp')

    @action(detail=False, methods=['get'])
    def resource_trail(self, request):
        """
        History of one record.

        Example: GET /api/audit/logs/resource_trail/?resource_type=Resident&resource_id=12
        """
        resource_type = request.query_params.get('resource_type')
        resource_id = request.query_params.get('resource_id')
        if not resource_type or not resource_id:
            raise ValidationError(message='Both resource_type and resource_id are required')

        trail = get_resource_audit_trail(resource_type, resource_id)
        return Response({
            'resource_type': resource_type,
            'resource_id': resource_id,
            'audit_trail': self.get_serializer(trail, many=True).data,
        })

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Counts by action and resource type, plus the last 24 hours"""
        queryset = self.filter_queryset(self.get_queryset()).order_by()

        return Response({
            'total_logs': queryset.count(),
            'by_action': dict(queryset.values_list('action').annotate(count=Count('id'))),
            'by_resource': dict(queryset.values_list('resource_type').annotate(count=Count('id'))),
            'recent_24h': queryset.since(timezone.now() - timedelta(hours=24)).count(),
        })
