"""
Admin for the activity log. Entries are written by services only, so the
admin is a browser: no add, change or delete.
"""
import json

from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html

from audit.models import AuditLog


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['timestamp', 'branch', 'action', 'resource', 'performed_by', 'summary']
    list_filter = ['branch', 'action', 'resource_type', ('user', admin.RelatedOnlyFieldListFilter)]
    list_select_related = ['branch', 'user']
    search_fields = ['description', 'user__username']
    date_hierarchy = 'timestamp'
    readonly_fields = [
        'timestamp', 'branch', 'user', 'action', 'resource_type', 'resource_id',
        'description', 'ip_address', 'event_metadata',
    ]
    fieldsets = (
        (None, {'fields': ('timestamp', 'branch', 'action', 'description')}),
        ('Affected record', {'fields': ('resource_type', 'resource_id')}),
        ('Actor', {'fields': ('user', 'ip_address')}),
        ('Event metadata', {'fields': ('event_metadata',), 'classes': ('collapse',)}),
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description='Resource', ordering='resource_type')
    def resource(self, obj):
        if obj.resource_type == AuditLog.RESOURCE_RESIDENT and obj.resource_id:
            url = reverse('admin:residents_resident_change', args=[obj.resource_id])
            return format_html('<a href="{}">Resident #{}</a>', url, obj.resource_id)
        return f"{obj.resource_type} #{obj.resource_id}"

    @admin.display(description='By', ordering='user__username')
    def performed_by(self, obj):
        return obj.user_display

    @admin.display(description='Description')
    def summary(self, obj):
        return obj.description if len(obj.description) <= 80 else f"{obj.description[:77]}..."

    @admin.display(description='Metadata')
    def event_metadata(self, obj):
        if not obj.metadata:
            return '-'
        return format_html('<pre>{}</pre>', json.dumps(obj.metadata, indent=2, sort_keys=True))
