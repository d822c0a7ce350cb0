from django.contrib import admin
from .models import Branch


@admin.register(Branch)
class BranchAdmin(admin.ModelAdmin):
    list_display = ['name', 'is_active', 'notice_period_days', 'total_rooms', 'total_beds', 'created_at']
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'address']
    readonly_fields = ['total_rooms', 'total_beds']

    fieldsets = (
        ('Basic Information', {
            'fields': ('name', 'address', 'is_active', 'notice_period_days')
        }),
        ('Statistics', {
            'fields': ('total_rooms', 'total_beds'),
            'classes': ('collapse',)
        }),
    )
