from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Payments are read-only here; void or correct them through the API"""
    list_display = ['resident', 'month', 'year', 'amount', 'payment_method', 'payment_date', 'is_active']
    list_filter = ['is_active', 'payment_method', 'year', 'month', 'branch']
    search_fields = ['resident__first_name', 'resident__last_name', 'resident__phone']
    date_hierarchy = 'payment_date'

    fieldsets = (
        ('Payment', {
            'fields': ('resident', 'room', 'branch', 'month', 'year', 'amount', 'payment_method', 'payment_date')
        }),
        ('Proof', {
            'fields': ('receipt_image', 'notes')
        }),
        ('History', {
            'fields': ('is_active', 'marked_by', 'marked_at', 'voided_at', 'voided_by', 'superseded_by'),
            'classes': ('collapse',)
        }),
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
