from django.contrib import admin
from .models import Resident, RoomSwitch


class RoomSwitchInline(admin.TabularInline):
    model = RoomSwitch
    fk_name = 'resident'
    extra = 0
    can_delete = False
    readonly_fields = ['from_room', 'from_bed', 'to_room', 'to_bed', 'reason', 'performed_by', 'switched_at']

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Resident)
class ResidentAdmin(admin.ModelAdmin):
    """
    Residents are edited here for identity and money details only.
    Assignment and status change through the API so the bed rules hold.
    """
    list_display = ['full_name', 'phone', 'branch', 'location', 'status', 'vacation_date', 'payment_status']
    list_filter = ['status', 'payment_status', 'branch']
    search_fields = ['first_name', 'last_name', 'phone', 'email', 'room__room_number']
    readonly_fields = [
        'location', 'room', 'bed_number', 'status', 'check_in_date', 'check_out_date',
        'vacation_date', 'notice_days', 'payment_status', 'last_payment_date', 'payment_status_updated_at',
        'created_by', 'created_at', 'updated_at',
    ]
    inlines = [RoomSwitchInline]

    fieldsets = (
        ('Basic Information', {
            'fields': ('branch', 'first_name', 'last_name', 'phone', 'email')
        }),
        ('Location', {
            'fields': ('location', 'room', 'bed_number', 'status'),
        }),
        ('Dates', {
            'fields': ('check_in_date', 'check_out_date', 'vacation_date', 'notice_days')
        }),
        ('Rent Information', {
            'fields': (
                'rent_amount', 'advance_amount', 'advance_date', 'advance_receipt_number', 'security_deposit',
                'payment_status', 'last_payment_date', 'payment_status_updated_at',
            )
        }),
        ('Additional Information', {
            'fields': ('notes', 'created_by', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('branch', 'room')
