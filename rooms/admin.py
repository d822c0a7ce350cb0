from django.contrib import admin, messages

from core.exceptions import RoomInUseError
from .models import Room


@admin.register(Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ['room_number', 'branch', 'floor', 'sharing_type', 'bed_count', 'cost_per_bed', 'is_active']
    list_filter = ['branch', 'sharing_type', 'is_active']
    search_fields = ['room_number', 'branch__name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('branch', 'room_number', 'floor', 'is_active')
        }),
        ('Beds & Rent', {
            'fields': ('sharing_type', 'bed_count', 'cost_per_bed')
        }),
    )

    def delete_model(self, request, obj):
        try:
            obj.delete()
        except RoomInUseError as e:
            self.message_user(request, e.message, level=messages.ERROR)
