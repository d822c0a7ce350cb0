from rest_framework import serializers

from core.constants import VacationType
from .models import Resident, RoomSwitch


class ResidentSerializer(serializers.ModelSerializer):
    """Serializer for Resident (read side)"""
    full_name = serializers.ReadOnlyField()
    room_number = serializers.CharField(source='room.room_number', read_only=True, default=None)
    monthly_rent = serializers.DecimalField(max_digits=10, decimal_places=2, read_only=True)

    class Meta:
        model = Resident
        fields = [
            'id', 'branch', 'first_name', 'last_name', 'full_name', 'phone', 'email',
            'room', 'room_number', 'bed_number', 'status',
            'check_in_date', 'check_out_date', 'vacation_date', 'notice_days',
            'rent_amount', 'monthly_rent', 'advance_amount', 'advance_date', 'advance_receipt_number',
            'security_deposit', 'payment_status', 'last_payment_date', 'payment_status_updated_at',
            'notes', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class ResidentListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list view"""
    full_name = serializers.ReadOnlyField()
    room_number = serializers.CharField(source='room.room_number', read_only=True, default=None)

    class Meta:
        model = Resident
        fields = [
            'id', 'full_name', 'phone', 'room_number', 'bed_number',
            'status', 'vacation_date', 'payment_status'
        ]


class ResidentCreateSerializer(serializers.Serializer):
    """Registration input. Format checks on phone/email happen in the service."""
    first_name = serializers.CharField(max_length=100, allow_blank=True, required=False)
    last_name = serializers.CharField(max_length=100, allow_blank=True, required=False)
    phone = serializers.CharField(max_length=15, allow_blank=True, required=False)
    email = serializers.CharField(max_length=254, allow_blank=True, required=False)
    rent_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    advance_amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    advance_date = serializers.DateField(required=False, allow_null=True)
    advance_receipt_number = serializers.CharField(max_length=50, allow_blank=True, required=False)
    security_deposit = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, min_value=0)
    check_in_date = serializers.DateField(required=False, allow_null=True)
    notes = serializers.CharField(allow_blank=True, required=False)


class PublicRegistrationSerializer(ResidentCreateSerializer):
    """Self-registration from the branch QR code"""
    branch = serializers.IntegerField()


class AllocateSerializer(serializers.Serializer):
    room = serializers.IntegerField()
    bed_number = serializers.IntegerField()


class SwitchRoomSerializer(serializers.Serializer):
    room = serializers.IntegerField()
    bed_number = serializers.IntegerField()
    reason = serializers.CharField(max_length=255, allow_blank=True, required=False, default='')


class VacateSerializer(serializers.Serializer):
    vacation_type = serializers.ChoiceField(choices=VacationType.CHOICES, default=VacationType.NOTICE)
    notice_days = serializers.IntegerField(required=False, allow_null=True)
    vacation_date = serializers.DateField(required=False, allow_null=True)


class RoomSwitchSerializer(serializers.ModelSerializer):
    """Serializer for switch history"""
    from_room_number = serializers.CharField(source='from_room.room_number', read_only=True, default=None)
    to_room_number = serializers.CharField(source='to_room.room_number', read_only=True, default=None)
    performed_by_name = serializers.CharField(source='performed_by.username', read_only=True, default=None)

    class Meta:
        model = RoomSwitch
        fields = [
            'id', 'from_room', 'from_room_number', 'from_bed', 'to_room', 'to_room_number', 'to_bed',
            'reason', 'performed_by', 'performed_by_name', 'switched_at'
        ]
        read_only_fields = fields
