from rest_framework import serializers

from core.constants import PaymentMethod
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    """Serializer for Payment"""
    resident_name = serializers.CharField(source='resident.full_name', read_only=True)
    room_number = serializers.CharField(source='room.room_number', read_only=True, default=None)
    marked_by_name = serializers.CharField(source='marked_by.username', read_only=True, default=None)

    class Meta:
        model = Payment
        fields = [
            'id', 'resident', 'resident_name', 'room', 'room_number', 'branch',
            'month', 'year', 'amount', 'payment_method', 'payment_date', 'receipt_image', 'notes',
            'is_active', 'marked_by', 'marked_by_name', 'marked_at', 'voided_at', 'voided_by', 'superseded_by'
        ]
        read_only_fields = fields


class MarkPaidSerializer(serializers.Serializer):
    resident = serializers.IntegerField()
    payment_date = serializers.DateField(required=False, allow_null=True)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, default=PaymentMethod.CASH)
    receipt_image = serializers.FileField(required=False, allow_null=True)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False, allow_null=True)
    notes = serializers.CharField(allow_blank=True, required=False, default='')


class VoidPaymentSerializer(serializers.Serializer):
    reason = serializers.CharField(allow_blank=True, required=False, default='')


class CorrectPaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, required=False)
    payment_date = serializers.DateField(required=False)
    payment_method = serializers.ChoiceField(choices=PaymentMethod.CHOICES, required=False)
    receipt_image = serializers.FileField(required=False)
    notes = serializers.CharField(allow_blank=True, required=False)
