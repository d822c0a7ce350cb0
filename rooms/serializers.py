from rest_framework import serializers
from .models import Room


class RoomSerializer(serializers.ModelSerializer):
    """Serializer for Room"""
    sharing_label = serializers.ReadOnlyField()

    class Meta:
        model = Room
        fields = [
            'id', 'branch', 'room_number', 'floor', 'sharing_type', 'sharing_label',
            'bed_count', 'cost_per_bed', 'is_active', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class BedAvailabilitySerializer(serializers.Serializer):
    """Serializer for derived bed availability of one room"""
    room_id = serializers.IntegerField()
    room_number = serializers.CharField()
    sharing_type = serializers.IntegerField()
    sharing_label = serializers.CharField()
    cost = serializers.DecimalField(max_digits=10, decimal_places=2)
    bed_count = serializers.IntegerField()
    available_bed_numbers = serializers.ListField(child=serializers.IntegerField())
    occupied_bed_numbers = serializers.ListField(child=serializers.IntegerField())
    available_count = serializers.IntegerField()
    occupied_count = serializers.IntegerField()
