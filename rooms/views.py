from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from api.filters import BranchFilterBackend, get_branch_id
from api.permissions import IsStaffRole
from .models import Room
from .serializers import RoomSerializer, BedAvailabilitySerializer
from .services import InventoryService


class RoomViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Rooms of a branch with derived bed availability.
    Room CRUD belongs to branch setup and is done through the admin.
    """
    permission_classes = [IsAuthenticated, IsStaffRole]
    filter_backends = [BranchFilterBackend]
    serializer_class = RoomSerializer
    lookup_value_regex = r'\d+'

    def get_queryset(self):
        queryset = Room.objects.select_related('branch')

        sharing_type = self.request.query_params.get('sharing_type')
        if sharing_type:
            queryset = queryset.filter(sharing_type=sharing_type)

        return queryset

    @action(detail=False, methods=['get'], url_path='available-beds')
    def available_beds(self, request):
        """Bed availability per room; ?branch= required"""
        branch_id = get_branch_id(request)
        params = request.query_params
        beds = InventoryService().list_available_beds(
            branch_id,
            sharing_type=params.get('sharing_type') or None,
            room_id=params.get('room') or None,
            exclude_room_id=params.get('exclude_room') or None,
            only_available=params.get('only_available') in ('1', 'true', 'True'),
        )
        serializer = BedAvailabilitySerializer([item.as_dict() for item in beds], many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def occupancy(self, request, pk=None):
        """Occupancy of this room"""
        occupancy = InventoryService().get_room_occupancy(int(pk))
        return Response(occupancy.as_dict())

    @action(detail=False, methods=['get'])
    def stats(self, request):
        """Room and bed totals for a branch; ?branch= required"""
        return Response(InventoryService().get_room_stats(get_branch_id(request)))
