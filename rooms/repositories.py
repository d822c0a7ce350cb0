"""
Room repository - Data access layer for the room/bed inventory.
"""
from collections import defaultdict
from typing import Dict, List, Optional
from django.db.models import QuerySet, Count, Sum, Avg

from core.constants import ResidentStatus
from core.exceptions import RoomNotFound
from core.repositories import BaseRepository
from .models import Room


class RoomRepository(BaseRepository[Room]):
    """Repository for Room model"""
    not_found_error = RoomNotFound

    def __init__(self):
        super().__init__(Room)

    def get_by_branch(self, branch_id: int, sharing_type: Optional[int] = None,
                      room_id: Optional[int] = None, exclude_room_id: Optional[int] = None) -> QuerySet[Room]:
        """Active rooms of a branch, optionally narrowed"""
        rooms = self.get_all(branch_id=branch_id, is_active=True)
        if sharing_type:
            rooms = rooms.filter(sharing_type=sharing_type)
        if room_id:
            rooms = rooms.filter(id=room_id)
        if exclude_room_id:
            rooms = rooms.exclude(id=exclude_room_id)
        return rooms

    def occupied_beds_by_room(self, room_ids) -> Dict[int, List[int]]:
        """Map room id -> sorted occupied bed numbers, from allocated residents"""
        from residents.models import Resident

        occupied = defaultdict(list)
        rows = Resident.objects.filter(
            room_id__in=list(room_ids),
            status__in=ResidentStatus.ALLOCATED,
        ).values_list('room_id', 'bed_number')
        for room_id, bed_number in rows:
            occupied[room_id].append(bed_number)
        for beds in occupied.values():
            beds.sort()
        return occupied

    def sharing_type_breakdown(self, branch_id: int) -> QuerySet:
        """Room and bed totals grouped by sharing type"""
        return (
            self.get_all(branch_id=branch_id, is_active=True)
            .values('sharing_type')
            .annotate(rooms=Count('id'), beds=Sum('bed_count'), average_cost=Avg('cost_per_bed'))
            .order_by('sharing_type')
        )
