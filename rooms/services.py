"""
Inventory service - derived bed availability for rooms.

Nothing here is stored: occupancy is always computed from residents whose
status holds a bed (active or notice_period).
"""
from typing import List, Optional

from core.constants import SharingType
from core.dto import BedAvailability, RoomOccupancy
from core.services import BaseService
from .repositories import RoomRepository


class InventoryService(BaseService):
    """Read-side queries over rooms and beds"""

    def __init__(self):
        super().__init__()
        self.room_repo = RoomRepository()

    def list_available_beds(self, branch_id: int, sharing_type: Optional[int] = None,
                            room_id: Optional[int] = None, exclude_room_id: Optional[int] = None,
                            only_available: bool = False) -> List[BedAvailability]:
        """
        Bed availability per room of a branch.

        Rooms with the most free beds come first, then by room number.
        A full room is still listed unless only_available is set.
        """
        rooms = list(self.room_repo.get_by_branch(
            branch_id, sharing_type=sharing_type, room_id=room_id, exclude_room_id=exclude_room_id
        ))
        occupied = self.room_repo.occupied_beds_by_room(room.id for room in rooms)

        result = []
        for room in rooms:
            taken = occupied.get(room.id, [])
            free = [number for number in room.bed_numbers if number not in taken]
            if only_available and not free:
                continue
            result.append(BedAvailability(
                room_id=room.id,
                room_number=room.room_number,
                sharing_type=room.sharing_type,
                sharing_label=room.sharing_label,
                cost=room.cost_per_bed,
                bed_count=room.bed_count,
                available_bed_numbers=free,
                occupied_bed_numbers=taken,
            ))

        result.sort(key=lambda item: (-item.available_count, item.room_number))
        return result

    def get_room_occupancy(self, room_id: int) -> RoomOccupancy:
        """Occupancy of one room; raises RoomNotFound for an unknown id"""
        room = self.room_repo.get_or_raise(room_id)
        taken = self.room_repo.occupied_beds_by_room([room.id]).get(room.id, [])
        return RoomOccupancy(
            room_id=room.id,
            bed_count=room.bed_count,
            occupied_count=len(taken),
            available_beds=[number for number in room.bed_numbers if number not in taken],
        )

    def get_room_stats(self, branch_id: int) -> dict:
        """Room, bed and occupancy totals for a branch, broken down by sharing type"""
        availability = self.list_available_beds(branch_id)
        occupied_by_type = {}
        for item in availability:
            occupied_by_type[item.sharing_type] = occupied_by_type.get(item.sharing_type, 0) + item.occupied_count

        breakdown = []
        for row in self.room_repo.sharing_type_breakdown(branch_id):
            occupied = occupied_by_type.get(row['sharing_type'], 0)
            breakdown.append({
                'sharing_type': row['sharing_type'],
                'label': SharingType.label(row['sharing_type']),
                'rooms': row['rooms'],
                'beds': row['beds'] or 0,
                'occupied_beds': occupied,
                'available_beds': (row['beds'] or 0) - occupied,
                'average_cost': row['average_cost'],
            })

        total_beds = sum(item['beds'] for item in breakdown)
        occupied_beds = sum(item['occupied_beds'] for item in breakdown)
        return {
            'branch_id': branch_id,
            'total_rooms': sum(item['rooms'] for item in breakdown),
            'total_beds': total_beds,
            'occupied_beds': occupied_beds,
            'available_beds': total_beds - occupied_beds,
            'full_rooms': sum(1 for item in availability if item.available_count == 0),
            'sharing_type_breakdown': breakdown,
        }
