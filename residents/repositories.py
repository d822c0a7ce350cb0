"""
Resident repository - Data access layer for residents and their bed assignment.

All assignment writes are conditional UPDATEs: a write only lands if the row
still matches the expected state, and the partial unique constraint on
(room, bed_number) rejects a second allocated resident on the same bed.
"""
from datetime import date
from typing import Optional
from django.db import IntegrityError, transaction
from django.db.models import QuerySet, Q
from django.utils import timezone

from core.constants import ResidentStatus
from core.exceptions import BedAlreadyOccupied, InvalidAssignmentState, ResidentNotFound
from core.repositories import BaseRepository
from .models import Resident, RoomSwitch


class ResidentRepository(BaseRepository[Resident]):
    """Repository for Resident model"""
    not_found_error = ResidentNotFound

    def __init__(self):
        super().__init__(Resident)

    @staticmethod
    def validate_assignment(resident: Resident):
        """Room and bed are set together, and an inactive resident holds neither"""
        if (resident.room_id is None) != (resident.bed_number is None):
            raise InvalidAssignmentState(details={
                'room_id': resident.room_id, 'bed_number': resident.bed_number
            })
        if resident.status == ResidentStatus.INACTIVE and resident.room_id is not None:
            raise InvalidAssignmentState(message="An inactive resident cannot hold a bed")

    def save_record(self, resident: Resident) -> Resident:
        """Single write path for full-record saves"""
        self.validate_assignment(resident)
        try:
            with transaction.atomic():
                resident.save()
        except IntegrityError as e:
            if resident.room_id is not None:
                raise BedAlreadyOccupied(details={
                    'room_id': resident.room_id, 'bed_number': resident.bed_number
                }) from e
            raise
        return resident

    def update_where(self, filters: dict, **changes) -> int:
        """
        Conditional update that reports a lost bed race as BedAlreadyOccupied.
        Runs in a savepoint so the caller's transaction stays usable.
        """
        changes.setdefault('updated_at', timezone.now())
        try:
            with transaction.atomic():
                return super().update_where(filters, **changes)
        except IntegrityError as e:
            if changes.get('bed_number') is not None:
                raise BedAlreadyOccupied(details={
                    'room_id': changes.get('room_id'), 'bed_number': changes.get('bed_number')
                }) from e
            raise

    def bed_taken(self, room_id: int, bed_number: int, exclude_id: Optional[int] = None) -> bool:
        """Whether an allocated resident holds this bed"""
        holders = self.get_all(room_id=room_id, bed_number=bed_number, status__in=ResidentStatus.ALLOCATED)
        if exclude_id:
            holders = holders.exclude(id=exclude_id)
        return holders.exists()

    def get_by_branch(self, branch_id: int, status: Optional[str] = None) -> QuerySet[Resident]:
        residents = self.get_all(branch_id=branch_id).select_related('room')
        if status:
            residents = residents.filter(status=status)
        return residents

    def search(self, branch_id: int, term: str) -> QuerySet[Resident]:
        """Match name, phone or email"""
        term = (term or '').strip()
        residents = self.get_by_branch(branch_id)
        if not term:
            return residents
        query = Q(first_name__icontains=term) | Q(last_name__icontains=term) | \
            Q(phone__icontains=term) | Q(email__icontains=term)
        parts = term.split()
        if len(parts) > 1:
            query |= Q(first_name__icontains=parts[0], last_name__icontains=parts[-1])
        return residents.filter(query)

    def get_overdue_notice(self, today: date, branch_id: Optional[int] = None) -> QuerySet[Resident]:
        """Notice-period residents whose vacation date has arrived"""
        residents = self.get_all(
            status=ResidentStatus.NOTICE_PERIOD,
            vacation_date__lte=today,
        ).select_related('room', 'branch')
        if branch_id:
            residents = residents.filter(branch_id=branch_id)
        return residents.order_by('vacation_date', 'id')

    def get_billable(self, branch_id: Optional[int] = None) -> QuerySet[Resident]:
        """Residents who owe rent this month (hold a bed)"""
        residents = self.get_all(status__in=ResidentStatus.ALLOCATED).select_related('room')
        if branch_id:
            residents = residents.filter(branch_id=branch_id)
        return residents


class RoomSwitchRepository(BaseRepository[RoomSwitch]):
    """Repository for RoomSwitch model"""

    def __init__(self):
        super().__init__(RoomSwitch)

    def get_by_resident(self, resident_id: int) -> QuerySet[RoomSwitch]:
        return self.get_all(resident_id=resident_id).select_related('from_room', 'to_room', 'performed_by')

    def record(self, resident_id: int, from_room_id: int, from_bed: int, to_room_id: int, to_bed: int,
               reason: str = '', performed_by=None) -> RoomSwitch:
        return self.create(
            resident_id=resident_id,
            from_room_id=from_room_id,
            from_bed=from_bed,
            to_room_id=to_room_id,
            to_bed=to_bed,
            reason=reason or 'Room switch',
            performed_by=performed_by,
        )
