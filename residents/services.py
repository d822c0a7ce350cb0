"""
Resident services - occupancy and lifecycle business logic.

ResidentStore       registration and lookups
AllocationManager   binding residents to beds (allocate, switch, deallocate)
LifecycleService    pending -> active -> notice_period -> inactive
VacationScheduler   sweep that finalizes overdue notice-period vacations
"""
from datetime import date, timedelta
from typing import List, Optional, Union
from django.db import transaction

from branches.models import Branch
from core.constants import ResidentStatus, VacationType, PaymentStatus
from core.dto import ResidentDTO, SwitchResult, TransitionResult, SweepResult
from core.events import EventType
from core.exceptions import (
    NotFoundError, ValidationError, InvalidTransition, ResidentNotAllocated,
    SameAssignmentError, BedAlreadyOccupied, ConcurrentModificationError,
)
from core.services import BaseService
from core.validators import ResidentValidator, NoticeValidator, OccupancyValidator, RentValidator
from rooms.repositories import RoomRepository
from .models import Resident, RoomSwitch
from .repositories import ResidentRepository, RoomSwitchRepository


class ResidentStore(BaseService):
    """Service for registering and reading resident records"""

    def __init__(self):
        super().__init__()
        self.resident_repo = ResidentRepository()

    def create_pending(self, branch_id: int, resident_data: Union[ResidentDTO, dict], created_by=None) -> Resident:
        """
        Register a resident without a room.

        Args:
            branch_id: Branch the resident registers with
            resident_data: ResidentDTO or a plain dict of resident fields
            created_by: Staff user, None for public self-registration

        Returns:
            Resident in status pending

        Raises:
            ValidationError: Missing identity fields or malformed phone/email
            NotFoundError: Unknown branch
        """
        if isinstance(resident_data, dict):
            resident_data = ResidentDTO.from_dict(resident_data)
        ResidentValidator.validate_identity(resident_data)
        if resident_data.rent_amount is not None:
            resident_data.rent_amount = RentValidator.validate_rent_amount(resident_data.rent_amount)

        if not Branch.objects.filter(id=branch_id, is_active=True).exists():
            raise NotFoundError(resource_type="Branch", resource_id=branch_id)

        with transaction.atomic():
            resident = Resident(
                branch_id=branch_id,
                first_name=resident_data.first_name.strip(),
                last_name=resident_data.last_name.strip(),
                phone=str(resident_data.phone).strip(),
                email=(resident_data.email or '').strip(),
                rent_amount=resident_data.rent_amount,
                advance_amount=resident_data.advance_amount,
                advance_date=resident_data.advance_date,
                advance_receipt_number=resident_data.advance_receipt_number,
                security_deposit=resident_data.security_deposit,
                check_in_date=resident_data.check_in_date,
                notes=resident_data.notes,
                status=ResidentStatus.PENDING,
                payment_status=PaymentStatus.PENDING,
                created_by=created_by,
            )
            self.resident_repo.save_record(resident)

            self.log_info(f"Resident registered: {resident.full_name}", resident_id=resident.id, branch_id=branch_id)
            self.emit(
                EventType.RESIDENT_CREATE, resident, user=created_by, branch_id=branch_id,
                description=f"Resident {resident.full_name} registered",
                metadata={'self_registered': created_by is None},
            )
        return resident

    def get(self, resident_id: int) -> Resident:
        return self.resident_repo.get_or_raise(resident_id)

    def list_by_branch(self, branch_id: int, status: Optional[str] = None) -> List[Resident]:
        if status and status not in dict(ResidentStatus.CHOICES):
            raise ValidationError(message=f"Unknown status: {status}", code="INVALID_STATUS")
        return list(self.resident_repo.get_by_branch(branch_id, status=status))

    def search(self, branch_id: int, term: str) -> List[Resident]:
        return list(self.resident_repo.search(branch_id, term))


class AllocationManager(BaseService):
    """Service binding residents to beds"""

    def __init__(self):
        super().__init__()
        self.resident_repo = ResidentRepository()
        self.room_repo = RoomRepository()
        self.switch_repo = RoomSwitchRepository()

    def _target_bed(self, resident: Resident, room_id: int, bed_number):
        """Resolve and validate the destination room and bed number"""
        room = self.room_repo.get_or_raise(room_id)
        if room.branch_id != resident.branch_id:
            raise ValidationError(
                message="Room belongs to a different branch",
                code="ROOM_BRANCH_MISMATCH",
                details={'room_id': room.id, 'branch_id': resident.branch_id}
            )
        if not room.is_active:
            raise ValidationError(message=f"Room {room.room_number} is not in use", code="ROOM_INACTIVE")
        return room, OccupancyValidator.validate_bed_number(bed_number, room.bed_count)

    def allocate(self, resident_id: int, room_id: int, bed_number: int, user=None,
                 today: Optional[date] = None) -> Resident:
        """
        Bind a pending (or unallocated active) resident to a free bed.

        Raises:
            ResidentNotFound, RoomNotFound: Unknown ids
            InvalidTransition: Resident not allocatable or already holds a bed
            ValidationError: Room in another branch or bed number out of range
            BedAlreadyOccupied: Bed held by someone else
        """
        today = self.resolve_today(today)

        with transaction.atomic():
            resident = self.resident_repo.get_or_raise(resident_id)
            if resident.status not in ResidentStatus.ALLOCATABLE:
                raise InvalidTransition(
                    message=f"Cannot allocate a bed to a {resident.get_status_display().lower()} resident",
                    details={'status': resident.status}
                )
            if resident.room_id is not None:
                raise InvalidTransition(
                    message="Resident already holds a bed, use switch room instead",
                    details={'room_id': resident.room_id, 'bed_number': resident.bed_number}
                )

            room, bed_number = self._target_bed(resident, room_id, bed_number)
            if self.resident_repo.bed_taken(room.id, bed_number):
                raise BedAlreadyOccupied(details={'room_id': room.id, 'bed_number': bed_number})

            changes = {
                'room_id': room.id,
                'bed_number': bed_number,
                'status': ResidentStatus.ACTIVE,
            }
            if resident.check_in_date is None:
                changes['check_in_date'] = today

            changed = self.resident_repo.update_where(
                {'id': resident.id, 'status__in': ResidentStatus.ALLOCATABLE, 'room__isnull': True},
                **changes
            )
            if not changed:
                raise ConcurrentModificationError(details={'resident_id': resident.id})

            resident.refresh_from_db()
            self.log_info(
                f"Resident allocated: {resident.full_name}",
                resident_id=resident.id, room_id=room.id, bed_number=bed_number
            )
            self.emit(
                EventType.RESIDENT_MOVE_IN, resident, user=user, branch_id=resident.branch_id,
                description=f"{resident.full_name} moved into room {room.room_number}, bed {bed_number}",
                metadata={'room_id': room.id, 'room_number': room.room_number, 'bed_number': bed_number},
            )
        return resident

    def switch_room(self, resident_id: int, new_room_id: int, new_bed_number: int, reason: str = '',
                    user=None) -> SwitchResult:
        """
        Move an allocated resident to another bed and record the switch.

        Raises:
            ResidentNotAllocated: Resident holds no bed
            SameAssignmentError: Destination equals the current bed
            BedAlreadyOccupied: Destination bed is taken
        """
        with transaction.atomic():
            resident = self.resident_repo.get_or_raise(resident_id)
            if resident.room_id is None or resident.status not in ResidentStatus.ALLOCATED:
                raise ResidentNotAllocated(details={'resident_id': resident.id, 'status': resident.status})

            old_room = resident.room
            old_bed = resident.bed_number
            room, bed_number = self._target_bed(resident, new_room_id, new_bed_number)

            if room.id == old_room.id and bed_number == old_bed:
                raise SameAssignmentError(details={'room_id': room.id, 'bed_number': bed_number})
            if self.resident_repo.bed_taken(room.id, bed_number, exclude_id=resident.id):
                raise BedAlreadyOccupied(details={'room_id': room.id, 'bed_number': bed_number})

            changed = self.resident_repo.update_where(
                {
                    'id': resident.id,
                    'room_id': old_room.id,
                    'bed_number': old_bed,
                    'status__in': ResidentStatus.ALLOCATED,
                },
                room_id=room.id,
                bed_number=bed_number,
            )
            if not changed:
                raise ConcurrentModificationError(details={'resident_id': resident.id})

            history = self.switch_repo.record(
                resident.id, old_room.id, old_bed, room.id, bed_number,
                reason=reason, performed_by=user,
            )
            resident.refresh_from_db()

            previous = {'room_id': old_room.id, 'room_number': old_room.room_number, 'bed_number': old_bed}
            current = {'room_id': room.id, 'room_number': room.room_number, 'bed_number': bed_number}
            self.log_info(f"Room switch: {resident.full_name}", resident_id=resident.id, previous=previous, current=current)
            self.emit(
                EventType.ROOM_SWITCH, resident, user=user, branch_id=resident.branch_id,
                description=(
                    f"{resident.full_name} moved from room {old_room.room_number} bed {old_bed} "
                    f"to room {room.room_number} bed {bed_number}"
                ),
                metadata={'previous': previous, 'current': current, 'reason': history.reason},
            )

        return SwitchResult(previous=previous, current=current, resident=resident, history=history)

    def switch_history(self, resident_id: int) -> List[RoomSwitch]:
        """Switch history, newest first"""
        self.resident_repo.get_or_raise(resident_id)
        return list(self.switch_repo.get_by_resident(resident_id))

    def deallocate(self, resident_id: int, from_statuses, **changes) -> bool:
        """
        Clear room and bed while the resident is still in one of from_statuses.
        Extra field changes are written in the same UPDATE.
        Returns False when the condition no longer held.
        """
        changed = self.resident_repo.update_where(
            {'id': resident_id, 'status__in': list(from_statuses)},
            room=None,
            bed_number=None,
            **changes
        )
        return changed > 0


class LifecycleService(BaseService):
    """Service for resident state transitions"""

    def __init__(self):
        super().__init__()
        self.resident_repo = ResidentRepository()
        self.allocation = AllocationManager()

    def vacate(self, resident_id: int, vacation_type: str = VacationType.NOTICE, notice_days: Optional[int] = None,
               vacation_date: Optional[date] = None, user=None, today: Optional[date] = None) -> Resident:
        """
        Start a vacation.

        notice:    active -> notice_period, the bed stays occupied until vacation_date
        immediate: active -> inactive, the bed is freed now
        """
        today = self.resolve_today(today)
        if vacation_type not in dict(VacationType.CHOICES):
            raise ValidationError(
                message=f"Unknown vacation type: {vacation_type}",
                code="INVALID_VACATION_TYPE",
                details={'vacation_type': vacation_type}
            )

        with transaction.atomic():
            resident = self.resident_repo.get_or_raise(resident_id)
            if vacation_type == VacationType.NOTICE:
                return self._give_notice(resident, notice_days, vacation_date, user, today)
            return self._vacate_immediately(resident, user, today)

    def _give_notice(self, resident, notice_days, vacation_date, user, today):
        if notice_days is not None:
            notice_days = NoticeValidator.validate_notice_days(notice_days)
        if resident.status == ResidentStatus.NOTICE_PERIOD:
            same_days = notice_days is None or notice_days == resident.notice_days
            same_date = vacation_date is None or vacation_date == resident.vacation_date
            if same_days and same_date:
                return resident
            raise InvalidTransition(
                message="Resident is already serving a notice period",
                details={'vacation_date': resident.vacation_date.isoformat(), 'notice_days': resident.notice_days}
            )
        if resident.status != ResidentStatus.ACTIVE:
            raise InvalidTransition(
                message=f"Only active residents can give notice (status: {resident.status})",
                details={'status': resident.status}
            )
        if resident.room_id is None:
            raise ResidentNotAllocated(details={'resident_id': resident.id})

        if notice_days is None:
            notice_days = resident.branch.notice_period_days
        notice_days = NoticeValidator.validate_notice_days(notice_days)
        if vacation_date is None:
            vacation_date = today + timedelta(days=notice_days)
        NoticeValidator.validate_vacation_date(vacation_date, today)

        changed = self.resident_repo.update_where(
            {'id': resident.id, 'status': ResidentStatus.ACTIVE},
            status=ResidentStatus.NOTICE_PERIOD,
            notice_days=notice_days,
            vacation_date=vacation_date,
        )
        if not changed:
            raise ConcurrentModificationError(details={'resident_id': resident.id})

        resident.refresh_from_db()
        self.log_info(
            f"Notice given: {resident.full_name}",
            resident_id=resident.id, notice_days=notice_days, vacation_date=vacation_date
        )
        self.emit(
            EventType.RESIDENT_NOTICE, resident, user=user, branch_id=resident.branch_id,
            description=f"{resident.full_name} gave {notice_days} days notice, leaving on {vacation_date.isoformat()}",
            metadata={'notice_days': notice_days, 'vacation_date': vacation_date.isoformat()},
        )
        return resident

    def _vacate_immediately(self, resident, user, today):
        if resident.status != ResidentStatus.ACTIVE:
            raise InvalidTransition(
                message=f"Only active residents can vacate immediately (status: {resident.status})",
                details={'status': resident.status}
            )
        freed = {'room_id': resident.room_id, 'bed_number': resident.bed_number}

        if not self.allocation.deallocate(
            resident.id, [ResidentStatus.ACTIVE],
            status=ResidentStatus.INACTIVE,
            check_out_date=today,
            vacation_date=None,
            notice_days=None,
        ):
            raise ConcurrentModificationError(details={'resident_id': resident.id})

        resident.refresh_from_db()
        self.log_info(f"Resident vacated immediately: {resident.full_name}", resident_id=resident.id, **freed)
        self.emit(
            EventType.RESIDENT_MOVE_OUT, resident, user=user, branch_id=resident.branch_id,
            description=f"{resident.full_name} moved out",
            metadata={'vacation_type': VacationType.IMMEDIATE, 'check_out_date': today.isoformat(), **freed},
        )
        return resident

    def finalize_vacation(self, resident_id: int, user=None, today: Optional[date] = None) -> TransitionResult:
        """
        notice_period -> inactive, freeing the bed.
        A resident already finalized by another caller is a no-op (changed=False).
        """
        today = self.resolve_today(today)

        with transaction.atomic():
            resident = self.resident_repo.get_or_raise(resident_id)
            if resident.status == ResidentStatus.INACTIVE:
                return TransitionResult(resident=resident, changed=False)
            if resident.status != ResidentStatus.NOTICE_PERIOD:
                raise InvalidTransition(
                    message=f"Resident is not in a notice period (status: {resident.status})",
                    details={'status': resident.status}
                )
            freed = {'room_id': resident.room_id, 'bed_number': resident.bed_number}
            vacation_date = resident.vacation_date

            if not self.allocation.deallocate(
                resident.id, [ResidentStatus.NOTICE_PERIOD],
                status=ResidentStatus.INACTIVE,
                check_out_date=today,
                vacation_date=None,
                notice_days=None,
            ):
                resident.refresh_from_db()
                if resident.status == ResidentStatus.INACTIVE:
                    return TransitionResult(resident=resident, changed=False)
                raise ConcurrentModificationError(details={'resident_id': resident.id})

            resident.refresh_from_db()
            self.log_info(f"Vacation finalized: {resident.full_name}", resident_id=resident.id, **freed)
            self.emit(
                EventType.RESIDENT_MOVE_OUT, resident, user=user, branch_id=resident.branch_id,
                description=f"{resident.full_name} moved out after notice period",
                metadata={
                    'vacation_type': VacationType.NOTICE,
                    'vacation_date': vacation_date.isoformat() if vacation_date else None,
                    'check_out_date': today.isoformat(),
                    **freed,
                },
            )
        return TransitionResult(resident=resident, changed=True)

    def cancel_notice(self, resident_id: int, user=None) -> Resident:
        """notice_period -> active, the resident stays"""
        with transaction.atomic():
            resident = self.resident_repo.get_or_raise(resident_id)
            if resident.status != ResidentStatus.NOTICE_PERIOD:
                raise InvalidTransition(
                    message=f"Resident has no notice to withdraw (status: {resident.status})",
                    details={'status': resident.status}
                )
            changed = self.resident_repo.update_where(
                {'id': resident.id, 'status': ResidentStatus.NOTICE_PERIOD},
                status=ResidentStatus.ACTIVE,
                vacation_date=None,
                notice_days=None,
            )
            if not changed:
                raise ConcurrentModificationError(details={'resident_id': resident.id})

            resident.refresh_from_db()
            self.log_info(f"Notice withdrawn: {resident.full_name}", resident_id=resident.id)
            self.emit(
                EventType.RESIDENT_NOTICE_CANCEL, resident, user=user, branch_id=resident.branch_id,
                description=f"{resident.full_name} withdrew their notice",
            )
        return resident


class VacationScheduler(BaseService):
    """Finalizes notice-period residents whose vacation date has passed"""

    def __init__(self):
        super().__init__()
        self.resident_repo = ResidentRepository()
        self.lifecycle = LifecycleService()

    def list_overdue(self, branch_id: Optional[int] = None, today: Optional[date] = None) -> List[Resident]:
        """Residents the next sweep would process"""
        return list(self.resident_repo.get_overdue_notice(self.resolve_today(today), branch_id=branch_id))

    def process_overdue_vacations(self, branch_id: Optional[int] = None, today: Optional[date] = None) -> SweepResult:
        """
        One sweep. Each resident is finalized in its own transaction; a failure
        is logged and collected without stopping the sweep.
        """
        today = self.resolve_today(today)
        result = SweepResult(run_date=today)
        resident_ids = list(
            self.resident_repo.get_overdue_notice(today, branch_id=branch_id).values_list('id', flat=True)
        )
        self.log_info("Vacation sweep started", run_date=today, branch_id=branch_id, candidates=len(resident_ids))

        for resident_id in resident_ids:
            try:
                outcome = self.lifecycle.finalize_vacation(resident_id, today=today)
            except (InvalidTransition, ConcurrentModificationError) as e:
                # Notice withdrawn or record changed since the query ran
                self.log_warning(f"Skipped resident during sweep: {e.message}", resident_id=resident_id)
                result.skipped.append(resident_id)
                continue
            except Exception as e:
                self.log_error("Failed to process vacation", error=e, resident_id=resident_id)
                result.failures.append({'resident_id': resident_id, 'error': str(e)})
                continue

            if outcome.changed:
                result.residents.append(resident_id)
            else:
                result.skipped.append(resident_id)

        self.log_info(
            "Vacation sweep finished",
            run_date=today,
            processed=result.processed_count,
            skipped=len(result.skipped),
            failed=result.failed_count,
        )
        return result
