from datetime import date
from unittest import mock

import pytest
from django.db import IntegrityError, transaction

from core.constants import ResidentStatus
from core.exceptions import (
    BedAlreadyOccupied, InvalidTransition, ResidentNotAllocated, SameAssignmentError,
    ValidationError, RoomNotFound,
)
from residents.models import Resident
from residents.repositories import ResidentRepository
from residents.services import AllocationManager, LifecycleService
from rooms.services import InventoryService
from tests.conftest import JAN_1


def test_allocate_pending_resident(make_resident, room_101):
    resident = make_resident()

    resident = AllocationManager().allocate(resident.id, room_101.id, 2, today=JAN_1)

    assert resident.status == ResidentStatus.ACTIVE
    assert resident.room_id == room_101.id
    assert resident.bed_number == 2
    assert resident.check_in_date == JAN_1


def test_allocate_keeps_existing_check_in_date(make_resident, room_101):
    resident = make_resident(check_in_date=date(2023, 12, 20))

    resident = AllocationManager().allocate(resident.id, room_101.id, 1, today=JAN_1)

    assert resident.check_in_date == date(2023, 12, 20)


def test_second_resident_cannot_take_occupied_bed(allocated_resident, make_resident, room_101):
    other = make_resident('Meena', 'Iyer')

    with pytest.raises(BedAlreadyOccupied):
        AllocationManager().allocate(other.id, room_101.id, 2, today=JAN_1)

    other.refresh_from_db()
    assert other.status == ResidentStatus.PENDING
    assert other.room_id is None


def test_bed_race_lost_at_write_time_surfaces_as_occupied(allocated_resident, make_resident, room_101):
    """The pre-check passes but the unique constraint rejects the write"""
    other = make_resident('Meena', 'Iyer')

    with mock.patch.object(ResidentRepository, 'bed_taken', return_value=False):
        with pytest.raises(BedAlreadyOccupied):
            AllocationManager().allocate(other.id, room_101.id, 2, today=JAN_1)

    other.refresh_from_db()
    assert other.room_id is None
    holders = Resident.objects.filter(room=room_101, bed_number=2, status__in=ResidentStatus.ALLOCATED)
    assert holders.count() == 1


def test_storage_rejects_two_allocated_residents_on_one_bed(allocated_resident, make_resident, room_101):
    other = make_resident('Meena', 'Iyer')

    with pytest.raises(IntegrityError):
        with transaction.atomic():
            Resident.objects.filter(id=other.id).update(
                room=room_101, bed_number=2, status=ResidentStatus.ACTIVE
            )


def test_inactive_resident_releases_bed_for_reuse(allocated_resident, make_resident, room_101):
    LifecycleService().vacate(allocated_resident.id, vacation_type='immediate', today=JAN_1)
    newcomer = make_resident('Meena', 'Iyer')

    newcomer = AllocationManager().allocate(newcomer.id, room_101.id, 2, today=JAN_1)

    assert newcomer.bed_number == 2


def test_allocate_rejects_resident_holding_a_bed(allocated_resident, room_101):
    with pytest.raises(InvalidTransition):
        AllocationManager().allocate(allocated_resident.id, room_101.id, 1, today=JAN_1)


def test_allocate_rejects_inactive_resident(allocated_resident, room_101):
    LifecycleService().vacate(allocated_resident.id, vacation_type='immediate', today=JAN_1)

    with pytest.raises(InvalidTransition):
        AllocationManager().allocate(allocated_resident.id, room_101.id, 1, today=JAN_1)


@pytest.mark.parametrize('bed_number', [0, 3, 'x'])
def test_allocate_rejects_bed_outside_room(make_resident, room_101, bed_number):
    resident = make_resident()

    with pytest.raises(ValidationError):
        AllocationManager().allocate(resident.id, room_101.id, bed_number, today=JAN_1)


def test_allocate_rejects_room_from_another_branch(make_resident, make_room, other_branch):
    resident = make_resident()
    foreign_room = make_room('900', branch=other_branch)

    with pytest.raises(ValidationError) as excinfo:
        AllocationManager().allocate(resident.id, foreign_room.id, 1, today=JAN_1)
    assert excinfo.value.code == 'ROOM_BRANCH_MISMATCH'


def test_allocate_unknown_room(make_resident):
    with pytest.raises(RoomNotFound):
        AllocationManager().allocate(make_resident().id, 555555, 1, today=JAN_1)


def test_switch_room_moves_resident_and_records_history(allocated_resident, room_101, room_202, admin_user):
    manager = AllocationManager()

    result = manager.switch_room(allocated_resident.id, room_202.id, 1, 'upgrade', user=admin_user)

    assert result.previous == {'room_id': room_101.id, 'room_number': '101', 'bed_number': 2}
    assert result.current == {'room_id': room_202.id, 'room_number': '202', 'bed_number': 1}
    assert result.resident.room_id == room_202.id
    assert result.resident.status == ResidentStatus.ACTIVE

    beds = InventoryService().list_available_beds(room_101.branch_id, room_id=room_101.id)
    assert beds[0].available_bed_numbers == [1, 2]

    history = manager.switch_history(allocated_resident.id)
    assert len(history) == 1
    assert history[0].from_room_id == room_101.id
    assert history[0].from_bed == 2
    assert history[0].to_room_id == room_202.id
    assert history[0].reason == 'upgrade'
    assert history[0].performed_by == admin_user


def test_switch_within_same_room(allocated_resident, room_101):
    result = AllocationManager().switch_room(allocated_resident.id, room_101.id, 1)

    assert result.current['bed_number'] == 1
    assert result.history.reason == 'Room switch'


def test_switch_keeps_notice_period(allocated_resident, room_202):
    LifecycleService().vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    result = AllocationManager().switch_room(allocated_resident.id, room_202.id, 3)

    assert result.resident.status == ResidentStatus.NOTICE_PERIOD
    assert result.resident.vacation_date == date(2024, 1, 8)


def test_switch_to_current_bed_fails(allocated_resident, room_101):
    with pytest.raises(SameAssignmentError):
        AllocationManager().switch_room(allocated_resident.id, room_101.id, 2)


def test_switch_to_occupied_bed_fails(allocated_resident, make_resident, room_202):
    other = make_resident('Meena', 'Iyer')
    AllocationManager().allocate(other.id, room_202.id, 1, today=JAN_1)

    with pytest.raises(BedAlreadyOccupied):
        AllocationManager().switch_room(allocated_resident.id, room_202.id, 1)

    allocated_resident.refresh_from_db()
    assert allocated_resident.bed_number == 2
    assert not allocated_resident.switch_history.exists()


def test_switch_requires_allocated_resident(make_resident, room_202):
    with pytest.raises(ResidentNotAllocated):
        AllocationManager().switch_room(make_resident().id, room_202.id, 1)


def test_deallocate_is_conditional_on_status(allocated_resident):
    manager = AllocationManager()

    assert manager.deallocate(allocated_resident.id, [ResidentStatus.NOTICE_PERIOD]) is False
    allocated_resident.refresh_from_db()
    assert allocated_resident.room_id is not None
