from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError as DjangoValidationError

from core.exceptions import RoomNotFound, RoomInUseError
from residents.services import AllocationManager, LifecycleService
from rooms.services import InventoryService
from tests.conftest import JAN_1


def test_empty_room_lists_every_bed(room_101):
    beds = InventoryService().list_available_beds(room_101.branch_id)

    assert len(beds) == 1
    assert beds[0].room_id == room_101.id
    assert beds[0].available_bed_numbers == [1, 2]
    assert beds[0].occupied_bed_numbers == []
    assert beds[0].cost == Decimal('8000.00')
    assert beds[0].sharing_label == '2-sharing'


def test_allocated_bed_is_excluded_until_immediate_vacate(allocated_resident, room_101):
    service = InventoryService()
    beds = service.list_available_beds(room_101.branch_id, room_id=room_101.id)
    assert beds[0].available_bed_numbers == [1]
    assert beds[0].occupied_bed_numbers == [2]

    LifecycleService().vacate(allocated_resident.id, vacation_type='immediate', today=JAN_1)

    beds = service.list_available_beds(room_101.branch_id, room_id=room_101.id)
    assert beds[0].available_bed_numbers == [1, 2]


def test_notice_period_resident_still_occupies_bed(allocated_resident, room_101):
    LifecycleService().vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    occupancy = InventoryService().get_room_occupancy(room_101.id)
    assert occupancy.occupied_count == 1
    assert occupancy.available_beds == [1]


def test_full_room_is_a_valid_result(make_resident, room_101):
    manager = AllocationManager()
    for bed in (1, 2):
        manager.allocate(make_resident().id, room_101.id, bed, today=JAN_1)

    beds = InventoryService().list_available_beds(room_101.branch_id)
    assert beds[0].available_bed_numbers == []
    assert beds[0].available_count == 0

    assert InventoryService().list_available_beds(room_101.branch_id, only_available=True) == []


def test_rooms_with_most_free_beds_come_first(allocated_resident, room_101, room_202, make_room):
    make_room('050', sharing_type=1)

    beds = InventoryService().list_available_beds(room_101.branch_id)

    assert [item.room_number for item in beds] == ['202', '050', '101']


def test_filters_by_sharing_type_and_excluded_room(room_101, room_202):
    service = InventoryService()

    triples = service.list_available_beds(room_101.branch_id, sharing_type=3)
    assert [item.room_id for item in triples] == [room_202.id]

    others = service.list_available_beds(room_101.branch_id, exclude_room_id=room_101.id)
    assert [item.room_id for item in others] == [room_202.id]


def test_inactive_rooms_are_not_listed(make_room, branch):
    make_room('301', is_active=False)

    assert InventoryService().list_available_beds(branch.id) == []


def test_room_occupancy_for_unknown_room(db):
    with pytest.raises(RoomNotFound):
        InventoryService().get_room_occupancy(987654)


def test_room_stats_break_down_by_sharing_type(allocated_resident, room_101, room_202):
    stats = InventoryService().get_room_stats(room_101.branch_id)

    assert stats['total_rooms'] == 2
    assert stats['total_beds'] == 5
    assert stats['occupied_beds'] == 1
    assert stats['available_beds'] == 4
    doubles = stats['sharing_type_breakdown'][0]
    assert doubles['sharing_type'] == 2
    assert doubles['occupied_beds'] == 1


def test_bed_count_must_match_sharing_type(make_room):
    with pytest.raises(DjangoValidationError):
        make_room('401', sharing_type=2, bed_count=3)


def test_room_cannot_shrink_below_its_occupants(make_resident, room_202):
    manager = AllocationManager()
    for bed in (1, 2, 3):
        resident = make_resident('Guest', f'Bed{bed}')
        manager.allocate(resident.id, room_202.id, bed, today=JAN_1)

    room_202.sharing_type = 1
    room_202.bed_count = 1
    with pytest.raises(DjangoValidationError) as excinfo:
        room_202.save()

    assert 'bed_count' in excinfo.value.message_dict
    occupancy = InventoryService().get_room_occupancy(room_202.id)
    assert occupancy.bed_count == 3
    assert occupancy.occupied_count == 3


def test_room_can_shrink_when_occupants_fit(make_resident, room_202):
    resident = make_resident('Asha', 'Rao')
    AllocationManager().allocate(resident.id, room_202.id, 1, today=JAN_1)

    room_202.sharing_type = 1
    room_202.bed_count = 1
    room_202.save()

    room_202.refresh_from_db()
    assert room_202.bed_count == 1


def test_occupied_room_cannot_be_deactivated(allocated_resident, room_101):
    room_101.is_active = False
    with pytest.raises(DjangoValidationError) as excinfo:
        room_101.save()

    assert 'is_active' in excinfo.value.message_dict


def test_room_can_be_deactivated_after_move_out(allocated_resident, room_101):
    LifecycleService().vacate(allocated_resident.id, vacation_type='immediate', today=JAN_1)

    room_101.is_active = False
    room_101.save()

    room_101.refresh_from_db()
    assert room_101.is_active is False


def test_room_with_residents_cannot_be_deleted(allocated_resident, room_101):
    with pytest.raises(RoomInUseError):
        room_101.delete()
