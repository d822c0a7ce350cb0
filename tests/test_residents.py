from decimal import Decimal

import pytest

from core.constants import ResidentStatus
from core.dto import ResidentDTO
from core.exceptions import ValidationError, NotFoundError, InvalidAssignmentState, ResidentNotFound
from residents.models import Resident
from residents.repositories import ResidentRepository
from residents.services import ResidentStore


def test_create_pending_without_room(branch):
    resident = ResidentStore().create_pending(branch.id, {
        'first_name': ' Asha ',
        'last_name': 'Rao',
        'phone': '9876543210',
        'email': 'asha@example.com',
        'rent_amount': '7500',
    })

    assert resident.status == ResidentStatus.PENDING
    assert resident.room_id is None
    assert resident.bed_number is None
    assert resident.first_name == 'Asha'
    assert resident.rent_amount == Decimal('7500')
    assert resident.created_by is None


def test_create_pending_accepts_dto(branch, admin_user):
    dto = ResidentDTO(first_name='Vikram', last_name='Singh', phone='9123456780')

    resident = ResidentStore().create_pending(branch.id, dto, created_by=admin_user)

    assert resident.full_name == 'Vikram Singh'
    assert resident.created_by == admin_user


@pytest.mark.parametrize('data, code', [
    ({'last_name': 'Rao', 'phone': '9876543210'}, 'MISSING_IDENTITY_FIELDS'),
    ({'first_name': 'Asha', 'last_name': 'Rao', 'phone': '12345'}, 'INVALID_PHONE'),
    ({'first_name': 'Asha', 'last_name': 'Rao', 'phone': '9876543210', 'email': 'not-an-email'}, 'INVALID_EMAIL'),
    ({'first_name': 'Asha', 'last_name': 'Rao', 'phone': '9876543210', 'rent_amount': '0'}, 'INVALID_RENT_AMOUNT'),
])
def test_create_pending_rejects_bad_identity(branch, data, code):
    with pytest.raises(ValidationError) as excinfo:
        ResidentStore().create_pending(branch.id, data)

    assert excinfo.value.code == code
    assert not Resident.objects.exists()


def test_create_pending_for_unknown_or_closed_branch(branch):
    branch.is_active = False
    branch.save()

    with pytest.raises(NotFoundError):
        ResidentStore().create_pending(branch.id, {'first_name': 'A', 'last_name': 'B', 'phone': '9876543210'})


def test_partial_assignment_is_rejected(make_resident, room_101):
    resident = make_resident()
    resident.room = room_101

    with pytest.raises(InvalidAssignmentState):
        ResidentRepository().save_record(resident)


def test_inactive_resident_cannot_hold_a_bed(make_resident, room_101):
    resident = make_resident()
    resident.room = room_101
    resident.bed_number = 1
    resident.status = ResidentStatus.INACTIVE

    with pytest.raises(InvalidAssignmentState):
        ResidentRepository().save_record(resident)


def test_get_unknown_resident(db):
    with pytest.raises(ResidentNotFound):
        ResidentStore().get(424242)


def test_list_by_branch_filters_status_and_branch(make_resident, allocated_resident, other_branch):
    pending = make_resident('Meena', 'Iyer')
    make_resident('Other', 'Branch', target_branch=other_branch)
    store = ResidentStore()

    everyone = store.list_by_branch(allocated_resident.branch_id)
    assert {r.id for r in everyone} == {allocated_resident.id, pending.id}

    only_pending = store.list_by_branch(allocated_resident.branch_id, status=ResidentStatus.PENDING)
    assert [r.id for r in only_pending] == [pending.id]

    with pytest.raises(ValidationError):
        store.list_by_branch(allocated_resident.branch_id, status='archived')


def test_search_matches_name_and_phone(make_resident, branch):
    asha = make_resident('Asha', 'Rao', phone='9876500001')
    make_resident('Meena', 'Iyer')
    store = ResidentStore()

    assert [r.id for r in store.search(branch.id, 'asha rao')] == [asha.id]
    assert [r.id for r in store.search(branch.id, '98765000')] == [asha.id]
