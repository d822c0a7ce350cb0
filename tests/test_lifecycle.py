from datetime import date

import pytest

from core.constants import ResidentStatus
from core.exceptions import InvalidTransition, ValidationError
from residents.services import LifecycleService
from tests.conftest import JAN_1


def test_notice_sets_vacation_date_and_keeps_bed(allocated_resident, room_101):
    resident = LifecycleService().vacate(allocated_resident.id, vacation_type='notice', notice_days=7, today=JAN_1)

    assert resident.status == ResidentStatus.NOTICE_PERIOD
    assert resident.vacation_date == date(2024, 1, 8)
    assert resident.notice_days == 7
    assert resident.room_id == room_101.id
    assert resident.bed_number == 2


def test_notice_defaults_to_branch_notice_period(allocated_resident, branch):
    branch.notice_period_days = 15
    branch.save()

    resident = LifecycleService().vacate(allocated_resident.id, today=JAN_1)

    assert resident.notice_days == 15
    assert resident.vacation_date == date(2024, 1, 16)


def test_notice_with_explicit_vacation_date(allocated_resident):
    resident = LifecycleService().vacate(
        allocated_resident.id, notice_days=10, vacation_date=date(2024, 1, 20), today=JAN_1
    )

    assert resident.vacation_date == date(2024, 1, 20)
    assert resident.notice_days == 10


@pytest.mark.parametrize('notice_days', [0, 31, 45])
def test_notice_days_outside_limits(allocated_resident, notice_days):
    with pytest.raises(ValidationError):
        LifecycleService().vacate(allocated_resident.id, notice_days=notice_days, today=JAN_1)

    allocated_resident.refresh_from_db()
    assert allocated_resident.status == ResidentStatus.ACTIVE


def test_notice_cap_can_be_raised_in_settings(allocated_resident, settings):
    settings.PG_ENGINE = {'MAX_NOTICE_DAYS': 60}

    resident = LifecycleService().vacate(allocated_resident.id, notice_days=45, today=JAN_1)

    assert resident.vacation_date == date(2024, 2, 15)


@pytest.mark.parametrize('vacation_date', [JAN_1, date(2023, 12, 31)])
def test_vacation_date_must_be_in_future(allocated_resident, vacation_date):
    with pytest.raises(ValidationError):
        LifecycleService().vacate(allocated_resident.id, notice_days=7, vacation_date=vacation_date, today=JAN_1)


def test_repeated_identical_notice_is_a_no_op(allocated_resident):
    service = LifecycleService()
    first = service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    second = service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    assert second.status == ResidentStatus.NOTICE_PERIOD
    assert second.vacation_date == first.vacation_date
    assert second.updated_at == first.updated_at


def test_conflicting_second_notice_fails(allocated_resident):
    service = LifecycleService()
    service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    with pytest.raises(InvalidTransition):
        service.vacate(allocated_resident.id, notice_days=14, today=JAN_1)


def test_non_numeric_notice_on_resident_already_in_notice(allocated_resident):
    service = LifecycleService()
    service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    with pytest.raises(ValidationError) as excinfo:
        service.vacate(allocated_resident.id, notice_days='a week', today=JAN_1)

    assert excinfo.value.code == 'INVALID_NOTICE_DAYS'


def test_repeated_notice_given_as_text_is_a_no_op(allocated_resident):
    service = LifecycleService()
    first = service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    second = service.vacate(allocated_resident.id, notice_days='7', today=JAN_1)

    assert second.vacation_date == first.vacation_date


def test_pending_resident_cannot_vacate(make_resident):
    resident = make_resident()

    with pytest.raises(InvalidTransition):
        LifecycleService().vacate(resident.id, notice_days=7, today=JAN_1)
    with pytest.raises(InvalidTransition):
        LifecycleService().vacate(resident.id, vacation_type='immediate', today=JAN_1)


def test_unknown_vacation_type(allocated_resident):
    with pytest.raises(ValidationError):
        LifecycleService().vacate(allocated_resident.id, vacation_type='eviction', today=JAN_1)


def test_immediate_vacate_frees_bed(allocated_resident):
    day = date(2024, 1, 5)

    resident = LifecycleService().vacate(allocated_resident.id, vacation_type='immediate', today=day)

    assert resident.status == ResidentStatus.INACTIVE
    assert resident.room_id is None
    assert resident.bed_number is None
    assert resident.check_out_date == day


def test_inactive_is_terminal(allocated_resident):
    service = LifecycleService()
    service.vacate(allocated_resident.id, vacation_type='immediate', today=JAN_1)

    with pytest.raises(InvalidTransition):
        service.vacate(allocated_resident.id, vacation_type='immediate', today=JAN_1)
    with pytest.raises(InvalidTransition):
        service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)
    with pytest.raises(InvalidTransition):
        service.cancel_notice(allocated_resident.id)


def test_finalize_vacation_early(allocated_resident):
    service = LifecycleService()
    service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    result = service.finalize_vacation(allocated_resident.id, today=date(2024, 1, 4))

    assert result.changed is True
    assert result.resident.status == ResidentStatus.INACTIVE
    assert result.resident.room_id is None
    assert result.resident.check_out_date == date(2024, 1, 4)
    assert result.resident.vacation_date is None


def test_finalize_twice_changes_state_once(allocated_resident):
    service = LifecycleService()
    service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    first = service.finalize_vacation(allocated_resident.id, today=date(2024, 1, 8))
    second = service.finalize_vacation(allocated_resident.id, today=date(2024, 1, 9))

    assert first.changed is True
    assert second.changed is False
    assert second.resident.check_out_date == date(2024, 1, 8)


def test_finalize_requires_notice_period(allocated_resident):
    with pytest.raises(InvalidTransition):
        LifecycleService().finalize_vacation(allocated_resident.id, today=JAN_1)


def test_cancel_notice_returns_to_active(allocated_resident, room_101):
    service = LifecycleService()
    service.vacate(allocated_resident.id, notice_days=7, today=JAN_1)

    resident = service.cancel_notice(allocated_resident.id)

    assert resident.status == ResidentStatus.ACTIVE
    assert resident.vacation_date is None
    assert resident.notice_days is None
    assert resident.room_id == room_101.id


def test_cancel_notice_without_notice(allocated_resident):
    with pytest.raises(InvalidTransition):
        LifecycleService().cancel_notice(allocated_resident.id)
