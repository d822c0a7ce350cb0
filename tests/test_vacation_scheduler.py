from datetime import date
from unittest import mock

import pytest

from core.constants import ResidentStatus
from core.exceptions import SchedulerPartialFailure
from residents.services import AllocationManager, LifecycleService, VacationScheduler
from tests.conftest import JAN_1


@pytest.fixture
def on_notice(allocated_resident):
    """Gave 7 days notice on 2024-01-01, leaving 2024-01-08"""
    return LifecycleService().vacate(allocated_resident.id, notice_days=7, today=JAN_1)


def test_sweep_before_vacation_date_does_nothing(on_notice):
    result = VacationScheduler().process_overdue_vacations(today=date(2024, 1, 5))

    assert result.processed_count == 0
    assert on_notice.id not in result.residents
    on_notice.refresh_from_db()
    assert on_notice.status == ResidentStatus.NOTICE_PERIOD


def test_sweep_after_vacation_date_finalizes(on_notice):
    result = VacationScheduler().process_overdue_vacations(today=date(2024, 1, 9))

    assert result.residents == [on_notice.id]
    assert result.processed_count == 1
    on_notice.refresh_from_db()
    assert on_notice.status == ResidentStatus.INACTIVE
    assert on_notice.room_id is None
    assert on_notice.check_out_date == date(2024, 1, 9)


def test_sweep_on_vacation_date_finalizes(on_notice):
    result = VacationScheduler().process_overdue_vacations(today=date(2024, 1, 8))

    assert result.residents == [on_notice.id]


def test_overlapping_sweeps_finalize_once(on_notice):
    scheduler = VacationScheduler()

    first = scheduler.process_overdue_vacations(today=date(2024, 1, 9))
    second = scheduler.process_overdue_vacations(today=date(2024, 1, 9))

    assert first.residents == [on_notice.id]
    assert second.residents == []
    assert second.failures == []


def test_list_overdue_is_read_only(on_notice):
    overdue = VacationScheduler().list_overdue(today=date(2024, 1, 9))

    assert [r.id for r in overdue] == [on_notice.id]
    on_notice.refresh_from_db()
    assert on_notice.status == ResidentStatus.NOTICE_PERIOD


def test_sweep_limited_to_branch(on_notice, other_branch, make_resident, make_room):
    room = make_room('900', branch=other_branch)
    elsewhere = make_resident('Meena', 'Iyer', target_branch=other_branch)
    AllocationManager().allocate(elsewhere.id, room.id, 1, today=JAN_1)
    LifecycleService().vacate(elsewhere.id, notice_days=3, today=JAN_1)

    result = VacationScheduler().process_overdue_vacations(branch_id=other_branch.id, today=date(2024, 1, 9))

    assert result.residents == [elsewhere.id]
    on_notice.refresh_from_db()
    assert on_notice.status == ResidentStatus.NOTICE_PERIOD


def test_one_failure_does_not_stop_the_sweep(on_notice, make_resident, room_202):
    second = make_resident('Meena', 'Iyer')
    AllocationManager().allocate(second.id, room_202.id, 1, today=JAN_1)
    LifecycleService().vacate(second.id, notice_days=5, today=JAN_1)

    real_finalize = LifecycleService.finalize_vacation

    def flaky_finalize(self, resident_id, *args, **kwargs):
        if resident_id == second.id:
            raise RuntimeError('storage hiccup')
        return real_finalize(self, resident_id, *args, **kwargs)

    with mock.patch.object(LifecycleService, 'finalize_vacation', flaky_finalize):
        result = VacationScheduler().process_overdue_vacations(today=date(2024, 1, 9))

    assert result.residents == [on_notice.id]
    assert result.failures == [{'resident_id': second.id, 'error': 'storage hiccup'}]

    with pytest.raises(SchedulerPartialFailure) as excinfo:
        result.raise_for_failures()
    assert excinfo.value.failures == result.failures


def test_withdrawn_notice_is_skipped(on_notice):
    scheduler = VacationScheduler()
    real_finalize = LifecycleService.finalize_vacation

    def withdraw_then_finalize(self, resident_id, *args, **kwargs):
        LifecycleService().cancel_notice(resident_id)
        return real_finalize(self, resident_id, *args, **kwargs)

    with mock.patch.object(LifecycleService, 'finalize_vacation', withdraw_then_finalize):
        result = scheduler.process_overdue_vacations(today=date(2024, 1, 9))

    assert result.skipped == [on_notice.id]
    assert result.failures == []
    on_notice.refresh_from_db()
    assert on_notice.status == ResidentStatus.ACTIVE


def test_sweep_result_as_dict(on_notice):
    data = VacationScheduler().process_overdue_vacations(today=date(2024, 1, 9)).as_dict()

    assert data['run_date'] == '2024-01-09'
    assert data['processed_count'] == 1
    assert data['failed_count'] == 0
