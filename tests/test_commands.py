from datetime import date
from io import StringIO
from unittest import mock

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError

from common import scheduler as background
from core.constants import ResidentStatus, PaymentStatus
from residents.services import LifecycleService
from tests.conftest import JAN_1


@pytest.fixture
def on_notice(allocated_resident):
    return LifecycleService().vacate(allocated_resident.id, notice_days=7, today=JAN_1)


def test_process_vacations_dry_run_changes_nothing(on_notice):
    out = StringIO()

    call_command('process_vacations', '--dry-run', '--date', '2024-01-09', stdout=out)

    assert '1 resident(s) would be vacated' in out.getvalue()
    on_notice.refresh_from_db()
    assert on_notice.status == ResidentStatus.NOTICE_PERIOD


def test_process_vacations_finalizes(on_notice):
    out = StringIO()

    call_command('process_vacations', '--date', '2024-01-09', stdout=out)

    assert 'Processed: 1' in out.getvalue()
    on_notice.refresh_from_db()
    assert on_notice.status == ResidentStatus.INACTIVE


def test_process_vacations_reports_failures(on_notice):
    with mock.patch.object(LifecycleService, 'finalize_vacation', side_effect=RuntimeError('boom')):
        with pytest.raises(CommandError):
            call_command('process_vacations', '--date', '2024-01-09', stdout=StringIO(), stderr=StringIO())


def test_process_vacations_rejects_bad_date(db):
    with pytest.raises(CommandError):
        call_command('process_vacations', '--date', '09/01/2024', stdout=StringIO())


def test_refresh_payment_status_command(allocated_resident, branch):
    out = StringIO()

    call_command('refresh_payment_status', '--branch', str(branch.id), '--date', '2024-01-10', stdout=out)

    allocated_resident.refresh_from_db()
    assert allocated_resident.payment_status == PaymentStatus.OVERDUE
    assert 'Payment status refreshed (1 changed)' in out.getvalue()


def test_refresh_payment_status_unknown_branch(db):
    with pytest.raises(CommandError):
        call_command('refresh_payment_status', '--branch', '9999', stdout=StringIO())


def test_scheduled_vacation_job(on_notice):
    with mock.patch('django.utils.timezone.localdate', return_value=date(2024, 1, 9)):
        result = background.process_vacations_job()

    assert result.residents == [on_notice.id]


def test_scheduled_payment_job(allocated_resident):
    with mock.patch('django.utils.timezone.localdate', return_value=date(2024, 1, 10)):
        changed = background.refresh_payment_status_job()

    assert changed == 1


def test_scheduler_registers_jobs(settings):
    settings.VACATION_SWEEP_HOURS = [0, 6]
    try:
        background.start_scheduler()
        job_ids = {job.id for job in background.scheduler.get_jobs()}
        assert job_ids == {'process_vacations', 'refresh_payment_status'}
    finally:
        background.stop_scheduler()
    assert background.scheduler is None
