from datetime import date

import pytest
from django.core.exceptions import PermissionDenied
from django.db import transaction

from audit.models import AuditLog
from core.events import EventType, activity_recorded
from payments.services import PaymentService
from residents.services import AllocationManager, LifecycleService
from tests.conftest import JAN_1


def test_allocation_is_logged_after_commit(make_resident, room_101, admin_user, django_capture_on_commit_callbacks):
    resident = make_resident()

    with django_capture_on_commit_callbacks(execute=True):
        AllocationManager().allocate(resident.id, room_101.id, 2, user=admin_user, today=JAN_1)

    log = AuditLog.objects.get(action=EventType.RESIDENT_MOVE_IN)
    assert log.resource_type == 'Resident'
    assert log.resource_id == resident.id
    assert log.user == admin_user
    assert log.branch_id == resident.branch_id
    assert log.metadata['bed_number'] == 2


def test_failed_operation_emits_nothing(allocated_resident, make_resident, room_101, django_capture_on_commit_callbacks):
    other = make_resident('Meena', 'Iyer')

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        with pytest.raises(Exception):
            AllocationManager().allocate(other.id, room_101.id, 2, today=JAN_1)

    assert callbacks == []
    assert not AuditLog.objects.filter(action=EventType.RESIDENT_MOVE_IN).exists()


def test_rolled_back_transaction_emits_nothing(allocated_resident, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        try:
            with transaction.atomic():
                LifecycleService().vacate(allocated_resident.id, notice_days=7, today=JAN_1)
                raise RuntimeError('abort')
        except RuntimeError:
            pass

    assert not AuditLog.objects.filter(action=EventType.RESIDENT_NOTICE).exists()


def test_lifecycle_and_payment_events(allocated_resident, admin_user, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        LifecycleService().vacate(allocated_resident.id, notice_days=7, user=admin_user, today=JAN_1)
        PaymentService().mark_paid(allocated_resident.id, payment_date=date(2024, 1, 5), user=admin_user)
        LifecycleService().finalize_vacation(allocated_resident.id, today=date(2024, 1, 8))

    actions = list(AuditLog.objects.order_by('id').values_list('action', flat=True))
    assert actions == [EventType.RESIDENT_NOTICE, EventType.PAYMENT_CREATE, EventType.RESIDENT_MOVE_OUT]

    move_out = AuditLog.objects.get(action=EventType.RESIDENT_MOVE_OUT)
    assert move_out.user is None
    assert move_out.user_display == 'System'
    assert move_out.metadata['vacation_date'] == '2024-01-08'


def test_noop_finalize_emits_nothing(allocated_resident, django_capture_on_commit_callbacks):
    service = LifecycleService()
    service.vacate(allocated_resident.id, vacation_type='immediate', today=JAN_1)

    with django_capture_on_commit_callbacks(execute=True) as callbacks:
        service.finalize_vacation(allocated_resident.id, today=JAN_1)

    assert callbacks == []


def test_failing_receiver_does_not_break_others(make_resident, room_101, django_capture_on_commit_callbacks):
    def broken_receiver(sender, event, **kwargs):
        raise RuntimeError('dashboard offline')

    activity_recorded.connect(broken_receiver)
    try:
        resident = make_resident()
        with django_capture_on_commit_callbacks(execute=True):
            AllocationManager().allocate(resident.id, room_101.id, 1, today=JAN_1)
    finally:
        activity_recorded.disconnect(broken_receiver)

    assert AuditLog.objects.filter(action=EventType.RESIDENT_MOVE_IN).count() == 1


def test_audit_logs_are_immutable(make_resident, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        make_resident()
    log = AuditLog.objects.get(action=EventType.RESIDENT_CREATE)
    assert log.metadata == {'self_registered': True}

    log.description = 'edited'
    with pytest.raises(PermissionDenied):
        log.save()
    with pytest.raises(PermissionDenied):
        log.delete()
