"""
Activity events.

Core operations publish an ActivityEvent through the ``activity_recorded``
signal after their transaction commits. The engine never persists its own
audit trail; the audit app (or any other receiver) subscribes to the signal.
"""
import logging
from django.db import transaction
from django.dispatch import Signal
from django.utils import timezone

from core.dto import ActivityEvent

logger = logging.getLogger(__name__)

# Sent with kwargs: event (ActivityEvent)
activity_recorded = Signal()


class EventType:
    RESIDENT_CREATE = 'resident_create'
    RESIDENT_MOVE_IN = 'resident_move_in'
    RESIDENT_NOTICE = 'resident_notice'
    RESIDENT_NOTICE_CANCEL = 'resident_notice_cancel'
    RESIDENT_MOVE_OUT = 'resident_move_out'
    ROOM_SWITCH = 'room_switch'
    PAYMENT_CREATE = 'payment_create'
    PAYMENT_VOID = 'payment_void'
    PAYMENT_CORRECT = 'payment_correct'

    CHOICES = [
        (RESIDENT_CREATE, 'Resident Created'),
        (RESIDENT_MOVE_IN, 'Resident Moved In'),
        (RESIDENT_NOTICE, 'Notice Given'),
        (RESIDENT_NOTICE_CANCEL, 'Notice Withdrawn'),
        (RESIDENT_MOVE_OUT, 'Resident Moved Out'),
        (ROOM_SWITCH, 'Room Switch'),
        (PAYMENT_CREATE, 'Payment Recorded'),
        (PAYMENT_VOID, 'Payment Voided'),
        (PAYMENT_CORRECT, 'Payment Corrected'),
    ]


def emit_activity(event_type, entity_type, entity_id, user=None, branch_id=None,
                  description="", metadata=None):
    """
    Build an ActivityEvent and send it when the surrounding transaction commits.
    Rolled-back operations therefore never produce events.
    """
    event = ActivityEvent(
        type=event_type,
        entity_type=entity_type,
        entity_id=entity_id,
        user_id=getattr(user, 'pk', None),
        branch_id=branch_id,
        timestamp=timezone.now(),
        description=description,
        metadata=metadata or {},
    )
    transaction.on_commit(lambda: _send(event))
    return event


def _send(event):
    # Receivers must not break the operation that already committed
    for receiver, response in activity_recorded.send_robust(sender=ActivityEvent, event=event):
        if isinstance(response, Exception):
            logger.error(
                f"Activity receiver {receiver} failed for {event.type} #{event.entity_id}: {response}",
                exc_info=response,
            )
