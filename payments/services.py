"""
Payment service - manual rent marking and per-resident payment reconciliation.

Rent is due on RENT_DUE_DAY of each calendar month. A resident's cached
payment_status is one of:
- paid:    an active payment exists for the current month
- pending: not paid yet, due day not passed
- overdue: not paid and the due day has passed
"""
from datetime import date
from decimal import Decimal
from typing import List, Optional, Union
from django.db import IntegrityError, transaction
from django.utils import timezone

from core.constants import ResidentStatus, PaymentStatus, PaymentMethod, MONTH_NAMES, engine_setting
from core.events import EventType
from core.exceptions import (
    ValidationError, InvalidTransition, DuplicatePayment, ConcurrentModificationError,
)
from core.services import BaseService
from core.validators import PaymentValidator, RentValidator
from residents.models import Resident
from residents.repositories import ResidentRepository
from .models import Payment
from .repositories import PaymentRepository


def month_name(value: date) -> str:
    return MONTH_NAMES[value.month - 1]


def months_between(start: date, end: date) -> int:
    """Calendar months from start's month to end's month, both included"""
    if end < start:
        return 0
    return (end.year - start.year) * 12 + (end.month - start.month) + 1


class PaymentService(BaseService):
    """Service for rent payments and cached payment status"""

    CORRECTABLE_FIELDS = ('amount', 'payment_date', 'payment_method', 'receipt_image', 'notes')

    def __init__(self):
        super().__init__()
        self.payment_repo = PaymentRepository()
        self.resident_repo = ResidentRepository()

    # Status

    def is_current_month_paid(self, resident_id: int, today: Optional[date] = None) -> bool:
        today = self.resolve_today(today)
        self.resident_repo.get_or_raise(resident_id)
        return self.payment_repo.get_for_month(resident_id, month_name(today), today.year) is not None

    @staticmethod
    def status_for(is_paid: bool, today: date) -> str:
        if is_paid:
            return PaymentStatus.PAID
        if today.day > engine_setting('RENT_DUE_DAY'):
            return PaymentStatus.OVERDUE
        return PaymentStatus.PENDING

    def _store_status(self, resident: Resident, payment_status: str, last_payment_date) -> bool:
        """Write the cached status; returns whether it changed"""
        changed = resident.payment_status != payment_status
        self.resident_repo.update_where(
            {'id': resident.id},
            payment_status=payment_status,
            last_payment_date=last_payment_date,
            payment_status_updated_at=timezone.now(),
        )
        resident.payment_status = payment_status
        resident.last_payment_date = last_payment_date
        return changed

    def refresh_status(self, resident_id: int, today: Optional[date] = None) -> str:
        """Recompute and cache one resident's payment status"""
        today = self.resolve_today(today)
        resident = self.resident_repo.get_or_raise(resident_id)
        is_paid = self.payment_repo.get_for_month(resident.id, month_name(today), today.year) is not None
        last_payment_date = self.payment_repo.totals_for_resident(resident.id)['last_payment_date']
        payment_status = self.status_for(is_paid, today)
        self._store_status(resident, payment_status, last_payment_date)
        return payment_status

    def refresh_all_for_branch(self, branch_id: int, today: Optional[date] = None) -> int:
        """
        Recompute cached status for every resident holding a bed in the branch.
        Returns the number of residents whose status changed.
        """
        today = self.resolve_today(today)
        residents = list(self.resident_repo.get_billable(branch_id))
        paid_ids = self.payment_repo.paid_resident_ids(month_name(today), today.year, branch_id=branch_id)
        last_dates = self.payment_repo.last_payment_dates(resident.id for resident in residents)

        changed = 0
        with transaction.atomic():
            for resident in residents:
                payment_status = self.status_for(resident.id in paid_ids, today)
                if self._store_status(resident, payment_status, last_dates.get(resident.id)):
                    changed += 1

        self.log_info("Payment status refreshed", branch_id=branch_id, residents=len(residents), changed=changed)
        return changed

    # Marking payments

    @staticmethod
    def _resolve_amount(resident: Resident, amount) -> Decimal:
        if amount is not None:
            return RentValidator.validate_rent_amount(amount)
        rent = resident.monthly_rent
        if rent is None:
            raise ValidationError(
                message="No rent amount is known for this resident, enter the amount",
                code="AMOUNT_REQUIRED"
            )
        return RentValidator.validate_rent_amount(rent)

    def _create_payment(self, **fields) -> Payment:
        try:
            with transaction.atomic():
                return self.payment_repo.create(**fields)
        except IntegrityError as e:
            raise DuplicatePayment(details={'month': fields['month'], 'year': fields['year']}) from e

    def mark_paid(self, resident_id: int, payment_date: Optional[date] = None,
                  payment_method: str = PaymentMethod.CASH, receipt_image=None,
                  amount: Optional[Union[Decimal, str]] = None, notes: str = '', user=None) -> Payment:
        """
        Record the rent for the month of payment_date (today when omitted).

        Raises:
            ValidationError: Bad method, missing UPI receipt, unknown amount,
                or the resident is pending/inactive
            DuplicatePayment: Month already has an active payment
        """
        today = self.resolve_today()
        payment_date = payment_date or today
        PaymentValidator.validate_method(payment_method, receipt_image)

        with transaction.atomic():
            resident = self.resident_repo.get_or_raise(resident_id)
            if resident.status in (ResidentStatus.PENDING, ResidentStatus.INACTIVE):
                raise ValidationError(
                    message=f"Cannot record rent for a {resident.get_status_display().lower()} resident",
                    code="RESIDENT_NOT_BILLABLE",
                    details={'status': resident.status}
                )

            month, year = month_name(payment_date), payment_date.year
            if self.payment_repo.get_for_month(resident.id, month, year):
                raise DuplicatePayment(
                    message=f"Rent for {month} {year} is already marked as paid",
                    details={'month': month, 'year': year}
                )

            payment = self._create_payment(
                resident=resident,
                room_id=resident.room_id,
                branch_id=resident.branch_id,
                month=month,
                year=year,
                amount=self._resolve_amount(resident, amount),
                payment_method=payment_method,
                payment_date=payment_date,
                receipt_image=receipt_image,
                notes=notes or '',
                marked_by=user,
            )

            self.log_info(
                f"Payment recorded: {resident.full_name} {month} {year}",
                payment_id=payment.id, resident_id=resident.id, amount=payment.amount
            )
            self.emit(
                EventType.PAYMENT_CREATE, payment, user=user, branch_id=resident.branch_id,
                description=f"Rent for {month} {year} marked paid for {resident.full_name}",
                metadata={
                    'resident_id': resident.id, 'month': month, 'year': year,
                    'amount': str(payment.amount), 'payment_method': payment_method,
                },
            )
            self.refresh_status(resident.id, today=today)
        return payment

    def _deactivate(self, payment: Payment, user, **changes):
        changed = self.payment_repo.update_where(
            {'id': payment.id, 'is_active': True},
            is_active=False,
            voided_at=timezone.now(),
            voided_by=user,
            **changes
        )
        if not changed:
            raise ConcurrentModificationError(details={'payment_id': payment.id})

    def void_payment(self, payment_id: int, user=None, reason: str = '') -> Payment:
        """Deactivate a payment recorded by mistake"""
        with transaction.atomic():
            payment = self.payment_repo.lock(payment_id)
            if not payment.is_active:
                raise InvalidTransition(message="Payment is already voided", details={'payment_id': payment.id})

            self._deactivate(payment, user)
            payment.refresh_from_db()

            self.log_info("Payment voided", payment_id=payment.id, resident_id=payment.resident_id, reason=reason)
            self.emit(
                EventType.PAYMENT_VOID, payment, user=user, branch_id=payment.branch_id,
                description=f"Payment for {payment.month} {payment.year} voided",
                metadata={'resident_id': payment.resident_id, 'reason': reason, 'amount': str(payment.amount)},
            )
            self.refresh_status(payment.resident_id)
        return payment

    def correct_payment(self, payment_id: int, user=None, **fields) -> Payment:
        """
        Replace a payment with a corrected copy. The old record is deactivated
        and points to the new one through superseded_by.
        """
        unknown = set(fields) - set(self.CORRECTABLE_FIELDS)
        if unknown:
            raise ValidationError(
                message=f"Fields cannot be corrected: {', '.join(sorted(unknown))}",
                code="INVALID_CORRECTION"
            )

        with transaction.atomic():
            old = self.payment_repo.lock(payment_id)
            if not old.is_active:
                raise InvalidTransition(message="Only active payments can be corrected", details={'payment_id': old.id})

            payment_date = fields.get('payment_date') or old.payment_date
            payment_method = fields.get('payment_method') or old.payment_method
            receipt_image = fields.get('receipt_image') or old.receipt_image or None
            PaymentValidator.validate_method(payment_method, receipt_image)
            amount = RentValidator.validate_rent_amount(fields.get('amount', old.amount))

            month, year = month_name(payment_date), payment_date.year
            clash = self.payment_repo.get_for_month(old.resident_id, month, year)
            if clash and clash.id != old.id:
                raise DuplicatePayment(
                    message=f"Rent for {month} {year} is already marked as paid",
                    details={'month': month, 'year': year}
                )

            self._deactivate(old, user)
            replacement = self._create_payment(
                resident_id=old.resident_id,
                room_id=old.room_id,
                branch_id=old.branch_id,
                month=month,
                year=year,
                amount=amount,
                payment_method=payment_method,
                payment_date=payment_date,
                receipt_image=receipt_image,
                notes=fields.get('notes', old.notes),
                marked_by=user,
            )
            self.payment_repo.update_where({'id': old.id}, superseded_by=replacement)

            self.log_info("Payment corrected", old_payment_id=old.id, payment_id=replacement.id)
            self.emit(
                EventType.PAYMENT_CORRECT, replacement, user=user, branch_id=replacement.branch_id,
                description=f"Payment for {old.month} {old.year} corrected",
                metadata={
                    'resident_id': old.resident_id,
                    'superseded_payment_id': old.id,
                    'changes': sorted(fields),
                },
            )
            self.refresh_status(old.resident_id)
        return replacement

    # Reads

    def payment_history(self, resident_id: int, include_inactive: bool = False) -> List[Payment]:
        self.resident_repo.get_or_raise(resident_id)
        return list(self.payment_repo.get_by_resident(resident_id, include_inactive=include_inactive))

    def expected_months(self, resident: Resident, today: date) -> int:
        """Months billed so far, counting the check-in month and the current (or check-out) month"""
        if resident.check_in_date is None:
            return 0
        end = today
        if resident.status == ResidentStatus.INACTIVE and resident.check_out_date:
            end = resident.check_out_date
        return months_between(resident.check_in_date, end)

    def get_summary(self, resident_id: int, today: Optional[date] = None) -> dict:
        """Payment overview of one resident"""
        today = self.resolve_today(today)
        resident = self.resident_repo.get_or_raise(resident_id)
        totals = self.payment_repo.totals_for_resident(resident.id)
        total_paid = totals['total_paid'] or Decimal('0')
        total_months = totals['total_months'] or 0

        current = self.payment_repo.get_for_month(resident.id, month_name(today), today.year)
        rent = resident.monthly_rent
        expected_months = self.expected_months(resident, today)
        expected_total = (rent or Decimal('0')) * expected_months

        recent = self.payment_repo.get_by_resident(resident.id)[:engine_setting('RECENT_PAYMENTS_LIMIT')]

        return {
            'resident_id': resident.id,
            'current_month': {
                'month': month_name(today),
                'year': today.year,
                'is_paid': current is not None,
                'amount': current.amount if current else None,
                'status': self.status_for(current is not None, today),
                'payment_date': current.payment_date if current else None,
                'payment_method': current.payment_method if current else None,
            },
            'total_paid': total_paid,
            'total_months': total_months,
            'average_amount': (total_paid / total_months).quantize(Decimal('0.01')) if total_months else Decimal('0'),
            'last_payment_date': totals['last_payment_date'],
            'expected_monthly_rent': rent,
            'expected_months': expected_months,
            'pending_amount': max(Decimal('0'), expected_total - total_paid),
            'advance_payment': {
                'amount': resident.advance_amount,
                'date': resident.advance_date,
                'receipt_number': resident.advance_receipt_number,
            },
            'security_deposit': resident.security_deposit,
            'recent_payments': [
                {
                    'id': payment.id,
                    'month': payment.month,
                    'year': payment.year,
                    'amount': payment.amount,
                    'payment_method': payment.payment_method,
                    'payment_date': payment.payment_date,
                }
                for payment in recent
            ],
        }

    def monthly_stats(self, branch_id: int, month: Union[str, int], year: int) -> dict:
        """Collection figures for one month of a branch"""
        if isinstance(month, int) or str(month).isdigit():
            month_index = int(month)
            if not 1 <= month_index <= 12:
                raise ValidationError(message="Month must be between 1 and 12", code="INVALID_MONTH")
            month = MONTH_NAMES[month_index - 1]
        elif month not in MONTH_NAMES:
            raise ValidationError(message=f"Unknown month: {month}", code="INVALID_MONTH")
        year = int(year)

        by_method = list(self.payment_repo.month_totals(branch_id, month, year))
        paid_ids = self.payment_repo.paid_resident_ids(month, year, branch_id=branch_id)
        billable_ids = set(self.resident_repo.get_billable(branch_id).values_list('id', flat=True))

        return {
            'branch_id': branch_id,
            'month': month,
            'year': year,
            'collected_amount': sum((row['amount'] for row in by_method), Decimal('0')),
            'payment_count': sum(row['payments'] for row in by_method),
            'paid_count': len(paid_ids),
            'unpaid_count': len(billable_ids - paid_ids),
            'by_method': {row['payment_method']: row['amount'] for row in by_method},
        }
