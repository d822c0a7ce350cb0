"""
Payment repository - Data access layer for rent payments.
"""
from typing import Dict, Optional
from django.db.models import QuerySet, Sum, Max, Count

from core.exceptions import PaymentNotFound
from core.repositories import BaseRepository
from .models import Payment


class PaymentRepository(BaseRepository[Payment]):
    """Repository for Payment model"""
    not_found_error = PaymentNotFound

    def __init__(self):
        super().__init__(Payment)

    def get_active(self, **filters) -> QuerySet[Payment]:
        return self.get_all(is_active=True, **filters)

    def get_for_month(self, resident_id: int, month: str, year: int) -> Optional[Payment]:
        """The active payment for a month, if any"""
        return self.get_active(resident_id=resident_id, month=month, year=year).first()

    def get_by_resident(self, resident_id: int, include_inactive: bool = False) -> QuerySet[Payment]:
        payments = self.get_all(resident_id=resident_id) if include_inactive else self.get_active(resident_id=resident_id)
        return payments.select_related('room', 'marked_by')

    def totals_for_resident(self, resident_id: int) -> Dict:
        return self.get_active(resident_id=resident_id).aggregate(
            total_paid=Sum('amount'),
            total_months=Count('id'),
            last_payment_date=Max('payment_date'),
        )

    def paid_resident_ids(self, month: str, year: int, branch_id: Optional[int] = None) -> set:
        payments = self.get_active(month=month, year=year)
        if branch_id:
            payments = payments.filter(branch_id=branch_id)
        return set(payments.values_list('resident_id', flat=True))

    def last_payment_dates(self, resident_ids) -> Dict[int, object]:
        rows = (
            self.get_active(resident_id__in=list(resident_ids))
            .values('resident_id')
            .annotate(last=Max('payment_date'))
        )
        return {row['resident_id']: row['last'] for row in rows}

    def month_totals(self, branch_id: int, month: str, year: int) -> QuerySet:
        """Collected amount per payment method for a month"""
        return (
            self.get_active(branch_id=branch_id, month=month, year=year)
            .values('payment_method')
            .annotate(amount=Sum('amount'), payments=Count('id'))
            .order_by('payment_method')
        )
