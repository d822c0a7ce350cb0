"""
Validation utilities and validators.
Centralized validation logic following single responsibility principle.
"""
import re
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from core.constants import PaymentMethod, engine_setting
from core.exceptions import ValidationError as AppValidationError

PHONE_RE = re.compile(r'^[0-9]{10}$')
EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[A-Za-z]{2,}$')


class ResidentValidator:
    """Validates resident identity data"""

    REQUIRED_FIELDS = ('first_name', 'last_name', 'phone')

    @classmethod
    def validate_identity(cls, data):
        missing = [name for name in cls.REQUIRED_FIELDS if not str(getattr(data, name, '') or '').strip()]
        if missing:
            raise AppValidationError(
                message=f"Missing required fields: {', '.join(missing)}",
                code="MISSING_IDENTITY_FIELDS",
                details={"missing": missing}
            )
        if not PHONE_RE.match(str(data.phone).strip()):
            raise AppValidationError(
                message="Please enter a valid 10-digit phone number",
                code="INVALID_PHONE",
                details={"phone": data.phone}
            )
        email = (data.email or '').strip()
        if email and not EMAIL_RE.match(email):
            raise AppValidationError(
                message="Please enter a valid email",
                code="INVALID_EMAIL",
                details={"email": email}
            )


class RentValidator:
    """Validates rent-related operations"""

    @staticmethod
    def validate_rent_amount(amount):
        """Validate rent amount and return it as Decimal"""
        try:
            amount = Decimal(str(amount))
        except (InvalidOperation, TypeError, ValueError):
            raise AppValidationError(
                message="Rent amount must be a number",
                code="INVALID_RENT_AMOUNT"
            )
        if amount <= 0:
            raise AppValidationError(
                message="Rent amount must be greater than zero",
                code="INVALID_RENT_AMOUNT"
            )
        if amount > Decimal('9999999.99'):
            raise AppValidationError(
                message="Rent amount exceeds maximum allowed",
                code="RENT_AMOUNT_TOO_LARGE"
            )
        return amount


class PaymentValidator:
    """Validates manual payment marking"""

    @staticmethod
    def validate_method(payment_method, receipt_image=None):
        valid = [value for value, _ in PaymentMethod.CHOICES]
        if payment_method not in valid:
            raise AppValidationError(
                message=f"Payment method must be one of: {', '.join(valid)}",
                code="INVALID_PAYMENT_METHOD",
                details={"payment_method": payment_method}
            )
        if payment_method in PaymentMethod.REQUIRES_RECEIPT and not receipt_image:
            raise AppValidationError(
                message="Receipt image is required for UPI payments",
                code="RECEIPT_REQUIRED"
            )


class NoticeValidator:
    """Validates notice-period vacation requests"""

    @staticmethod
    def validate_notice_days(notice_days):
        minimum = engine_setting('MIN_NOTICE_DAYS')
        maximum = engine_setting('MAX_NOTICE_DAYS')
        try:
            notice_days = int(notice_days)
        except (TypeError, ValueError):
            raise AppValidationError(
                message="Notice days must be a whole number",
                code="INVALID_NOTICE_DAYS"
            )
        if notice_days < minimum or notice_days > maximum:
            raise AppValidationError(
                message=f"Notice days must be between {minimum} and {maximum} days",
                code="INVALID_NOTICE_DAYS",
                details={"notice_days": notice_days, "min": minimum, "max": maximum}
            )
        return notice_days

    @staticmethod
    def validate_vacation_date(vacation_date: Optional[date], today: date):
        if vacation_date is not None and vacation_date <= today:
            raise AppValidationError(
                message="Vacation date must be in the future",
                code="INVALID_VACATION_DATE",
                details={"vacation_date": vacation_date.isoformat(), "today": today.isoformat()}
            )


class OccupancyValidator:
    """Validates bed assignment input"""

    @staticmethod
    def validate_bed_number(bed_number, bed_count):
        try:
            bed_number = int(bed_number)
        except (TypeError, ValueError):
            raise AppValidationError(
                message="Bed number must be a whole number",
                code="INVALID_BED_NUMBER"
            )
        if bed_number < 1 or bed_number > bed_count:
            raise AppValidationError(
                message=f"Bed number must be between 1 and {bed_count}",
                code="INVALID_BED_NUMBER",
                details={"bed_number": bed_number, "bed_count": bed_count}
            )
        return bed_number
