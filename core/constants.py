"""
Application-wide constants.
Centralized constants following DRY principle.
"""
from django.conf import settings


# User Roles
class UserRole:
    SUPERADMIN = 'superadmin'
    ADMIN = 'admin'
    SUPPORT = 'support'

    CHOICES = [
        (SUPERADMIN, 'Superadmin'),
        (ADMIN, 'Admin'),
        (SUPPORT, 'Support'),
    ]

    MANAGERS = [SUPERADMIN, ADMIN]


# Room sharing types - value is the bed capacity
class SharingType:
    SINGLE = 1
    DOUBLE = 2
    TRIPLE = 3
    QUAD = 4

    CHOICES = [
        (SINGLE, '1-sharing'),
        (DOUBLE, '2-sharing'),
        (TRIPLE, '3-sharing'),
        (QUAD, '4-sharing'),
    ]

    @classmethod
    def capacity(cls, sharing_type):
        """Number of beds a sharing type holds"""
        return int(sharing_type)

    @classmethod
    def label(cls, sharing_type):
        return dict(cls.CHOICES).get(sharing_type, f"{sharing_type}-sharing")


# Resident Status
class ResidentStatus:
    PENDING = 'pending'
    ACTIVE = 'active'
    NOTICE_PERIOD = 'notice_period'
    INACTIVE = 'inactive'

    CHOICES = [
        (PENDING, 'Pending'),
        (ACTIVE, 'Active'),
        (NOTICE_PERIOD, 'Notice Period'),
        (INACTIVE, 'Inactive'),
    ]

    # Statuses that hold a bed
    ALLOCATED = [ACTIVE, NOTICE_PERIOD]
    # Statuses allowed to receive a first allocation
    ALLOCATABLE = [PENDING, ACTIVE]


# Vacation types
class VacationType:
    NOTICE = 'notice'
    IMMEDIATE = 'immediate'

    CHOICES = [
        (NOTICE, 'Notice Period'),
        (IMMEDIATE, 'Immediate'),
    ]


# Payment Status (cached on resident)
class PaymentStatus:
    PAID = 'paid'
    PENDING = 'pending'
    OVERDUE = 'overdue'

    CHOICES = [
        (PAID, 'Paid'),
        (PENDING, 'Pending'),
        (OVERDUE, 'Overdue'),
    ]


# Payment Methods
class PaymentMethod:
    CASH = 'cash'
    UPI = 'upi'

    CHOICES = [
        (CASH, 'Cash'),
        (UPI, 'UPI'),
    ]

    REQUIRES_RECEIPT = [UPI]


# Default Limits
class DefaultLimits:
    MIN_NOTICE_DAYS = 1
    MAX_NOTICE_DAYS = 30
    DEFAULT_NOTICE_DAYS = 30
    RENT_DUE_DAY = 2
    RECENT_PAYMENTS_LIMIT = 3


def engine_setting(name):
    """
    Read an engine limit, letting settings.PG_ENGINE override the defaults.

    Example:
        PG_ENGINE = {'MAX_NOTICE_DAYS': 45}
    """
    overrides = getattr(settings, 'PG_ENGINE', None) or {}
    if name in overrides:
        return overrides[name]
    return getattr(DefaultLimits, name)


# Payment records store the calendar month by name
MONTH_NAMES = (
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
)
