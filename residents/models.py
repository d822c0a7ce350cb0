from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator

from branches.models import Branch
from core.constants import ResidentStatus, PaymentStatus
from rooms.models import Room


class Resident(models.Model):
    """
    MOST IMPORTANT TABLE - A resident and the bed they hold.

    Logic:
    - pending: registered, no room
    - active / notice_period: holds exactly one (room, bed_number)
    - inactive: moved out, room cleared, never deleted
    """
    branch = models.ForeignKey(Branch, on_delete=models.CASCADE, related_name='residents')

    # Identity
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    phone = models.CharField(max_length=15)
    email = models.EmailField(blank=True)

    # Assignment
    room = models.ForeignKey(Room, on_delete=models.PROTECT, related_name='residents', null=True, blank=True)
    bed_number = models.PositiveSmallIntegerField(null=True, blank=True)

    # Lifecycle
    status = models.CharField(max_length=20, choices=ResidentStatus.CHOICES, default=ResidentStatus.PENDING)
    check_in_date = models.DateField(null=True, blank=True)
    check_out_date = models.DateField(null=True, blank=True)
    vacation_date = models.DateField(null=True, blank=True, help_text="Date the resident leaves after notice")
    notice_days = models.PositiveSmallIntegerField(null=True, blank=True)

    # Money
    rent_amount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, validators=[MinValueValidator(0)],
        help_text="Monthly rent. Empty means the room's cost per bed"
    )
    advance_amount = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    advance_date = models.DateField(null=True, blank=True)
    advance_receipt_number = models.CharField(max_length=50, blank=True)
    security_deposit = models.DecimalField(max_digits=10, decimal_places=2, default=0, validators=[MinValueValidator(0)])

    # Cached payment state, recomputed by PaymentService.refresh_status
    payment_status = models.CharField(max_length=20, choices=PaymentStatus.CHOICES, default=PaymentStatus.PENDING)
    last_payment_date = models.DateField(null=True, blank=True)
    payment_status_updated_at = models.DateTimeField(null=True, blank=True)

    notes = models.TextField(blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='created_residents'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['first_name', 'last_name']
        verbose_name = "Resident"
        verbose_name_plural = "Residents"
        constraints = [
            # One allocated resident per bed
            models.UniqueConstraint(
                fields=['room', 'bed_number'],
                condition=models.Q(status__in=ResidentStatus.ALLOCATED),
                name='unique_allocated_bed',
            ),
            models.CheckConstraint(
                condition=(
                    models.Q(room__isnull=True, bed_number__isnull=True)
                    | models.Q(room__isnull=False, bed_number__isnull=False)
                ),
                name='resident_room_and_bed_together',
            ),
            models.CheckConstraint(
                condition=(
                    ~models.Q(status=ResidentStatus.INACTIVE)
                    | models.Q(room__isnull=True, check_out_date__isnull=False)
                ),
                name='inactive_resident_has_no_room',
            ),
            models.CheckConstraint(
                condition=~models.Q(status__in=ResidentStatus.ALLOCATED) | models.Q(room__isnull=False),
                name='allocated_resident_has_room',
            ),
            models.CheckConstraint(
                condition=~models.Q(status=ResidentStatus.NOTICE_PERIOD) | models.Q(vacation_date__isnull=False),
                name='notice_resident_has_vacation_date',
            ),
        ]
        indexes = [
            models.Index(fields=['branch', 'status'], name='residents_r_branch__0f6b2e_idx'),
            models.Index(fields=['branch', 'phone'], name='residents_r_branch__a27c41_idx'),
            models.Index(fields=['status', 'vacation_date'], name='residents_r_status_5e88d3_idx'),
            models.Index(fields=['room', 'status'], name='residents_r_room_id_c4190a_idx'),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.phone})"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def monthly_rent(self):
        """Agreed rent, falling back to the room's cost per bed"""
        if self.rent_amount is not None:
            return self.rent_amount
        if self.room_id:
            return self.room.cost_per_bed
        return None

    @property
    def location(self):
        """Get human-readable location"""
        if self.room_id:
            return f"Room {self.room.room_number} - Bed {self.bed_number}"
        return "Unassigned"


class RoomSwitch(models.Model):
    """History entry for a resident moving between beds"""
    resident = models.ForeignKey(Resident, on_delete=models.CASCADE, related_name='switch_history')
    from_room = models.ForeignKey(Room, on_delete=models.SET_NULL, null=True, related_name='switches_out')
    from_bed = models.PositiveSmallIntegerField()
    to_room = models.ForeignKey(Room, on_delete=models.SET_NULL, null=True, related_name='switches_in')
    to_bed = models.PositiveSmallIntegerField()
    reason = models.CharField(max_length=255, blank=True)
    performed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True, blank=True,
        related_name='room_switches'
    )
    switched_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-switched_at', '-id']
        verbose_name = "Room Switch"
        verbose_name_plural = "Room Switches"
        indexes = [
            models.Index(fields=['resident', 'switched_at'], name='residents_r_residen_71be93_idx'),
        ]

    def __str__(self):
        from_room = self.from_room.room_number if self.from_room else '?'
        to_room = self.to_room.room_number if self.to_room else '?'
        return f"{self.resident.full_name}: {from_room}/{self.from_bed} → {to_room}/{self.to_bed}"
