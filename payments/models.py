from django.db import models
from django.conf import settings
from django.core.validators import MinValueValidator, FileExtensionValidator

from branches.models import Branch
from core.constants import PaymentMethod, MONTH_NAMES
from residents.models import Resident
from rooms.models import Room


def payment_receipt_path(instance, filename):
    """File will be uploaded to MEDIA_ROOT/payment_receipts/<resident_id>/<year>_<month>_<filename>"""
    return f'payment_receipts/{instance.resident_id}/{instance.year}_{instance.month}_{filename}'


class Payment(models.Model):
    """
    Monthly rent payment, marked manually by staff.

    Records are never edited: a correction deactivates the record and links it
    to its replacement through superseded_by.
    """
    resident = models.ForeignKey(Resident, on_delete=models.CASCADE, related_name='payments')
    room = models.ForeignKey(Room, on_delete=models.SET_NULL, null=True, blank=True, related_name='payments',
                             help_text="Room the resident held when paying")
    branch = models.ForeignKey(Branch, on_delete=models.CASCADE, related_name='payments')
    month = models.CharField(max_length=10, choices=[(name, name) for name in MONTH_NAMES])
    year = models.IntegerField()
    amount = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    payment_method = models.CharField(max_length=10, choices=PaymentMethod.CHOICES, default=PaymentMethod.CASH)
    payment_date = models.DateField()
    receipt_image = models.FileField(
        upload_to=payment_receipt_path,
        null=True,
        blank=True,
        validators=[FileExtensionValidator(allowed_extensions=['pdf', 'jpg', 'jpeg', 'png', 'webp'])],
        help_text="Upload payment proof (UPI screenshot, receipt photo)"
    )
    notes = models.TextField(blank=True)

    is_active = models.BooleanField(default=True)
    marked_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='marked_payments'
    )
    marked_at = models.DateTimeField(auto_now_add=True)
    voided_at = models.DateTimeField(null=True, blank=True)
    voided_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='voided_payments'
    )
    superseded_by = models.ForeignKey(
        'self', on_delete=models.SET_NULL, null=True, blank=True, related_name='supersedes'
    )

    class Meta:
        ordering = ['-payment_date', '-id']
        verbose_name = "Payment"
        verbose_name_plural = "Payments"
        constraints = [
            models.UniqueConstraint(
                fields=['resident', 'month', 'year'],
                condition=models.Q(is_active=True),
                name='one_active_payment_per_month',
            ),
        ]
        indexes = [
            models.Index(fields=['resident', 'is_active'], name='payments_pa_residen_2b7e10_idx'),
            models.Index(fields=['branch', 'year', 'month'], name='payments_pa_branch__e93c5a_idx'),
            models.Index(fields=['resident', 'year', 'month'], name='payments_pa_residen_86d4f7_idx'),
        ]

    def __str__(self):
        return f"{self.resident.full_name} - {self.month} {self.year} - {self.amount}"
