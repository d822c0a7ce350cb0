from django.db import models
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator

from branches.models import Branch
from core.constants import ResidentStatus, SharingType
from core.exceptions import RoomInUseError


class Room(models.Model):
    """
    Room in a branch.

    Beds are not rows: a bed is the pair (room, bed_number) with
    bed_number in 1..bed_count. Occupancy is derived from residents.
    """
    branch = models.ForeignKey(Branch, on_delete=models.CASCADE, related_name='rooms')
    room_number = models.CharField(max_length=20, help_text="e.g., '101', 'A-2'")
    floor = models.CharField(max_length=20, blank=True, help_text="e.g., 'Ground', '1st'")
    sharing_type = models.IntegerField(choices=SharingType.CHOICES, help_text="Number of beds: 1, 2, 3 or 4")
    bed_count = models.IntegerField(validators=[MinValueValidator(1)])
    cost_per_bed = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['room_number']
        verbose_name = "Room"
        verbose_name_plural = "Rooms"
        constraints = [
            models.UniqueConstraint(fields=['branch', 'room_number'], name='unique_room_number_per_branch'),
            models.CheckConstraint(condition=models.Q(bed_count__gte=1), name='room_bed_count_positive'),
        ]
        indexes = [
            models.Index(fields=['branch', 'sharing_type'], name='rooms_room_branch__8a41f2_idx'),
            models.Index(fields=['branch', 'is_active'], name='rooms_room_branch__3d9c70_idx'),
        ]

    def __str__(self):
        return f"{self.branch.name} - {self.room_number} ({self.sharing_label})"

    @property
    def sharing_label(self):
        return SharingType.label(self.sharing_type)

    @property
    def bed_numbers(self):
        return list(range(1, self.bed_count + 1))

    def clean(self):
        """bed_count must match the sharing type and still hold every occupant"""
        if self.sharing_type and self.bed_count and self.bed_count != SharingType.capacity(self.sharing_type):
            raise ValidationError({
                'bed_count': f"A {self.sharing_label} room has {SharingType.capacity(self.sharing_type)} beds"
            })
        if self.pk is not None:
            self._check_occupants()

    def _check_occupants(self):
        occupants = self.residents.filter(status__in=ResidentStatus.ALLOCATED)
        if not self.is_active and occupants.exists():
            raise ValidationError({
                'is_active': f"Room {self.room_number} still has {occupants.count()} resident(s) allocated"
            })
        if self.bed_count:
            stranded = sorted(occupants.filter(bed_number__gt=self.bed_count).values_list('bed_number', flat=True))
            if stranded:
                raise ValidationError({
                    'bed_count': f"Beds {stranded} are occupied; move those residents before shrinking the room"
                })

    def save(self, *args, **kwargs):
        if self.bed_count is None and self.sharing_type:
            self.bed_count = SharingType.capacity(self.sharing_type)
        self.full_clean()
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Rooms with assigned residents cannot be deleted"""
        assigned = self.residents.count()
        if assigned:
            raise RoomInUseError(
                message=f"Room {self.room_number} still has {assigned} resident(s) assigned",
                details={'room_id': self.pk, 'assigned': assigned}
            )
        return super().delete(*args, **kwargs)
