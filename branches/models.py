from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator

from core.constants import DefaultLimits


class Branch(models.Model):
    """A PG branch (property). Rooms and residents always belong to exactly one branch."""
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    is_active = models.BooleanField(default=True)
    notice_period_days = models.IntegerField(
        default=DefaultLimits.DEFAULT_NOTICE_DAYS,
        validators=[
            MinValueValidator(DefaultLimits.MIN_NOTICE_DAYS),
            MaxValueValidator(DefaultLimits.MAX_NOTICE_DAYS),
        ],
        help_text="Notice days used when a resident gives notice without a number of days"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        verbose_name = "Branch"
        verbose_name_plural = "Branches"
        indexes = [
            models.Index(fields=['is_active', 'name'], name='branches_br_is_acti_5c1e0d_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def total_rooms(self):
        """Total rooms in this branch - CACHED for performance"""
        if not hasattr(self, '_total_rooms_cache'):
            self._total_rooms_cache = self.rooms.count()
        return self._total_rooms_cache

    @property
    def total_beds(self):
        """Total beds across rooms - CACHED for performance"""
        if not hasattr(self, '_total_beds_cache'):
            self._total_beds_cache = self.rooms.aggregate(total=models.Sum('bed_count'))['total'] or 0
        return self._total_beds_cache
