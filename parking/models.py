# parking/models.py

from decimal import Decimal

from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from users.models import CustomUser

from bookings.pricing import RateSchedule


class ParkingSpace(models.Model):
    SPACE_TYPE_CHOICES = (
        ('garage', 'Garage'),
        ('open', 'Open Space'),
        ('covered', 'Covered Space'),
        ('private', 'Private Driveway'),
    )
    STATUS_CHOICES = (
        ('active', 'Active'),
        ('inactive', 'Inactive'),
    )

    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='owned_parking_spaces')

    # Location info
    title = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    address = models.CharField(max_length=500)
    city = models.CharField(max_length=100, db_index=True)
    area = models.CharField(max_length=100, blank=True)
    space_type = models.CharField(max_length=20, choices=SPACE_TYPE_CHOICES, default='open')

    # Rate schedule
    hourly_price = models.DecimalField(max_digits=10, decimal_places=2,
                                       validators=[MinValueValidator(Decimal('0.01'))])
    daily_price = models.DecimalField(max_digits=10, decimal_places=2,
                                      validators=[MinValueValidator(Decimal('0.01'))])

    # Vehicle restrictions (centimeters)
    length_cm = models.PositiveIntegerField()
    width_cm = models.PositiveIntegerField()
    height_cm = models.PositiveIntegerField(null=True, blank=True)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active', db_index=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['city']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return f"{self.title} - {self.address}"

    @property
    def rates(self):
        return RateSchedule(self.hourly_price, self.daily_price)

    def fits_vehicle(self, vehicle):
        """Vehicle must not exceed the space; height is only compared when both sides record it"""
        if vehicle.length_cm > self.length_cm or vehicle.width_cm > self.width_cm:
            return False
        if vehicle.height_cm and self.height_cm and vehicle.height_cm > self.height_cm:
            return False
        return True


class AvailabilitySlot(models.Model):
    """Stored hour range of one calendar day of one space"""
    parking_space = models.ForeignKey(ParkingSpace, on_delete=models.CASCADE, related_name='availability_slots')
    date = models.DateField()
    start_hour = models.PositiveSmallIntegerField(validators=[MaxValueValidator(23)])
    end_hour = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(24)])
    is_available = models.BooleanField(default=True)

    class Meta:
        ordering = ['date', 'start_hour']
        unique_together = ('parking_space', 'date', 'start_hour')
        indexes = [
            models.Index(fields=['parking_space', 'date']),
        ]

    def __str__(self):
        state = 'open' if self.is_available else 'closed'
        return f"{self.parking_space_id} {self.date} {self.start_hour:02d}-{self.end_hour:02d} {state}"
