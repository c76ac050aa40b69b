from django.db import models
from users.models import CustomUser, Vehicle
from parking.models import ParkingSpace

from utils.intervals import TimeInterval


class Booking(models.Model):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    CANCELLED = 'cancelled'
    COMPLETED = 'completed'

    STATUS_CHOICES = (
        (PENDING, 'Pending Payment'),
        (CONFIRMED, 'Confirmed'),
        (CANCELLED, 'Cancelled'),
        (COMPLETED, 'Completed'),
    )
    BILLING_MODE_CHOICES = (
        ('hourly', 'Hourly'),
        ('daily', 'Daily'),
    )

    # Allowed lifecycle moves, anything else is rejected
    TRANSITIONS = {
        PENDING: {CONFIRMED, CANCELLED},
        CONFIRMED: {COMPLETED, CANCELLED},
        CANCELLED: set(),
        COMPLETED: set(),
    }

    # Relations
    renter = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='renter_bookings')
    parking_space = models.ForeignKey(ParkingSpace, on_delete=models.CASCADE, related_name='bookings')
    vehicle = models.ForeignKey(Vehicle, on_delete=models.SET_NULL, null=True)

    # Booking details
    start_datetime = models.DateTimeField(db_index=True)
    end_datetime = models.DateTimeField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=PENDING, db_index=True)

    # Pricing
    billing_mode = models.CharField(max_length=10, choices=BILLING_MODE_CHOICES)
    duration_hours = models.PositiveIntegerField()
    total_amount = models.DecimalField(max_digits=12, decimal_places=2)

    special_requests = models.TextField(blank=True)

    # Cancellation
    cancelled_by = models.ForeignKey(CustomUser, on_delete=models.SET_NULL, null=True, blank=True,
                                     related_name='cancelled_bookings')
    cancelled_at = models.DateTimeField(null=True, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['renter', 'status']),
            models.Index(fields=['parking_space', 'status']),
            models.Index(fields=['parking_space', 'start_datetime', 'end_datetime']),
        ]

    def __str__(self):
        return f"Booking {self.id} - {self.renter.username} at {self.parking_space.title}"

    @property
    def interval(self):
        return TimeInterval(self.start_datetime, self.end_datetime)

    @property
    def owner_id(self):
        return self.parking_space.owner_id

    def can_transition_to(self, new_status):
        return new_status in self.TRANSITIONS.get(self.status, set())

    def is_party(self, user_id):
        return user_id is not None and user_id in (self.renter_id, self.owner_id)

    def other_party_id(self, user_id):
        return self.owner_id if user_id == self.renter_id else self.renter_id
