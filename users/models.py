from django.db import models
from django.contrib.auth.models import AbstractUser
from phonenumber_field.modelfields import PhoneNumberField


class CustomUser(AbstractUser):
    USER_TYPE_CHOICES = (
        ('owner', 'Parking Space Owner'),
        ('renter', 'Renter'),
        ('both', 'Both'),
    )

    user_type = models.CharField(max_length=10, choices=USER_TYPE_CHOICES, default='renter')
    phone_number = PhoneNumberField(null=True, blank=True)
    bio = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.username} ({self.get_user_type_display()})"


class Vehicle(models.Model):
    """Renter's registered vehicles, dimensions are checked against the space before booking"""
    owner = models.ForeignKey(CustomUser, on_delete=models.CASCADE, related_name='vehicles')
    make = models.CharField(max_length=50)
    model = models.CharField(max_length=100)
    year = models.PositiveIntegerField(null=True, blank=True)
    license_plate = models.CharField(max_length=20, db_index=True)

    # Dimensions in centimeters
    length_cm = models.PositiveIntegerField()
    width_cm = models.PositiveIntegerField()
    height_cm = models.PositiveIntegerField(null=True, blank=True)

    is_primary = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('owner', 'license_plate')
        ordering = ['-is_primary', '-created_at']

    def __str__(self):
        return f"{self.owner.username} - {self.license_plate}"
