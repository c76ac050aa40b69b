from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from parking.models import ParkingSpace
from users.models import Vehicle

User = get_user_model()


def at(day, hour, minute=0, month=6, year=2024):
    """UTC datetime, June 2024 unless told otherwise"""
    return datetime(year, month, day, hour, minute, tzinfo=dt_timezone.utc)


class MarketplaceSetupMixin:
    """Owner with one space, two renters with a car each"""

    def setUp(self):
        super().setUp()
        self.client = APIClient()
        self.owner = User.objects.create_user(
            username='owner1',
            email='owner@test.com',
            password='testpass123',
            user_type='owner'
        )
        self.renter = User.objects.create_user(
            username='renter1',
            email='renter@test.com',
            password='testpass123',
            first_name='Asha',
        )
        self.other_renter = User.objects.create_user(
            username='renter2',
            email='renter2@test.com',
            password='testpass123',
        )
        self.space = self.create_space()
        self.vehicle = self.create_vehicle(self.renter, 'KA01AB1234')
        self.other_vehicle = self.create_vehicle(self.other_renter, 'KA02CD5678')

    def create_space(self, **overrides):
        data = {
            'owner': self.owner,
            'title': 'Test Parking',
            'description': 'Covered garage near the station',
            'address': '12 Station Road',
            'city': 'Bengaluru',
            'area': 'Indiranagar',
            'space_type': 'garage',
            'hourly_price': Decimal('3.00'),
            'daily_price': Decimal('20.00'),
            'length_cm': 500,
            'width_cm': 250,
            'height_cm': 220,
        }
        data.update(overrides)
        return ParkingSpace.objects.create(**data)

    def create_vehicle(self, owner, plate, **overrides):
        data = {
            'owner': owner,
            'make': 'Maruti',
            'model': 'Swift',
            'license_plate': plate,
            'length_cm': 385,
            'width_cm': 173,
            'height_cm': 153,
        }
        data.update(overrides)
        return Vehicle.objects.create(**data)
