from datetime import date
from decimal import Decimal

from rest_framework import status
from django.test import TestCase

from bookings.models import Booking
from parking.models import ParkingSpace, AvailabilitySlot
from tests.base import MarketplaceSetupMixin, at


class ParkingSpaceAPITestCase(MarketplaceSetupMixin, TestCase):
    url = '/api/v1/parking-spaces/'

    def availability_url(self, space=None):
        return f'{self.url}{(space or self.space).id}/availability/'

    def test_owner_can_create_parking_space(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(self.url, {
            'title': 'Driveway',
            'address': '4 Lake View',
            'city': 'Chennai',
            'space_type': 'private',
            'hourly_price': '2.50',
            'daily_price': '15.00',
            'length_cm': 450,
            'width_cm': 200,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(ParkingSpace.objects.get(id=response.data['id']).owner, self.owner)

    def test_prices_must_be_positive(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(self.url, {
            'title': 'Free',
            'address': '1 Road',
            'city': 'Chennai',
            'hourly_price': '0',
            'daily_price': '15.00',
            'length_cm': 450,
            'width_cm': 200,
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('hourly_price', response.data)

    def test_only_owner_can_edit(self):
        self.client.force_authenticate(user=self.renter)
        response = self.client.patch(f'{self.url}{self.space.id}/', {'title': 'Mine now'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_search_filters(self):
        self.create_space(title='Tiny', city='Mysuru', length_cm=300, hourly_price=Decimal('1.00'))
        response = self.client.get(self.url, {'city': 'Bengaluru'})
        self.assertEqual([space['title'] for space in response.data['results']], ['Test Parking'])

        response = self.client.get(self.url, {'min_length': 400})
        self.assertEqual(response.data['count'], 1)

        response = self.client.get(self.url, {'price_max': '2'})
        self.assertEqual([space['title'] for space in response.data['results']], ['Tiny'])

    def test_search_excludes_booked_spaces(self):
        free = self.create_space(title='Free Space')
        Booking.objects.create(
            renter=self.renter, parking_space=self.space, vehicle=self.vehicle,
            start_datetime=at(1, 9), end_datetime=at(1, 17), status=Booking.PENDING,
            billing_mode='hourly', duration_hours=8, total_amount=Decimal('24.00'),
        )
        response = self.client.get(self.url, {
            'available_start': '2024-06-01T12:00:00Z',
            'available_end': '2024-06-01T13:00:00Z',
        })
        self.assertEqual([space['id'] for space in response.data['results']], [free.id])

    def test_get_month(self):
        response = self.client.get(self.availability_url(), {'month': '2024-06'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 30)
        self.assertTrue(response.data['2024-06-01']['available'])

    def test_get_month_requires_month(self):
        response = self.client.get(self.availability_url())
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.json(), {'error': 'Month parameter required'})

        response = self.client.get(self.availability_url(), {'month': '2024-13'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_owner_replaces_month(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(self.availability_url(), {
            'month': '2024-06',
            'availability': {
                '2024-06-01': {'available': True, 'hours': {'9': False}},
                '2024-06-02': {'available': False},
            },
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, {'success': True})

        calendar = self.client.get(self.availability_url(), {'month': '2024-06'}).json()
        self.assertFalse(calendar['2024-06-01']['hours']['9'])
        self.assertFalse(calendar['2024-06-02']['available'])

    def test_renter_cannot_replace_month(self):
        self.client.force_authenticate(user=self.renter)
        response = self.client.post(self.availability_url(), {
            'month': '2024-06',
            'availability': {'2024-06-02': {'available': False}},
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(AvailabilitySlot.objects.exists())

    def test_anonymous_cannot_replace_month(self):
        response = self.client.post(self.availability_url(), {'month': '2024-06', 'availability': {}},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_toggle_day_and_hour(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(f'{self.url}{self.space.id}/toggle_day/',
                                    {'date': '2024-06-01', 'available': True}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        response = self.client.post(f'{self.url}{self.space.id}/toggle_hour/',
                                    {'date': '2024-06-01', 'hour': 13}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.data['hours'][13])

        response = self.client.get(f'{self.url}{self.space.id}/availability_status/', {'month': '2024-06'})
        self.assertEqual(response.data['2024-06-01'], 'partial')
        self.assertEqual(response.data['2024-06-02'], 'unavailable')

    def test_toggle_hour_out_of_range(self):
        self.client.force_authenticate(user=self.owner)
        response = self.client.post(f'{self.url}{self.space.id}/toggle_hour/',
                                    {'date': '2024-06-01', 'hour': 24}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_renter_cannot_toggle(self):
        self.client.force_authenticate(user=self.renter)
        response = self.client.post(f'{self.url}{self.space.id}/toggle_day/',
                                    {'date': '2024-06-01', 'available': False}, format='json')
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(AvailabilitySlot.objects.filter(date=date(2024, 6, 1)).exists())
