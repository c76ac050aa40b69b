# ==================== BOOKINGS/PRICING.PY ====================
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from utils.exceptions import ValidationError
from utils.intervals import TimeInterval, HOURS_PER_DAY

HOURLY = 'hourly'
DAILY = 'daily'

ONE_HOUR = timedelta(hours=1)


class RateSchedule:
    """Hourly and daily price of a parking space"""

    def __init__(self, hourly_price, daily_price):
        self.hourly_price = _positive_decimal(hourly_price, 'Hourly price')
        self.daily_price = _positive_decimal(daily_price, 'Daily price')

    def __repr__(self):
        return f"RateSchedule(hourly={self.hourly_price}, daily={self.daily_price})"


class PriceQuote:
    def __init__(self, duration_hours, billing_mode, amount):
        self.duration_hours = duration_hours
        self.billing_mode = billing_mode
        self.amount = amount

    def __eq__(self, other):
        if not isinstance(other, PriceQuote):
            return NotImplemented
        return (self.duration_hours, self.billing_mode, self.amount) == (
            other.duration_hours, other.billing_mode, other.amount
        )

    def __repr__(self):
        return f"PriceQuote({self.duration_hours}h, {self.billing_mode}, {self.amount})"

    def to_dict(self):
        return {
            'duration_hours': self.duration_hours,
            'billing_mode': self.billing_mode,
            'amount': self.amount,
        }


class PricingEngine:
    """Price a booking interval against a rate schedule

    Bookings of 24 hours or more are billed per started day at the daily
    price, shorter ones per started hour at the hourly price. Amounts keep
    full Decimal precision, rounding belongs to the presentation layer.
    """

    @staticmethod
    def duration_hours(interval):
        # timedelta floor division gives an exact integer, negate twice to round up
        return -(-interval.duration // ONE_HOUR)

    @classmethod
    def quote(cls, start, end, rates):
        # start == end is rejected by TimeInterval
        return cls.quote_interval(TimeInterval(start, end), rates)

    @classmethod
    def quote_interval(cls, interval, rates):
        hours = cls.duration_hours(interval)
        if hours >= HOURS_PER_DAY:
            days = -(-hours // HOURS_PER_DAY)
            return PriceQuote(hours, DAILY, days * rates.daily_price)
        return PriceQuote(hours, HOURLY, hours * rates.hourly_price)


def _positive_decimal(value, label):
    try:
        value = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f'{label} must be a number')
    if not value.is_finite() or value <= 0:
        raise ValidationError(f'{label} must be greater than zero')
    return value
