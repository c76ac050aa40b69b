# ==================== UTILS/EXCEPTIONS.PY ====================
from rest_framework.exceptions import APIException
from rest_framework import status
from rest_framework.views import exception_handler


class ValidationError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid booking request.'
    default_code = 'validation_error'


class ConflictError(APIException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Space is not available for selected time'
    default_code = 'booking_conflict'

    def __init__(self, detail=None, code=None, conflicting_booking_ids=None):
        super().__init__(detail, code)
        self.conflicting_booking_ids = list(conflicting_booking_ids or [])


class AuthorizationError(APIException):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'Not authorized to update this booking'
    default_code = 'not_authorized'


class InvalidStateError(APIException):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Booking cannot move to the requested status.'
    default_code = 'invalid_state'


class NotFoundError(APIException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Not found.'
    default_code = 'not_found'


DOMAIN_ERRORS = (ValidationError, ConflictError, AuthorizationError, InvalidStateError, NotFoundError)


def api_exception_handler(exc, context):
    """Render booking engine errors as {"error": message}, defer the rest to DRF"""
    response = exception_handler(exc, context)
    if response is not None and isinstance(exc, DOMAIN_ERRORS):
        response.data = {'error': str(exc.detail)}
    return response
