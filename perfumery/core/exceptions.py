"""Business-rule errors raised by the order engine and catalog writes.

Views catch these and translate them into ``{'error': message}`` responses
using ``status_code``.
"""
from rest_framework import status


class PerfumeryError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = 'Request could not be processed.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class NotFound(PerfumeryError):
    """A referenced order, perfume, component or custom order does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_message = 'Not found.'


class CatalogItemNotFound(NotFound):
    """A perfume or component named inside an order request does not exist."""
    status_code = status.HTTP_400_BAD_REQUEST


class InsufficientStock(PerfumeryError):
    """Requested quantity exceeds the available quantity of a catalog item."""
    default_message = 'Not enough stock.'


class Forbidden(PerfumeryError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = 'You do not have permission to perform this action.'


class ValidationError(PerfumeryError):
    default_message = 'Invalid input.'


class ConcurrencyConflict(PerfumeryError):
    """The row changed between read and write."""
    status_code = status.HTTP_409_CONFLICT
    default_message = 'The record was modified by another request.'
