"""
Domain errors raised by the service layer.

Validation problems use Django's own ValidationError; the API boundary
(apps.core.error_handlers.api_exception_handler) maps each type to a status.
"""

from django.core.exceptions import ObjectDoesNotExist, ValidationError


class NotFoundError(ObjectDoesNotExist):
    """Unknown policy, user or log id."""


class UnauthorizedError(Exception):
    """Missing or expired session."""


__all__ = ['ValidationError', 'NotFoundError', 'UnauthorizedError']
