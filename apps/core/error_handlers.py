"""
Error handling for InsureApp.

Maps domain exceptions to HTTP responses for the REST API and provides JSON
replacements for Django's 404/500/403 and CSRF failure pages.
"""

from django.core.exceptions import ObjectDoesNotExist, PermissionDenied, ValidationError
from django.http import JsonResponse
from django.views.decorators.csrf import requires_csrf_token
from django.views.decorators.cache import never_cache
from rest_framework import exceptions as drf_exceptions
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback
import logging

from apps.core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)


def _validation_details(exc):
    if hasattr(exc, 'message_dict'):
        return exc.message_dict
    return {'non_field_errors': exc.messages}


def _first_message(details):
    if isinstance(details, dict):
        for value in details.values():
            return _first_message(value)
    if isinstance(details, (list, tuple)) and details:
        return _first_message(details[0])
    return str(details)


def _error(message, code, details=None):
    set_rollback()
    body = {'error': message, 'status_code': code}
    if details is not None:
        body['details'] = details
    return Response(body, status=code)


def api_exception_handler(exc, context):
    """
    DRF exception handler.

    ValidationError -> 400, NotFoundError/Http404 -> 404,
    UnauthorizedError/NotAuthenticated -> 401, PermissionDenied -> 403,
    anything else -> 500 with a generic message.
    """
    view = context.get('view')
    request = context.get('request')
    path = getattr(request, 'path', '')

    if isinstance(exc, ValidationError):
        details = _validation_details(exc)
        return _error(_first_message(details), status.HTTP_400_BAD_REQUEST, details)

    if isinstance(exc, ObjectDoesNotExist):
        return _error(str(exc) or 'Resource not found', status.HTTP_404_NOT_FOUND)

    if isinstance(exc, (UnauthorizedError, drf_exceptions.NotAuthenticated, drf_exceptions.AuthenticationFailed)):
        message = str(exc) if isinstance(exc, UnauthorizedError) and str(exc) else 'Authentication required'
        return _error(message, status.HTTP_401_UNAUTHORIZED)

    if isinstance(exc, PermissionDenied):
        exc = drf_exceptions.PermissionDenied(str(exc) or None)

    response = exception_handler(exc, context)
    if response is not None:
        if isinstance(exc, drf_exceptions.ValidationError):
            response.data = {
                'error': _first_message(response.data),
                'status_code': response.status_code,
                'details': response.data,
            }
        else:
            detail = response.data.get('detail', '') if isinstance(response.data, dict) else response.data
            response.data = {'error': str(detail), 'status_code': response.status_code}
        return response

    logger.exception(f"Unhandled error in {view.__class__.__name__ if view else 'API'} for path: {path}")
    return _error('Internal server error', status.HTTP_500_INTERNAL_SERVER_ERROR)


@never_cache
@requires_csrf_token
def handler404(request, exception=None):
    """Custom 404 error handler."""
    logger.warning(f"404 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    return JsonResponse({
        'error': 'Resource not found',
        'status_code': 404,
        'path': request.path
    }, status=404)


@never_cache
@requires_csrf_token
def handler500(request):
    """Custom 500 error handler."""
    logger.error(f"500 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    return JsonResponse({
        'error': 'Internal server error',
        'status_code': 500,
        'message': 'An unexpected error occurred. Please try again later.'
    }, status=500)


@never_cache
@requires_csrf_token
def handler403(request, exception=None):
    """Custom 403 error handler."""
    logger.warning(f"403 error for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')}")
    return JsonResponse({
        'error': 'Access forbidden',
        'status_code': 403,
        'message': 'You do not have permission to access this resource.'
    }, status=403)


def csrf_failure(request, reason=""):
    """Custom CSRF failure handler."""
    logger.warning(f"CSRF failure for path: {request.path} from IP: {request.META.get('REMOTE_ADDR')} - Reason: {reason}")
    return JsonResponse({
        'error': 'CSRF verification failed',
        'status_code': 403,
        'message': 'CSRF token missing or incorrect. Please refresh the page and try again.'
    }, status=403)
