import json

from django.core.cache import cache
from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from .signals import block_key, client_ip

LOGIN_PATH = '/api/auth/login'


class LoginRateLimitMiddleware(MiddlewareMixin):
    """
    Login rate limiting for the API.

    - Blocks excessive failed attempts per (IP, email) for a cooldown window.
    - On block, answers 429 before the credentials are checked.
    - Counting of failures is done via signals in accounts.signals.
    """

    def _email(self, request):
        if request.content_type == 'application/json':
            try:
                payload = json.loads(request.body or b'{}')
            except ValueError:
                return ''
            return str(payload.get('email', '') or '').strip().lower()
        return request.POST.get('email', '').strip().lower()

    def process_request(self, request):
        # Only guard the login POSTs
        if request.method != 'POST':
            return None
        if not (request.path or '').rstrip('/') == LOGIN_PATH:
            return None

        if cache.get(block_key(client_ip(request), self._email(request))):
            return JsonResponse({
                'error': 'Too many failed login attempts. Please try again later.',
                'status_code': 429,
            }, status=429)
        return None
