from django.conf import settings
from django.contrib.auth.signals import user_login_failed, user_logged_in
from django.dispatch import receiver
from django.core.cache import cache
from django.utils import timezone


def _limit(name, default):
    return getattr(settings, name, default)


def client_ip(request):
    if not request:
        return '0.0.0.0'
    xff = request.META.get('HTTP_X_FORWARDED_FOR')
    if xff:
        return xff.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR', '0.0.0.0')


def block_key(ip, email):
    return f"login_block:{ip}:{email}" if email else f"login_block:{ip}"


def fail_key(ip, email):
    return f"login_fail:{ip}:{email}" if email else f"login_fail:{ip}"


@receiver(user_login_failed)
def on_user_login_failed(sender, credentials, request=None, **kwargs):
    email = (credentials or {}).get('username', '')
    email = (email or '').strip().lower()
    ip = client_ip(request)

    # count failures within a rolling window, then block
    count = cache.get(fail_key(ip, email), 0) + 1
    cache.set(fail_key(ip, email), count, timeout=_limit('LOGIN_RATE_LIMIT_WINDOW_SECONDS', 300))

    if count >= _limit('LOGIN_RATE_LIMIT_ATTEMPTS', 5):
        cache.set(block_key(ip, email), 1, timeout=_limit('LOGIN_RATE_LIMIT_BLOCK_SECONDS', 900))


@receiver(user_logged_in)
def on_user_logged_in(sender, request, user, **kwargs):
    user.last_login_at = timezone.now()
    user.save(update_fields=['last_login_at'])

    # clear any failure and block keys for this ip/email
    ip = client_ip(request)
    email = (getattr(user, 'email', '') or '').strip().lower()
    cache.delete_many([
        fail_key(ip, email),
        block_key(ip, email),
        fail_key(ip, None),
        block_key(ip, None),
    ])
