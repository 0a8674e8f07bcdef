"""
Health monitoring for InsureApp.

Unauthenticated probes for load balancers and orchestrators plus a metrics
endpoint in Prometheus text exposition format.
"""

import time
import psutil
from django.http import HttpResponse, JsonResponse
from django.views import View
from django.db import DatabaseError, connection
from django.core.cache import cache
from django.conf import settings
from django.utils import timezone
import logging

logger = logging.getLogger(__name__)


def _check_database():
    with connection.cursor() as cursor:
        cursor.execute("SELECT 1")


def _check_cache(key, timeout):
    cache.set(key, 'ok', timeout)
    if cache.get(key) != 'ok':
        raise RuntimeError("Cache test failed")


class HealthCheckView(View):
    """
    Health check endpoint for monitoring system status.
    """

    def get(self, request):
        """Return system health status."""
        start_time = time.time()

        health_data = {
            'status': 'healthy',
            'timestamp': timezone.now().isoformat(),
            'version': getattr(settings, 'VERSION', '1.0.0'),
            'checks': {}
        }

        # Database health check
        try:
            _check_database()
            health_data['checks']['database'] = {
                'status': 'healthy',
                'response_time_ms': round((time.time() - start_time) * 1000, 2)
            }
        except DatabaseError as e:
            health_data['checks']['database'] = {
                'status': 'unhealthy',
                'error': str(e)
            }
            health_data['status'] = 'unhealthy'

        # Cache health check
        try:
            cache_start = time.time()
            _check_cache('health_check', 10)
            health_data['checks']['cache'] = {
                'status': 'healthy',
                'response_time_ms': round((time.time() - cache_start) * 1000, 2)
            }
        except Exception as e:
            logger.warning(f"Cache health check failed: {e}")
            health_data['checks']['cache'] = {
                'status': 'unhealthy',
                'error': str(e)
            }
            health_data['status'] = 'unhealthy'

        # System resources check
        memory = psutil.virtual_memory()
        disk = psutil.disk_usage('/')
        cpu_percent = psutil.cpu_percent(interval=None)
        disk_percent = (disk.used / disk.total) * 100
        health_data['checks']['system'] = {
            'status': 'healthy',
            'memory_usage_percent': memory.percent,
            'disk_usage_percent': round(disk_percent, 2),
            'cpu_usage_percent': cpu_percent,
        }
        # Resources critically low
        if memory.percent > 90 or disk_percent > 90 or cpu_percent > 90:
            health_data['checks']['system']['status'] = 'warning'

        # Application-specific checks
        if health_data['checks']['database']['status'] == 'healthy':
            from apps.accounts.models import User
            from apps.core.models import Policy

            health_data['checks']['application'] = {
                'status': 'healthy',
                'policies': Policy.objects.count(),
                'active_users': User.objects.filter(is_active=True).count(),
            }

        health_data['response_time_ms'] = round((time.time() - start_time) * 1000, 2)

        status_code = 200 if health_data['status'] == 'healthy' else 503
        return JsonResponse(health_data, status=status_code)


class MetricsView(View):
    """
    Business and system metrics in Prometheus text format.
    """

    def get(self, request):
        from apps.core.models import Policy
        from apps.core.services import expiry_service
        from apps.notifications.models import SmsLog

        today = timezone.localdate()
        metrics = [
            f'insureapp_policies_total {Policy.objects.count()}',
        ]
        for bucket in expiry_service.BUCKETS:
            count = Policy.objects.in_bucket(bucket, today).count()
            metrics.append(f'insureapp_policies{{bucket="{bucket}"}} {count}')
        metrics.append(f'insureapp_sms_unread {SmsLog.objects.filter(is_read=False).count()}')

        memory = psutil.virtual_memory()
        disk = psutil.disk_usage('/')
        metrics.extend([
            f'system_memory_usage_percent {memory.percent}',
            f'system_disk_usage_percent {(disk.used / disk.total) * 100:.2f}',
            f'system_cpu_usage_percent {psutil.cpu_percent(interval=None)}',
        ])

        return HttpResponse('\n'.join(metrics) + '\n', content_type='text/plain; version=0.0.4')


class ReadinessView(View):
    """
    Readiness probe endpoint.
    """

    def get(self, request):
        """Check if application is ready to serve traffic."""
        try:
            _check_database()
            _check_cache('readiness_check', 5)
        except Exception as e:
            logger.warning(f"Readiness check failed: {e}")
            return JsonResponse({
                'status': 'not_ready',
                'error': str(e),
                'timestamp': timezone.now().isoformat()
            }, status=503)

        return JsonResponse({
            'status': 'ready',
            'timestamp': timezone.now().isoformat()
        })


class LivenessView(View):
    """
    Liveness probe endpoint.
    """

    def get(self, request):
        """Check if application is alive."""
        return JsonResponse({
            'status': 'alive',
            'timestamp': timezone.now().isoformat()
        })
