"""
Health endpoints for load balancers and monitoring.

/health/          liveness, no dependencies touched
/health/ready/    database and cache reachable, scheduler state
/health/deep/     readiness plus occupancy counts
"""

import time
import logging
from django.http import JsonResponse
from django.db import connection
from django.core.cache import cache
from django.views.decorators.http import require_GET
from django.views.decorators.csrf import csrf_exempt

logger = logging.getLogger(__name__)


def _check_database():
    started = time.monotonic()
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
        cursor.fetchone()
    return round((time.monotonic() - started) * 1000, 2)


def _check_cache():
    cache.set('health_check_probe', 'ok', 10)
    if cache.get('health_check_probe') != 'ok':
        raise RuntimeError('read back a different value')
    cache.delete('health_check_probe')


def _run_checks():
    checks = {'database': False, 'cache': False}
    errors = []
    latency_ms = None

    try:
        latency_ms = _check_database()
        checks['database'] = True
    except Exception as e:
        errors.append(f'Database: {e}')
        logger.error(f'Health check - Database error: {e}')

    try:
        _check_cache()
        checks['cache'] = True
    except Exception as e:
        errors.append(f'Cache: {e}')
        logger.error(f'Health check - Cache error: {e}')

    return checks, errors, latency_ms


@csrf_exempt
@require_GET
def health_check(request):
    return JsonResponse({'status': 'healthy', 'timestamp': time.time()})


@csrf_exempt
@require_GET
def readiness_check(request):
    """503 unless both the database and the cache respond"""
    from common import scheduler as background

    checks, errors, latency_ms = _run_checks()
    ready = all(checks.values())

    return JsonResponse({
        'status': 'ready' if ready else 'not_ready',
        'timestamp': time.time(),
        'checks': checks,
        'database_latency_ms': latency_ms,
        'scheduler_running': bool(background.scheduler and background.scheduler.running),
        'errors': errors or None,
    }, status=200 if ready else 503)


@csrf_exempt
@require_GET
def deep_health_check(request):
    """Readiness plus branch, room and resident counts"""
    from branches.models import Branch
    from core.constants import ResidentStatus
    from residents.models import Resident
    from rooms.models import Room

    checks, errors, latency_ms = _run_checks()
    counts = None
    if checks['database']:
        try:
            counts = {
                'branches': Branch.objects.filter(is_active=True).count(),
                'rooms': Room.objects.filter(is_active=True).count(),
                'allocated_residents': Resident.objects.filter(status__in=ResidentStatus.ALLOCATED).count(),
                'notice_period_residents': Resident.objects.filter(status=ResidentStatus.NOTICE_PERIOD).count(),
            }
        except Exception as e:
            errors.append(f'Models: {e}')
            logger.error(f'Health check - Model query error: {e}')

    healthy = all(checks.values()) and counts is not None
    return JsonResponse({
        'status': 'healthy' if healthy else 'unhealthy',
        'timestamp': time.time(),
        'checks': checks,
        'database_latency_ms': latency_ms,
        'counts': counts,
        'errors': errors or None,
    }, status=200 if healthy else 503)


def get_health_urls():
    from django.urls import path

    return [
        path('health/', health_check, name='health_check'),
        path('health/ready/', readiness_check, name='readiness_check'),
        path('health/deep/', deep_health_check, name='deep_health_check'),
    ]
