import time

import redis
from django.conf import settings
from django.db import connections
from django.db.utils import OperationalError
from django.http import JsonResponse

from .logger import get_logger

logger = get_logger(__name__).bind(component="common", layer="health")

READY = "ok"
FAILED = "fail"
SKIPPED = "skipped"


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 2)


def check_database(alias: str = "default"):
    started = time.monotonic()
    try:
        with connections[alias].cursor() as cursor:
            cursor.execute("SELECT 1")
    except OperationalError as exc:
        logger.warning("Database check failed", alias=alias, error=str(exc))
        return {"status": FAILED, "error": str(exc)}
    latency = _elapsed_ms(started)
    logger.debug("Database check passed", alias=alias, latency_ms=latency)
    return {"status": READY, "latency_ms": latency}


def check_redis(url: str, timeout: float = 0.3):
    started = time.monotonic()
    try:
        client = redis.Redis.from_url(
            url, socket_connect_timeout=timeout, socket_timeout=timeout
        )
        client.ping()
    except redis.RedisError as exc:
        logger.warning("Redis check failed", error=str(exc))
        return {"status": FAILED, "error": str(exc)}
    return {"status": READY, "latency_ms": _elapsed_ms(started)}


def live_health(request):
    """Liveness probe: the process answers HTTP."""
    return JsonResponse({"status": "alive"})


def ready_health(request):
    """Readiness probe over the database and, when configured, Redis."""
    checks = {"database": check_database()}
    redis_url = getattr(settings, "HEALTH_REDIS_URL", None)
    if redis_url:
        checks["redis"] = check_redis(redis_url)
    else:
        checks["redis"] = {"status": SKIPPED, "detail": "Redis cache not configured"}

    failing = sorted(name for name, result in checks.items() if result["status"] == FAILED)
    overall = READY if not failing else "degraded"
    logger.info("Readiness evaluated", status=overall, failing=failing)
    return JsonResponse(
        {"status": overall, "checks": checks}, status=503 if failing else 200
    )
