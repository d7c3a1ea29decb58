"""
Request Rate Limiting

Fixed-window counters keyed by limiter name and client address. Counters
live in Redis when it is configured and reachable, otherwise in process
memory.
"""
import threading
import time
from typing import Dict, Optional, Tuple

import redis
from fastapi import HTTPException, Request
from redis.exceptions import RedisError

from config.settings import settings
from src.realty.utils.logger import get_logger

logger = get_logger(__name__)

# Redis client configuration
redis_client: Optional[redis.Redis] = None
_redis_checked = False


def get_redis_client() -> Optional[redis.Redis]:
    """
    Get Redis client instance.

    Returns:
        Redis client if available, None if not configured or unreachable
    """
    global redis_client, _redis_checked

    if redis_client is None and not _redis_checked:
        _redis_checked = True
        redis_url = settings.redis_url

        if not redis_url:
            logger.info("redis_connection_skipped", reason="redis_url not configured")
            return None

        try:
            client = redis.Redis.from_url(
                redis_url,
                decode_responses=True,
                socket_connect_timeout=2,
                socket_timeout=2,
            )
            client.ping()
            redis_client = client
            logger.info("redis_connected")
        except RedisError as e:
            logger.warning("redis_connection_failed", error=str(e))
            redis_client = None

    return redis_client


class RateLimiter:
    """
    Fixed-window request counter.

    Each window starts on a multiple of window_seconds; a key may be hit at
    most limit times per window.
    """

    def __init__(self, prefix: str = "ratelimit"):
        self.prefix = prefix
        self._counters: Dict[str, Tuple[int, float]] = {}
        self._next_sweep = float("inf")
        self._lock = threading.Lock()

    def hit(self, key: str, limit: int, window_seconds: int, detail: str) -> int:
        """
        Count one request against a key.

        Args:
            key: Counter key (limiter name plus client identity)
            limit: Maximum requests per window
            window_seconds: Window length
            detail: Error message when the limit is exceeded

        Returns:
            Number of hits in the current window

        Raises:
            HTTPException: 429 when the limit is exceeded
        """
        if not settings.rate_limit_enabled:
            return 0

        now = time.time()
        window_start = int(now // window_seconds) * window_seconds
        reset_at = window_start + window_seconds

        count = self._hit_redis(key, window_start, window_seconds)
        if count is None:
            count = self._hit_memory(key, reset_at, now)

        if count > limit:
            logger.warning("rate_limit_exceeded", key=key, limit=limit, window_seconds=window_seconds)
            raise HTTPException(
                status_code=429,
                detail=detail,
                headers={"Retry-After": str(max(1, int(reset_at - now)))},
            )
        return count

    def _hit_redis(self, key: str, window_start: int, window_seconds: int) -> Optional[int]:
        client = get_redis_client()
        if client is None:
            return None

        redis_key = f"{self.prefix}:{key}:{window_start}"
        try:
            pipe = client.pipeline()
            pipe.incr(redis_key)
            pipe.expire(redis_key, window_seconds)
            count, _ = pipe.execute()
            return int(count)
        except RedisError as e:
            logger.warning("rate_limit_redis_error", error=str(e))
            return None

    def _hit_memory(self, key: str, reset_at: float, now: float) -> int:
        with self._lock:
            if now >= self._next_sweep:
                self._sweep(now)

            count, current_reset = self._counters.get(key, (0, reset_at))
            if current_reset <= now:
                count, current_reset = 0, reset_at
            count += 1
            self._counters[key] = (count, current_reset)
            self._next_sweep = min(self._next_sweep, current_reset)
            return count

    def _sweep(self, now: float) -> None:
        """Drop counters whose window has ended. Caller holds the lock."""
        expired = [key for key, (_, reset_at) in self._counters.items() if reset_at <= now]
        for key in expired:
            del self._counters[key]
        self._next_sweep = min((reset_at for _, reset_at in self._counters.values()), default=float("inf"))
        if expired:
            logger.debug("rate_limit_counters_swept", removed=len(expired), remaining=len(self._counters))

    def reset(self) -> None:
        """Forget all in-process counters."""
        with self._lock:
            self._counters.clear()
            self._next_sweep = float("inf")


limiter = RateLimiter()


def client_key(request: Request) -> str:
    """
    Identify the client by its socket address.

    X-Forwarded-For is not read here; behind a proxy run uvicorn with
    --proxy-headers and --forwarded-allow-ips so the trusted proxy's header
    sets the client address.
    """
    return request.client.host if request.client else "unknown"


def api_rate_limit(request: Request) -> None:
    """General limiter applied to every /api route."""
    limiter.hit(
        key=f"api:{client_key(request)}",
        limit=settings.api_rate_limit,
        window_seconds=settings.api_rate_window_seconds,
        detail="Too many requests, please try again later",
    )


def auth_rate_limit(request: Request) -> None:
    """Limiter for login and registration attempts."""
    limiter.hit(
        key=f"auth:{client_key(request)}",
        limit=settings.auth_rate_limit,
        window_seconds=settings.auth_rate_window_seconds,
        detail="Too many authentication attempts, please try again later",
    )


def lead_rate_limit(request: Request) -> None:
    """Limiter for inquiry submissions."""
    limiter.hit(
        key=f"lead:{client_key(request)}",
        limit=settings.lead_rate_limit,
        window_seconds=settings.lead_rate_window_seconds,
        detail="Too many lead submissions, please try again later",
    )
