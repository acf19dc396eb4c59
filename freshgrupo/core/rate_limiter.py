import logging
import time
from typing import Optional

import redis
from fastapi import HTTPException, Request

from freshgrupo.core.config import settings
from freshgrupo.core.monitoring import monitoring

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Sliding window rate limiter backed by a Redis sorted set per identifier"""

    def __init__(self, redis_client: Optional["redis.Redis"] = None):
        self.redis_client = redis_client

    def is_allowed(self, identifier: str, max_requests: int = 100, window_seconds: int = 60) -> bool:
        """
        Check if request is allowed using sliding window algorithm
        Returns True if allowed, False if rate limited
        """
        if self.redis_client is None:
            return True

        now = time.time()
        window_start = now - window_seconds
        key = f"rate_limit:{identifier}"

        try:
            # Remove old entries outside the window
            self.redis_client.zremrangebyscore(key, 0, window_start)

            if self.redis_client.zcard(key) >= max_requests:
                return False

            self.redis_client.zadd(key, {f"{now:.6f}": now})
            self.redis_client.expire(key, window_seconds)
            return True

        except redis.RedisError as e:
            # Fail open: throttling must not take authentication down
            logger.warning(f"Rate limiter unavailable: {e}")
            return True


def _build_limiter() -> SlidingWindowRateLimiter:
    if not settings.REDIS_URL:
        return SlidingWindowRateLimiter()
    return SlidingWindowRateLimiter(
        redis.Redis.from_url(settings.REDIS_URL, decode_responses=True, socket_timeout=1)
    )


rate_limiter = _build_limiter()


def client_identifier(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def limit_auth_requests(request: Request) -> None:
    """Dependency throttling the auth endpoints per client IP."""
    identifier = f"auth:{client_identifier(request)}"
    if not rate_limiter.is_allowed(
        identifier,
        max_requests=settings.AUTH_RATE_LIMIT,
        window_seconds=settings.AUTH_RATE_WINDOW_SECONDS,
    ):
        monitoring.record_rate_limit(identifier)
        raise HTTPException(status_code=429, detail="Too many requests, please try again later")
