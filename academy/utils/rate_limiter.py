"""
Rate limiting middleware for API endpoints
"""
import time
from collections import defaultdict, deque
from fastapi import Request, HTTPException
from typing import Deque, Dict
import logging

from academy.config import settings

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    In-memory sliding window rate limiter
    Production: Use Redis for distributed rate limiting
    """

    def __init__(self, requests_per_minute: int = 60, requests_per_hour: int = 1000):
        self.requests_per_minute = requests_per_minute
        self.requests_per_hour = requests_per_hour

        # Storage: {client_id: deque of request timestamps}
        self.minute_tracker: Dict[str, Deque[float]] = defaultdict(deque)
        self.hour_tracker: Dict[str, Deque[float]] = defaultdict(deque)

    def _get_client_id(self, request: Request) -> str:
        """Extract client identifier from request"""
        # Set only once a bearer token has resolved to a live session
        user_id = getattr(request.state, "user_id", None)
        if user_id:
            return f"user:{user_id}"

        # Fallback to IP address
        client_ip = request.client.host if request.client else "unknown"
        return client_ip

    def _cleanup_old_entries(self, tracker: Dict[str, Deque[float]], window_seconds: int, now: float):
        """Remove entries older than window"""
        cutoff = now - window_seconds

        for client_id in list(tracker.keys()):
            timestamps = tracker[client_id]
            while timestamps and timestamps[0] <= cutoff:
                timestamps.popleft()

            # Remove empty entries
            if not timestamps:
                del tracker[client_id]

    def reset(self):
        self.minute_tracker.clear()
        self.hour_tracker.clear()

    async def check_rate_limit(self, request: Request) -> None:
        """
        Check if request exceeds rate limits

        Raises:
            HTTPException: 429 if rate limit exceeded
        """
        client_id = self._get_client_id(request)
        now = time.time()

        self._cleanup_old_entries(self.minute_tracker, 60, now)
        self._cleanup_old_entries(self.hour_tracker, 3600, now)

        # Check minute limit
        minute_requests = len(self.minute_tracker.get(client_id, ()))
        if minute_requests >= self.requests_per_minute:
            logger.warning(f"Rate limit exceeded (minute): {client_id}")
            raise HTTPException(
                status_code=429,
                detail={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many requests. Limit: {self.requests_per_minute} requests per minute",
                    "retry_after": 60
                }
            )

        # Check hour limit
        hour_requests = len(self.hour_tracker.get(client_id, ()))
        if hour_requests >= self.requests_per_hour:
            logger.warning(f"Rate limit exceeded (hour): {client_id}")
            raise HTTPException(
                status_code=429,
                detail={
                    "error": "rate_limit_exceeded",
                    "message": f"Too many requests. Limit: {self.requests_per_hour} requests per hour",
                    "retry_after": 3600
                }
            )

        # Record this request
        self.minute_tracker[client_id].append(now)
        self.hour_tracker[client_id].append(now)

        logger.debug(f"Rate limit check passed: {client_id} (minute: {minute_requests+1}, hour: {hour_requests+1})")


# Global instance
rate_limiter = RateLimiter(
    requests_per_minute=settings.RATE_LIMIT_PER_MINUTE,
    requests_per_hour=settings.RATE_LIMIT_PER_HOUR
)
