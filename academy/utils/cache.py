"""
Redis read-through cache for per-learner state
"""
import redis
import json
import logging
from typing import Optional, Any, Callable
from academy.config import settings

logger = logging.getLogger(__name__)

CACHED_KINDS = ("profile", "progress", "badges")


class CacheService:
    """
    Redis-based read-through cache for profile, lesson progress and badges

    Writers never update cached values; they invalidate the learner's keys
    after each mutating step and the next read repopulates from the store.
    """

    def __init__(self, url: str = None):
        url = settings.REDIS_URL if url is None else url
        self.redis_client = None
        if not url:
            logger.info("REDIS_URL not set. Caching disabled.")
            return
        try:
            self.redis_client = redis.from_url(
                url,
                decode_responses=True,
                socket_connect_timeout=5
            )
            # Test connection
            self.redis_client.ping()
            logger.info("Redis connection established")
        except Exception as e:
            logger.warning(f"Redis connection failed: {str(e)}. Caching disabled.")
            self.redis_client = None

    @staticmethod
    def key(kind: str, user_id: Any) -> str:
        """Cache key for one kind of learner state, e.g. profile:<uuid>"""
        return f"{kind}:{user_id}"

    def get(self, key: str) -> Optional[Any]:
        """
        Get value from cache

        Returns:
            Cached value or None on miss or error
        """
        if not self.redis_client:
            return None

        try:
            value = self.redis_client.get(key)
            if value:
                logger.debug(f"Cache hit: {key}")
                return json.loads(value)
            logger.debug(f"Cache miss: {key}")
            return None
        except Exception as e:
            logger.error(f"Cache get error: {str(e)}")
            return None

    def set(self, key: str, value: Any, ttl: int = None) -> bool:
        """
        Set value in cache

        Args:
            key: Cache key
            value: JSON serializable value
            ttl: Time to live in seconds (default from settings)
        """
        if not self.redis_client:
            return False

        try:
            ttl = ttl or settings.CACHE_TTL
            self.redis_client.setex(key, ttl, json.dumps(value, default=str))
            logger.debug(f"Cache set: {key} (TTL: {ttl}s)")
            return True
        except Exception as e:
            logger.error(f"Cache set error: {str(e)}")
            return False

    def read_through(self, key: str, loader: Callable[[], Any]) -> Any:
        """Return the cached value for key, loading and caching it on a miss"""
        cached = self.get(key)
        if cached is not None:
            return cached
        value = loader()
        if value is not None:
            self.set(key, value)
        return value

    def invalidate(self, user_id: Any, *kinds: str) -> bool:
        """
        Drop cached state for a learner

        Args:
            user_id: Learner id
            kinds: Subset of CACHED_KINDS; all of them when omitted
        """
        if not self.redis_client:
            return False

        keys = [self.key(kind, user_id) for kind in (kinds or CACHED_KINDS)]
        try:
            self.redis_client.delete(*keys)
            logger.debug(f"Cache invalidated: {', '.join(keys)}")
            return True
        except Exception as e:
            logger.error(f"Cache invalidate error: {str(e)}")
            return False


# Global instance
cache_service = CacheService()
