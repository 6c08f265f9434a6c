# storefront/services/redis_service.py
"""
Redis Service.

Async-only wrapper around Redis with:
- Configuration from REDIS_URL
- Sorted-set helpers used by the shared CSRF token store
- TTL support
- Errors logged and degraded instead of raised
- Health checks
"""
import os
import redis.asyncio as redis
from typing import Optional, Dict, Any, List
from dataclasses import dataclass
import logging

from storefront.core.exceptions import ConfigurationError
from storefront.core.service_base import BaseService, ServiceConfig

logger = logging.getLogger(__name__)

REDIS_URL_SCHEMES = ("redis://", "rediss://", "unix://")


@dataclass
class RedisConfig(ServiceConfig):
    """Configuration for Redis Service"""
    url: Optional[str] = None
    decode_responses: bool = True
    socket_timeout: float = 5.0
    max_connections: int = 10
    retry_on_timeout: bool = True
    health_check_interval: int = 30


class RedisService(BaseService[RedisConfig]):
    """
    Async-only Redis service.

    When no URL is configured, or the connection fails, the service stays
    usable but every operation returns its "nothing happened" value.
    """

    def __init__(self, config: Optional[RedisConfig] = None):
        """
        Initialize Redis Service.

        Args:
            config: Redis configuration. If not provided, uses REDIS_URL.
        """
        if config is None:
            config = RedisConfig(url=os.environ.get("REDIS_URL"))

        super().__init__(config, logger)

    def _validate_config(self) -> None:
        super()._validate_config()

        if not self.config.url:
            self.logger.warning("No Redis URL found. Redis functionality will be disabled. Set REDIS_URL.")
        elif not self.config.url.startswith(REDIS_URL_SCHEMES):
            raise ConfigurationError(
                f"Unsupported Redis URL scheme: {self.config.url.split(':', 1)[0]}",
                component="RedisService"
            )

    async def _initialize_client(self) -> Optional[redis.Redis]:
        if not self.config.url:
            self.logger.warning("Redis disabled - no URL configured")
            return None

        try:
            client = redis.from_url(
                self.config.url,
                decode_responses=self.config.decode_responses,
                socket_timeout=self.config.socket_timeout,
                max_connections=self.config.max_connections,
                retry_on_timeout=self.config.retry_on_timeout,
                health_check_interval=self.config.health_check_interval
            )

            await client.ping()
            self.logger.info("Redis connection successful")

            return client

        except Exception as e:
            self.logger.error(f"Failed to connect to Redis: {str(e)}")
            self.logger.warning("Redis functionality disabled due to connection error")
            return None

    async def delete(self, *keys: str) -> int:
        """
        Delete one or more keys.

        Returns:
            Number of keys deleted
        """
        if not self._client or not keys:
            return 0

        try:
            return await self._client.delete(*keys)
        except Exception as e:
            self.logger.error(f"Redis delete failed: {e}")
            return 0

    async def scan_keys(self, pattern: str = "*") -> List[str]:
        """
        Get keys matching pattern, using incremental SCAN instead of KEYS.

        Returns:
            List of matching keys
        """
        if not self._client:
            return []

        try:
            keys = [key async for key in self._client.scan_iter(match=pattern)]
            return [k.decode() if isinstance(k, bytes) else k for k in keys]
        except Exception as e:
            self.logger.warning(f"Redis scan failed: {e}")
            return []

    async def zadd_capped(
        self,
        key: str,
        member: str,
        score: float,
        max_members: int,
        ttl: Optional[int] = None
    ) -> bool:
        """
        Add a member to a sorted set and trim it to the highest-scored
        ``max_members`` entries, atomically.

        Args:
            key: Sorted set key
            member: Member to add
            score: Score of the member (insertion time for FIFO trimming)
            max_members: Capacity of the set
            ttl: Optional expiry for the whole set, in seconds

        Returns:
            True if the transaction was executed
        """
        if not self._client:
            return False

        try:
            pipe = self._client.pipeline(transaction=True)
            pipe.zadd(key, {member: score})
            pipe.zremrangebyrank(key, 0, -(max_members + 1))
            if ttl:
                pipe.expire(key, ttl)
            await pipe.execute()
            return True
        except Exception as e:
            self.logger.error(f"Redis zadd failed for key '{key}': {e}")
            return False

    async def zrem(self, key: str, *members: str) -> int:
        """
        Remove members from a sorted set.

        Returns:
            Number of members actually removed
        """
        if not self._client or not members:
            return 0

        try:
            return await self._client.zrem(key, *members)
        except Exception as e:
            self.logger.error(f"Redis zrem failed for key '{key}': {e}")
            return 0

    async def zcard(self, key: str) -> int:
        if not self._client:
            return 0

        try:
            return await self._client.zcard(key)
        except Exception as e:
            self.logger.warning(f"Redis zcard failed for key '{key}': {e}")
            return 0

    async def health_check(self) -> Dict[str, Any]:
        if not self.config.url:
            return {
                "healthy": True,  # Not unhealthy, just disabled
                "status": "disabled",
                "details": {
                    "message": "Redis not configured"
                }
            }

        try:
            if not self._client:
                return {
                    "healthy": False,
                    "status": "not_connected",
                    "details": {
                        "error": "Client not initialized"
                    }
                }

            await self._client.ping()
            info = await self._client.info()

            return {
                "healthy": True,
                "status": "connected",
                "details": {
                    "redis_version": info.get("redis_version", "unknown"),
                    "connected_clients": info.get("connected_clients", 0),
                }
            }

        except Exception as e:
            return {
                "healthy": False,
                "status": "error",
                "details": {
                    "error": str(e)
                }
            }

    async def _cleanup(self) -> None:
        if self._client:
            try:
                await self._client.aclose()
            except Exception as e:
                self.logger.warning(f"Error closing Redis client: {e}")

    def is_connected(self) -> bool:
        return self._client is not None


async def create_redis_service(url: Optional[str] = None, **kwargs) -> RedisService:
    """Create and initialize a Redis service instance"""
    service = RedisService(RedisConfig(url=url, **kwargs))
    await service.initialize()
    return service
