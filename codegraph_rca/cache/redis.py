"""
Redis Connection

Owns the async redis-py client used by the embedding cache.

Features:
- Lazy client initialization
- Connection health checks
- Explicit close on shutdown
"""

from redis.asyncio import Redis
from redis.exceptions import RedisError

from codegraph_rca.common.observability import get_logger
from codegraph_rca.common.utils import LazyClientInitializer
from codegraph_rca.config.groups import CacheConfig

logger = get_logger(__name__)


class RedisConnection:
    """
    Lazily constructed Redis client.

    The embedding cache never creates clients itself; callers build one here
    (or hand in their own) and own its lifecycle.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 6379,
        password: str | None = None,
        db: int = 0,
        socket_timeout: float | None = 5.0,
    ) -> None:
        """
        Initialize Redis connection.

        Args:
            host: Redis host (default: localhost)
            port: Redis port (default: 6379)
            password: Optional Redis password
            db: Redis database number (default: 0)
            socket_timeout: Socket timeout in seconds
        """
        self.host = host
        self.port = port
        self.password = password
        self.db = db
        self.socket_timeout = socket_timeout
        self._client_init: LazyClientInitializer[Redis] = LazyClientInitializer()

    @classmethod
    def from_config(cls, config: CacheConfig) -> "RedisConnection":
        return cls(
            host=config.host,
            port=config.port,
            password=config.password,
            db=config.db,
            socket_timeout=config.socket_timeout,
        )

    async def get_client(self) -> Redis:
        """
        Get or create Redis client (lazy initialization).

        Returns:
            Redis client instance
        """
        return await self._client_init.get_or_create(
            lambda: Redis(
                host=self.host,
                port=self.port,
                password=self.password,
                db=self.db,
                socket_timeout=self.socket_timeout,
                decode_responses=True,
            )
        )

    async def ping(self) -> bool:
        """
        Check Redis connection health.

        Returns:
            True if Redis is reachable, False otherwise
        """
        try:
            client = await self.get_client()
            await client.ping()
            return True
        except (RedisError, OSError) as e:
            logger.error(f"Redis ping failed: {e}")
            return False

    async def close(self) -> None:
        """
        Close Redis connection.

        Should be called during application shutdown.
        """
        if client := self._client_init.get_if_exists():
            await client.aclose()
            self._client_init.reset()
            logger.info("Redis connection closed")


__all__ = ["RedisConnection"]
