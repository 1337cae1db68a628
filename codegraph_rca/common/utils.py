"""
Common Utility Functions

1. LazyClientInitializer - 지연 초기화 패턴
2. batched - 고정 크기 배치 분할
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterator, Sequence
from typing import Generic, TypeVar

T = TypeVar("T")


# =============================================================================
# 1. LazyClientInitializer - 지연 클라이언트 초기화
# =============================================================================


class LazyClientInitializer(Generic[T]):
    """
    지연 클라이언트 초기화 패턴.

    Usage:
        class RedisConnection:
            def __init__(self, host: str, port: int):
                self._client_init = LazyClientInitializer[Redis]()
                self.host = host
                self.port = port

            async def get_client(self) -> Redis:
                return await self._client_init.get_or_create(
                    lambda: Redis(host=self.host, port=self.port)
                )

            async def close(self) -> None:
                if client := self._client_init.get_if_exists():
                    await client.aclose()
                self._client_init.reset()
    """

    def __init__(self) -> None:
        self._client: T | None = None
        self._lock = asyncio.Lock()

    async def get_or_create(
        self,
        factory: Callable[[], T] | Callable[[], Awaitable[T]],
    ) -> T:
        """
        클라이언트 인스턴스를 가져오거나 생성.

        Args:
            factory: 클라이언트 생성 함수 (sync 또는 async)

        Returns:
            클라이언트 인스턴스
        """
        if self._client is not None:
            return self._client

        async with self._lock:
            # Double-check locking
            if self._client is not None:
                return self._client

            result = factory()
            if asyncio.iscoroutine(result):
                self._client = await result  # type: ignore[assignment]
            else:
                self._client = result  # type: ignore[assignment]

            return self._client  # type: ignore[return-value]

    def get_if_exists(self) -> T | None:
        """이미 생성된 클라이언트 반환 (없으면 None)"""
        return self._client

    def reset(self) -> None:
        """클라이언트 참조 해제"""
        self._client = None


# =============================================================================
# 2. batched - 배치 분할
# =============================================================================


def batched(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """
    Split a sequence into consecutive batches of at most ``size`` items.

    Example:
        >>> list(batched([1, 2, 3, 4, 5], 2))
        [[1, 2], [3, 4], [5]]
    """
    if size <= 0:
        raise ValueError(f"batch size must be positive, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start : start + size])
