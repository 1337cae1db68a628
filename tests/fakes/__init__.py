"""
Test Fakes Module

In-memory stand-ins for external services used by unit tests.
"""

from tests.fakes.fake_redis import FakePipeline, FakeRedis, FakeRedisError
from tests.fakes.fake_vector_store import FakeVectorStore

__all__ = [
    "FakePipeline",
    "FakeRedis",
    "FakeRedisError",
    "FakeVectorStore",
]
