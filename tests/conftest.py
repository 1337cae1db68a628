"""
Global test configuration and fixtures
"""

import time

import pytest

from tests.fakes.fake_redis import FakeRedis

# 느린 테스트 임계값 (초)
SLOW_TEST_THRESHOLD = 5.0
WARNING_TEST_THRESHOLD = 2.0


@pytest.fixture(autouse=True)
def track_test_duration(request):
    """모든 테스트의 실행 시간을 추적하고 느린 테스트 경고"""
    start_time = time.time()

    yield

    duration = time.time() - start_time
    test_name = request.node.nodeid

    if duration > SLOW_TEST_THRESHOLD:
        print(f"\nSLOW TEST ({duration:.2f}s): {test_name}")
        print("   Consider marking with @pytest.mark.slow or optimizing")
    elif duration > WARNING_TEST_THRESHOLD:
        print(f"\nSlow ({duration:.2f}s): {test_name}")


@pytest.fixture
def fake_redis() -> FakeRedis:
    """In-memory async Redis"""
    return FakeRedis()


@pytest.fixture
def sample_embedding() -> list[float]:
    """유효한 1536차원 임베딩"""
    return [0.001 * (i % 100) for i in range(1536)]


# Pytest hooks
def pytest_configure(config):
    """pytest 설정"""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (needs Postgres/Redis)")
    config.addinivalue_line("markers", "slow: Slow tests (>5s)")


def pytest_collection_modifyitems(config, items):
    """테스트 수집 후 처리"""
    for item in items:
        # 경로 기반 자동 마커 추가
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


def pytest_report_header(config):
    """리포트 헤더 추가"""
    return [
        f"Slow test threshold: {SLOW_TEST_THRESHOLD}s",
        f"Warning threshold: {WARNING_TEST_THRESHOLD}s",
    ]
