"""
Unit tests for rate limiting.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from eduportal.core import rate_limit as rate_limit_module
from eduportal.core.exceptions import RateLimitExceeded
from eduportal.core.rate_limit import (
    _check_rate_limit_memory,
    check_rate_limit,
    client_ip_key,
    rate_limit,
)


@pytest.fixture(autouse=True)
def clear_memory_store(monkeypatch):
    monkeypatch.setattr(rate_limit_module, "_last_sweep", 0.0)
    rate_limit_module._memory_store.clear()
    rate_limit_module._memory_windows.clear()
    yield
    rate_limit_module._memory_store.clear()
    rate_limit_module._memory_windows.clear()


def _request(host: str = "10.0.0.1", path: str = "/api/v1/auth/login") -> MagicMock:
    request = MagicMock()
    request.client.host = host
    request.url.path = path
    return request


class TestMemoryWindow:
    def test_allows_up_to_limit(self):
        results = [_check_rate_limit_memory("k", 3, 60) for _ in range(4)]
        assert results == [True, True, True, False]

    def test_keys_are_independent(self):
        assert _check_rate_limit_memory("a", 1, 60) is True
        assert _check_rate_limit_memory("b", 1, 60) is True
        assert _check_rate_limit_memory("a", 1, 60) is False

    def test_idle_keys_are_dropped(self):
        with patch("eduportal.core.rate_limit.time.time", return_value=1_000.0):
            _check_rate_limit_memory("rate_limit:login:10.0.0.1", 5, 60)
            _check_rate_limit_memory("rate_limit:login:10.0.0.2", 5, 60)

        with patch("eduportal.core.rate_limit.time.time", return_value=1_200.0):
            _check_rate_limit_memory("rate_limit:login:10.0.0.3", 5, 60)

        assert set(rate_limit_module._memory_store) == {"rate_limit:login:10.0.0.3"}
        assert set(rate_limit_module._memory_windows) == {"rate_limit:login:10.0.0.3"}

    def test_keys_inside_their_window_are_kept(self):
        with patch("eduportal.core.rate_limit.time.time", return_value=1_000.0):
            _check_rate_limit_memory("long", 5, 600)
            _check_rate_limit_memory("short", 5, 60)

        with patch("eduportal.core.rate_limit.time.time", return_value=1_100.0):
            _check_rate_limit_memory("other", 5, 60)

        assert "long" in rate_limit_module._memory_store
        assert "short" not in rate_limit_module._memory_store


class TestCheckRateLimit:
    @pytest.mark.asyncio
    async def test_uses_memory_without_redis(self):
        with patch("eduportal.core.rate_limit.get_redis", return_value=None):
            assert await check_rate_limit("k", 1, 60) is True
            assert await check_rate_limit("k", 1, 60) is False

    @pytest.mark.asyncio
    async def test_uses_redis_count(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(return_value=[0, 5, 1, True])
        client = MagicMock()
        client.pipeline.return_value = pipe

        with patch("eduportal.core.rate_limit.get_redis", return_value=client):
            assert await check_rate_limit("k", 5, 60) is False

    @pytest.mark.asyncio
    async def test_redis_error_falls_back_to_memory(self):
        pipe = MagicMock()
        pipe.execute = AsyncMock(side_effect=ConnectionError("redis down"))
        client = MagicMock()
        client.pipeline.return_value = pipe

        with patch("eduportal.core.rate_limit.get_redis", return_value=client):
            assert await check_rate_limit("k", 1, 60) is True

        assert "k" in rate_limit_module._memory_store


class TestRateLimitDependency:
    def test_client_ip_key(self):
        assert client_ip_key("login")(_request("1.2.3.4")) == "rate_limit:login:1.2.3.4"

    @pytest.mark.asyncio
    async def test_disabled_limiter_never_blocks(self):
        dependency = rate_limit(limit=1, window_seconds=60)

        with patch("eduportal.core.rate_limit.settings") as mock_settings:
            mock_settings.rate_limit_enabled = False
            for _ in range(3):
                await dependency(_request())

    @pytest.mark.asyncio
    async def test_enabled_limiter_raises_429(self):
        dependency = rate_limit(limit=2, window_seconds=60, key_func=client_ip_key("login"))

        with (
            patch("eduportal.core.rate_limit.settings") as mock_settings,
            patch("eduportal.core.rate_limit.get_redis", return_value=None),
        ):
            mock_settings.rate_limit_enabled = True
            await dependency(_request())
            await dependency(_request())

            with pytest.raises(RateLimitExceeded) as exc_info:
                await dependency(_request())

        assert exc_info.value.status_code == 429
