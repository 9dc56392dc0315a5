"""Unit tests for Redis-based mixins.

Test coverage includes:
    1. Initialization and configuration
       - Ensures correct initialization with or without a Redis client.
       - Confirms invalid Redis configuration raises DataStoreError.
    2. Healthcheck behavior
       - Healthcheck pings Redis.
       - Missed pong from Redis raises error.
    3. Resource cleanup
       - Owned clients are closed on exit, injected clients are not.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from shortlink.dao.exceptions import DataStoreError
from shortlink.dao.redis.mixins import RedisClientMixin


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def redis_client():
    _redis_client = MagicMock(
        spec=redis.Redis, connection_pool=MagicMock(spec=redis.ConnectionPool, connection_kwargs={'host': 'redis', 'port': 6379, 'db': 0})
    )
    _redis_client.ping.return_value = True
    return _redis_client


@pytest.fixture
def redis_config():
    return {
        'redis_host': 'redis',
        'redis_port': '6379',
        'redis_db': 1,
        'redis_decode_responses': True,
        'redis_username': 'default',
        'redis_password': 'password',
        'redis_socket_timeout': 1.5,
    }


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_redis_client(redis_config):
    """Ensure DAO creates a Redis client when none is provided."""
    with patch('shortlink.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        mixin = RedisClientMixin(**redis_config, prefix='testapp:test')

        redis_mock.assert_called_once_with(
            host='redis',
            port=6379,
            db=1,
            decode_responses=True,
            username='default',
            password='password',
            socket_timeout=1.5,
            socket_connect_timeout=1.5,
        )
        assert mixin.redis is redis_mock_instance
        assert mixin.keys.prefix == 'testapp:test'


def test_initialize_with_redis_client(redis_client):
    """Ensure DAO correctly uses a pre-initialized Redis client."""
    mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')
    assert mixin.redis is redis_client


def test_initialize_with_invalid_redis_config(redis_config):
    """Ensure invalid Redis config raises DataStoreError and releases the client."""
    exception_message = "Can't connect to Redis at 203.0.113.1:18000/5. Check the provided configuration parameters."

    with patch('shortlink.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        redis_mock_instance.connection_pool = MagicMock(connection_kwargs={'host': '203.0.113.1', 'port': 18000, 'db': 5})
        redis_mock_instance.ping.side_effect = redis.exceptions.ConnectionError('Connection error')

        with pytest.raises(DataStoreError, match=exception_message):
            RedisClientMixin(**redis_config, prefix='testapp:test')

        redis_mock_instance.close.assert_called_once()


# -------------------------------
# 2. Healthcheck behavior
# -------------------------------


def test_healthcheck(redis_client):
    """Ensure healthcheck pings Redis."""
    mixin = RedisClientMixin(redis_client=redis_client)
    redis_client.ping.reset_mock()

    assert mixin._healthcheck() is True
    redis_client.ping.assert_called_once()


def test_healthcheck_timeout_without_raising(redis_client):
    """Ensure a timed out ping reports False when raise_error=False."""
    mixin = RedisClientMixin(redis_client=redis_client)
    redis_client.ping.side_effect = redis.exceptions.TimeoutError('Timeout')

    assert mixin._healthcheck(raise_error=False) is False


def test_healthcheck_timeout_raises(redis_client):
    """Ensure a timed out ping raises DataStoreError."""
    mixin = RedisClientMixin(redis_client=redis_client)
    redis_client.ping.side_effect = redis.exceptions.TimeoutError('Timeout')

    with pytest.raises(DataStoreError):
        mixin._healthcheck()


# -------------------------------
# 3. Resource cleanup
# -------------------------------


def test_injected_client_is_not_closed(redis_client):
    """Ensure the caller keeps ownership of an injected client."""
    with RedisClientMixin(redis_client=redis_client) as mixin:
        assert mixin.redis is redis_client

    redis_client.close.assert_not_called()


def test_owned_client_is_closed_on_exit(redis_config):
    """Ensure a client created by the DAO is closed when leaving the context."""
    with patch('shortlink.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        with RedisClientMixin(**redis_config):
            pass

        redis_mock.return_value.close.assert_called_once()


def test_owned_client_is_closed_on_error(redis_config):
    """Ensure the client is released even when the block raises."""
    with patch('shortlink.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        with pytest.raises(RuntimeError):
            with RedisClientMixin(**redis_config):
                raise RuntimeError('boom')

        redis_mock.return_value.close.assert_called_once()
