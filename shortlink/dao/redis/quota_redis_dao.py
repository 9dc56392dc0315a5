"""Data Access Object (DAO) implementation for per-client quota counters in Redis

Each client has one counter key holding its remaining link creations. The key is
created lazily with a fixed TTL (the quota window) and is refreshed only by
expiring: the first request after expiry initializes a new window.

Classes:
    QuotaRedisDAO:
        DAO for reserving and decrementing client quota counters in Redis.

Example:
    >>> from shortlink.dao.redis import QuotaRedisDAO
    >>> dao = QuotaRedisDAO(redis_db=1, prefix="app:dev")
    >>> dao.reserve("203.0.113.7", quota=10, window=1800).remaining
    10
    >>> dao.decrement("203.0.113.7").remaining
    9
"""

from datetime import timedelta

from beartype import beartype

from shortlink.models import QuotaModel
from shortlink.dao.base import QuotaBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error
from shortlink.dao.exceptions import QuotaCounterNotFoundError


# Decrement only while the counter is positive and report the post-decrement
# value with the key's TTL. Returns nil when the counter doesn't exist.
DECREMENT_SCRIPT = """
local remaining = redis.call('GET', KEYS[1])
if not remaining then
    return nil
end
remaining = tonumber(remaining)
if remaining > 0 then
    remaining = redis.call('DECR', KEYS[1])
end
return {remaining, redis.call('TTL', KEYS[1])}
"""


class QuotaRedisDAO(RedisClientMixin, QuotaBaseDAO):
    """Redis-based Data Access Object (DAO) for client quota counters

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        reserve(client_key: str, quota: int, window: int, **kwargs) -> QuotaModel:
            Read the client's counter, initializing it when missing.
            Raises DataStoreError on connectivity issues with Redis.

        decrement(client_key: str, **kwargs) -> QuotaModel:
            Decrement the client's counter without going below zero.
            Raises QuotaCounterNotFoundError when the counter doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def reserve(self, client_key: str, quota: int, window: int, **kwargs) -> QuotaModel:
        """Retrieve a client's quota counter, initializing a new window if needed

        Args:
            client_key (str):
                Client identity.
            quota (int):
                Counter value for a new window.
            window (int):
                Window length in seconds.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            QuotaModel:
                Remaining creations and time until the window resets.

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.reserve('203.0.113.7', quota=10, window=1800)
            QuotaModel(client_key='203.0.113.7', remaining=10, reset_in=datetime.timedelta(seconds=1800))
        """
        client_quota_key = self.keys.client_quota_key(client_key)

        # NOTE: SET NX EX initializes the counter and its TTL in one command, and the
        #       transaction reads it back in the same round trip. A separate SET and
        #       EXPIRE would leave a window where a counter exists without TTL and the
        #       client would never get a fresh window.
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(client_quota_key, quota, nx=True, ex=window)
            pipe.get(client_quota_key)
            pipe.ttl(client_quota_key)
            _, remaining, ttl = pipe.execute()

        return QuotaModel(
            client_key=client_key,
            remaining=int(remaining) if remaining is not None else quota,
            reset_in=timedelta(seconds=max(ttl, 0)),
        )

    @handle_redis_connection_error
    @beartype
    def decrement(self, client_key: str, **kwargs) -> QuotaModel:
        """Atomically decrement a client's quota counter

        NOTE: the counter never drops below zero. Requests that passed reserve()
              concurrently may still exceed the quota by the number of racing
              requests; the quota is best-effort, not strict.

        Args:
            client_key (str):
                Client identity.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            QuotaModel:
                Remaining creations and time until reset, read back after decrementing.

        Raises:
            QuotaCounterNotFoundError:
                If the client's counter doesn't exist (e.g. its window just elapsed).
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.decrement('203.0.113.7')
            QuotaModel(client_key='203.0.113.7', remaining=9, reset_in=datetime.timedelta(seconds=1799))
        """
        client_quota_key = self.keys.client_quota_key(client_key)

        result = self.redis.eval(DECREMENT_SCRIPT, 1, client_quota_key)
        if result is None:
            raise QuotaCounterNotFoundError(f"Quota counter for client '{client_key}' does not exist.")

        remaining, ttl = result
        return QuotaModel(
            client_key=client_key,
            remaining=int(remaining),
            reset_in=timedelta(seconds=max(int(ttl), 0)),
        )
