"""Data Access Object (DAO) implementation for managing short links in Redis

This module provides a Redis-based implementation of ShortLinkBaseDAO for
inserting and resolving ShortLinkModel instances.

Responsibilities:
    - Insert short links with their TTL, never overwriting a live mapping;
    - Retrieve short links together with their remaining TTL;
    - Raise appropriate DAO exceptions on misses, collisions and connectivity issues.

Classes:
    ShortLinkRedisDAO:
        DAO for storing and retrieving ShortLinkModel in a Redis datastore.

Example:
    >>> from shortlink.models import ShortLinkModel
    >>> from shortlink.dao.redis import ShortLinkRedisDAO

    >>> dao = ShortLinkRedisDAO(prefix="app:dev")

    >>> short_link = ShortLinkModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc123",
    ...     expiry_hours=24,
    ... )
    >>> dao.insert(short_link)
    <ShortLinkRedisDAO>

    >>> retrieved = dao.get("abc123")
    >>> retrieved.target
    'https://example.com/page'
    >>> retrieved.expires_at
    <datetime>
"""

import math
from datetime import datetime, timedelta, UTC

from beartype import beartype

from shortlink.constants import TTL
from shortlink.models import ShortLinkModel
from shortlink.dao.base import ShortLinkBaseDAO
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.helpers import handle_redis_connection_error
from shortlink.dao.exceptions import ShortLinkAlreadyExistsError, ShortLinkNotFoundError


class ShortLinkRedisDAO(RedisClientMixin, ShortLinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short link mappings

    This class implements the ShortLinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkRedisDAO:
            Insert a short link mapping with its TTL.
            Raises ShortLinkAlreadyExistsError when a live link with the same shortcode exists.
            Raises DataStoreError on connectivity issues with Redis.

        get(shortcode: str, **kwargs) -> ShortLinkModel:
            Retrieve a short link mapping and its expiry by shortcode.
            Raises ShortLinkNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.
    """

    @handle_redis_connection_error
    @beartype
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkRedisDAO':
        """Insert a short link mapping into Redis

        Args:
            short_link (ShortLinkModel):
                ShortLinkModel instance representing the short link mapping.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkRedisDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a live short link with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs.

        Example:
            >>> dao.insert(ShortLinkModel(target='https://example.com', shortcode='abc123'))
            <ShortLinkRedisDAO>
        """
        link_url_key = self.keys.link_url_key(short_link.shortcode)
        if self.redis.get(link_url_key):
            raise ShortLinkAlreadyExistsError(f"Short link with code '{short_link.shortcode}' already exists.")

        # NOTE: The GET above only rejects links committed before this call began.
        #       SET NX settles races between concurrent inserts of the same shortcode:
        #
        #       (lambda 1): GET <app>:links:<shortcode>:url  => nil
        #       (lambda 2): GET <app>:links:<shortcode>:url  => nil
        #       (lambda 1): SET <app>:links:<shortcode>:url <url 1> EX <ttl> NX  => OK
        #       (lambda 2): SET <app>:links:<shortcode>:url <url 2> EX <ttl> NX  => nil
        #
        #       Exactly one insert wins, the other raises ShortLinkAlreadyExistsError.
        # fmt: off
        created = self.redis.set(link_url_key,
                                 short_link.target,
                                 ex=short_link.ttl_seconds,
                                 nx=True)
        # fmt: on
        if not created:
            raise ShortLinkAlreadyExistsError(f"Short link with code '{short_link.shortcode}' already exists.")
        return self

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a stored short link mapping by shortcode

        Fetches the target URL and its TTL in a single Redis transaction, then
        calculates the expiry datetime from the remaining TTL value.

        Args:
            shortcode (str):
                The shortcode identifier for the short link.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortLinkModel:
                The retrieved ShortLinkModel instance.

        Raises:
            ShortLinkNotFoundError:
                If the short link does not exist in Redis (or expired).
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            ShortLinkModel(target='https://example.com', shortcode='abc123', ...)
        """
        link_url_key = self.keys.link_url_key(shortcode)

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(link_url_key)
            pipe.ttl(link_url_key)
            target, ttl = pipe.execute()

        if not target:
            raise ShortLinkNotFoundError(f"Short link with code '{shortcode}' not found.")

        # TTL is -1 for keys without expiry, which this DAO never writes
        ttl = max(ttl, 0)
        return ShortLinkModel(
            target=target,
            shortcode=shortcode,
            expiry_hours=max(math.ceil(ttl / TTL.ONE_HOUR), 1),
            expires_at=datetime.now(UTC) + timedelta(seconds=ttl),
        )
