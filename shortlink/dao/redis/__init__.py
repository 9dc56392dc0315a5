from shortlink.dao.redis.redis_key_schema import RedisKeySchema
from shortlink.dao.redis.mixins import RedisClientMixin
from shortlink.dao.redis.short_link_redis_dao import ShortLinkRedisDAO
from shortlink.dao.redis.quota_redis_dao import QuotaRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'ShortLinkRedisDAO',
    'QuotaRedisDAO',
]
