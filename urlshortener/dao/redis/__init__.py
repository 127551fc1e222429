from urlshortener.dao.redis.redis_key_schema import RedisKeySchema
from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.store_client import RedisStoreClient
from urlshortener.dao.redis.short_url_redis_dao import ShortURLRedisDAO
from urlshortener.dao.redis.quota_redis_dao import QuotaRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'RedisStoreClient',
    'ShortURLRedisDAO',
    'QuotaRedisDAO',
]
