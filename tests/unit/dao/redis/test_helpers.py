import pytest
import redis

from urlshortener.dao.redis.helpers import handle_redis_connection_error
from urlshortener.dao.exceptions import DataStoreError


class DummyStore:
    def __init__(self, redis_client: redis.Redis, error: Exception | None = None):
        self.redis = redis_client
        self.error = error

    @handle_redis_connection_error
    def run(self):
        if self.error is not None:
            raise self.error
        return 'ok'


def test_handle_redis_connection_error(redis_client: redis.Redis):
    store = DummyStore(redis_client, redis.exceptions.ConnectionError('Cannot connect'))

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        store.run()


def test_handle_redis_timeout_error(redis_client: redis.Redis):
    store = DummyStore(redis_client, redis.exceptions.TimeoutError('Timeout reading from socket'))

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis.test:6379/0."):
        store.run()


def test_handle_redis_command_error(redis_client: redis.Redis):
    store = DummyStore(redis_client, redis.exceptions.ResponseError('OOM command not allowed'))

    with pytest.raises(DataStoreError, match='Redis command failed at redis.test:6379/0: OOM command not allowed'):
        store.run()


def test_handle_redis_connection_error_passes_through_results(redis_client: redis.Redis):
    assert DummyStore(redis_client).run() == 'ok'


def test_handle_redis_connection_error_keeps_other_exceptions(redis_client: redis.Redis):
    store = DummyStore(redis_client, ValueError('not a redis problem'))

    with pytest.raises(ValueError, match='not a redis problem'):
        store.run()
