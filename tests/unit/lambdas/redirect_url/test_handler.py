import json
from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch
from freezegun import freeze_time

from urlshortener.types import LambdaEvent, LambdaContext, LambdaConfiguration
from urlshortener.lambdas.redirect_url import app
from urlshortener.models import ShortURLModel
from urlshortener.dao.redis import ShortURLRedisDAO
from urlshortener.dao.exceptions import DataStoreError


@pytest.fixture
def successful_event_301() -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/{shortcode}',
        'pathParameters': {'shortcode': 'abc123'},
        'httpMethod': 'GET',
        'path': '/abc123',
        'requestContext': {'resourcePath': '/{shortcode}', 'httpMethod': 'GET', 'domainName': 'testhost:1000', 'stage': 'test'},
    })


@pytest.fixture
def bad_request_400() -> LambdaEvent:
    return cast(LambdaEvent, {
        'resource': '/{shortcode}',
        'pathParameters': None,
        'httpMethod': 'GET',
        'path': '/',
        'requestContext': {'resourcePath': '/{shortcode}', 'httpMethod': 'GET', 'domainName': 'testhost:1000', 'stage': 'test'},
    })


class TestRedirectUrlHandler:

    @pytest.fixture
    def context(self) -> LambdaContext:
        return cast(LambdaContext, {'function_name': 'redirect_url'})

    @pytest.fixture
    def config(self) -> LambdaConfiguration:
        return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, context: LambdaContext, config: LambdaConfiguration, store) -> None:
        # Patch Lambda dependencies
        monkeypatch.setattr(app, 'load_config', lambda *a, **kw: self.config)
        monkeypatch.setattr(app, 'RedisStoreClient', lambda *a, **kw: self.store)

        self.context = context
        self.config = config
        self.store = store
        self.short_url_dao = ShortURLRedisDAO(store)

    def test_lambda_handler(self, successful_event_301: LambdaEvent) -> None:
        self.short_url_dao.insert(ShortURLModel(target='https://example.com/my-page', shortcode='abc123'))

        response = app.lambda_handler(successful_event_301, self.context)

        assert response['statusCode'] == 301
        assert response['headers']['Location'] == 'https://example.com/my-page'
        assert self.short_url_dao.hits('abc123') == 1
        assert self.store.closed

    def test_lambda_handler_counts_every_redirect(self, successful_event_301: LambdaEvent) -> None:
        self.short_url_dao.insert(ShortURLModel(target='https://example.com/my-page', shortcode='abc123'))

        app.lambda_handler(successful_event_301, self.context)
        app.lambda_handler(successful_event_301, self.context)

        assert self.short_url_dao.hits('abc123') == 2

    def test_lambda_handler_with_missing_shortcode(self, bad_request_400: LambdaEvent) -> None:
        response = app.lambda_handler(bad_request_400, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 400
        assert body['message'] == "Bad Request (missing 'shortcode' in path)"
        assert body['errorCode'] == 'MISSING_SHORTCODE'

    def test_lambda_handler_with_unknown_shortcode(self, successful_event_301: LambdaEvent) -> None:
        response = app.lambda_handler(successful_event_301, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 404
        assert body['message'] == "Not Found (short url https://testhost:1000/abc123 doesn't exist)"
        assert body['errorCode'] == 'SHORT_URL_NOT_FOUND'

    def test_lambda_handler_with_expired_shortcode(self, successful_event_301: LambdaEvent) -> None:
        with freeze_time('2025-10-15 12:00:00') as frozen:
            self.short_url_dao.insert(ShortURLModel(target='https://example.com/my-page', shortcode='abc123'), ttl=3600)
            frozen.tick(3600)

            response = app.lambda_handler(successful_event_301, self.context)

        assert response['statusCode'] == 404
        assert json.loads(response['body'])['errorCode'] == 'SHORT_URL_NOT_FOUND'

    def test_lambda_handler_with_failing_usage_counter(self, successful_event_301: LambdaEvent) -> None:
        self.short_url_dao.insert(ShortURLModel(target='https://example.com/my-page', shortcode='abc123'))
        self.store.incr_with_expiry = MagicMock(side_effect=DataStoreError("Can't connect to Redis at 203.0.113.1:18000/5."))

        response = app.lambda_handler(successful_event_301, self.context)

        assert response['statusCode'] == 301
        assert response['headers']['Location'] == 'https://example.com/my-page'

    def test_lambda_handler_with_unavailable_store(self, monkeypatch: MonkeyPatch, successful_event_301: LambdaEvent) -> None:
        self.store.get_with_ttl_and_counter = MagicMock(side_effect=DataStoreError("Can't connect to Redis at 203.0.113.1:18000/5."))

        response = app.lambda_handler(successful_event_301, self.context)
        body = json.loads(response['body'])

        assert response['statusCode'] == 500
        assert body['message'] == 'Internal Server Error'
        assert body['errorCode'] == 'RESOLUTION_FAILED'

    def test_lambda_handler_with_unreachable_store(self, monkeypatch: MonkeyPatch, successful_event_301: LambdaEvent) -> None:
        monkeypatch.setattr(app, 'RedisStoreClient', MagicMock(side_effect=DataStoreError("Can't connect to Redis at 203.0.113.1:18000/5.")))

        response = app.lambda_handler(successful_event_301, self.context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['errorCode'] == 'RESOLUTION_FAILED'
