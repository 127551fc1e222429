import pytest

from urlshortener.dao.redis import ShortURLRedisDAO, QuotaRedisDAO
from urlshortener.services import IdentifierAllocator, MappingResolver, QuotaLimiter, ShortenerService


SERVICE_DOMAIN = 'short.ly'


@pytest.fixture
def short_url_dao(store) -> ShortURLRedisDAO:
    return ShortURLRedisDAO(store)


@pytest.fixture
def quota_dao(store) -> QuotaRedisDAO:
    return QuotaRedisDAO(store)


@pytest.fixture
def make_service(short_url_dao: ShortURLRedisDAO, quota_dao: QuotaRedisDAO):
    def _make_service(limit: int = 10, window: int = 1800, domain: str | None = SERVICE_DOMAIN) -> ShortenerService:
        return ShortenerService(
            allocator=IdentifierAllocator(short_url_dao),
            resolver=MappingResolver(short_url_dao),
            limiter=QuotaLimiter(quota_dao, limit=limit, window=window),
            short_url_dao=short_url_dao,
            domain=domain,
        )

    return _make_service
