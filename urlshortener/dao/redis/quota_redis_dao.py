from beartype import beartype

from urlshortener.models import QuotaStatus
from urlshortener.dao.base import QuotaBaseDAO
from urlshortener.dao.redis.store_client import RedisStoreClient
from urlshortener.dao.exceptions import KeyNotFoundError, QuotaNotFoundError


class QuotaRedisDAO(QuotaBaseDAO):
    """Redis-based DAO for per-client shorten request quotas

    Each client owns a single counter key (clients:<client>:quota) whose TTL
    is the quota window. Redis expires the key at the end of the window; the
    next request opens a new one.
    """

    def __init__(self, store: RedisStoreClient):
        self.store = store
        self.keys = store.keys

    @beartype
    def open_window(self, client_key: str, limit: int, window: int) -> bool:
        client_quota_key = self.keys.client_quota_key(client_key)
        return self.store.set_with_ttl(client_quota_key, limit, window, only_if_absent=True)

    @beartype
    def get(self, client_key: str) -> QuotaStatus:
        client_quota_key = self.keys.client_quota_key(client_key)
        try:
            remaining, ttl = self.store.get_with_ttl(client_quota_key)
        except KeyNotFoundError as e:
            raise QuotaNotFoundError(f"Client '{client_key}' has no open quota window.") from e

        return QuotaStatus(client_key=client_key, remaining=int(remaining), reset_in=ttl or 0)

    @beartype
    def consume(self, client_key: str, limit: int, window: int) -> QuotaStatus:
        client_quota_key = self.keys.client_quota_key(client_key)
        remaining, ttl = self.store.claim_and_decrement(client_quota_key, initial=limit, ttl=window)
        return QuotaStatus(client_key=client_key, remaining=remaining, reset_in=ttl or 0)
