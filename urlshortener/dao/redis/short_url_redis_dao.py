"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO for
claiming, retrieving and counting resolutions of ShortURLModel instances.

Responsibilities:
    - Claim a shortcode and store its destination with an expiry (SET NX EX);
    - Retrieve a destination together with its remaining lifetime;
    - Maintain a per-link usage counter that expires with the link;
    - Translate store-level absence into ShortURL-specific exceptions.

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from urlshortener.models import ShortURLModel
    >>> from urlshortener.dao.redis import RedisStoreClient, ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(RedisStoreClient(prefix="app:dev"))

    >>> short_url = ShortURLModel(
    ...     target="https://example.com/page",
    ...     shortcode="abc123"
    ... )
    >>> dao.insert(short_url, ttl=86400)
    <ShortURLRedisDAO>

    >>> retrieved = dao.get("abc123")
    >>> retrieved.target
    'https://example.com/page'
    >>> retrieved.expires_at
    <datetime>

    >>> dao.hit("abc123", ttl=86400)
    1
"""

from datetime import datetime, timedelta, UTC

from beartype import beartype

from urlshortener.constants import TTL
from urlshortener.models import ShortURLModel
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.redis.store_client import RedisStoreClient
from urlshortener.dao.exceptions import KeyNotFoundError, ShortURLAlreadyExistsError, ShortURLNotFoundError


class ShortURLRedisDAO(ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    Attributes:
        store (RedisStoreClient):
            Store client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_url: ShortURLModel, ttl: int) -> ShortURLRedisDAO:
            Claim the shortcode with SET NX and store the destination URL.
            Raises ShortURLAlreadyExistsError when the shortcode is taken.
            Raises DataStoreError on connectivity issues with Redis.

        get(shortcode: str) -> ShortURLModel:
            Retrieve a short URL mapping, its expiry and usage count by shortcode.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.

        exists(shortcode: str) -> bool:
            Check whether an unexpired mapping exists.

        hit(shortcode: str, ttl: int | None = None) -> int:
            Increment the link's usage counter.

        hits(shortcode: str) -> int:
            Read the link's usage counter.
    """

    def __init__(self, store: RedisStoreClient):
        self.store = store
        self.keys = store.keys

    @beartype
    def insert(self, short_url: ShortURLModel, ttl: int = TTL.ONE_DAY) -> 'ShortURLRedisDAO':
        """Insert a short URL mapping into Redis

        The shortcode is claimed with a single conditional write
        (SET <key> <url> NX EX <ttl>), so two concurrent requests for the
        same shortcode can never both succeed and an existing mapping is
        never overwritten.

        Args:
            short_url (ShortURLModel):
                ShortURLModel instance representing the shortened URL mapping.
            ttl (int):
                Lifetime of the mapping in seconds. Defaults to 24 hours.

        Returns:
            ShortURLRedisDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If a short URL with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs.
        """
        link_url_key = self.keys.link_url_key(short_url.shortcode)
        claimed = self.store.set_with_ttl(link_url_key, short_url.target, ttl, only_if_absent=True)
        if not claimed:
            raise ShortURLAlreadyExistsError(f"Short URL with code '{short_url.shortcode}' already exists.")
        return self

    @beartype
    def get(self, shortcode: str) -> ShortURLModel:
        """Retrieve a stored short URL mapping by shortcode

        Fetches the destination URL, its remaining TTL and its usage counter in
        a single Redis transaction and derives the expiry datetime from the TTL.
        `hits` counts resolutions made before this read.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist (or has expired) in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            ShortURLModel(target='https://example.com', shortcode='abc123', ...)
        """
        link_url_key = self.keys.link_url_key(shortcode)
        link_hits_key = self.keys.link_hits_key(shortcode)
        try:
            target, ttl, hits = self.store.get_with_ttl_and_counter(link_url_key, link_hits_key)
        except KeyNotFoundError as e:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.") from e

        return ShortURLModel(
            target=target,
            shortcode=shortcode,
            hits=hits,
            expires_at=None if ttl is None else datetime.now(UTC) + timedelta(seconds=ttl),
        )

    @beartype
    def exists(self, shortcode: str) -> bool:
        return self.store.exists(self.keys.link_url_key(shortcode))

    @beartype
    def hit(self, shortcode: str, ttl: int | None = None) -> int:
        """Increment the usage counter for a short URL

        NOTE: the counter key is created at 0 with the given expiry on the
              first hit and later hits leave that expiry untouched, so it
              disappears together with the mapping it counts.

        Args:
            shortcode (str):
                The short code that was just resolved.
            ttl (int | None):
                Remaining lifetime of the mapping in seconds. Falls back to
                the default mapping lifetime when unknown.

        Return:
            int: usage count after increment

        Raises:
            DataStoreError:
                If Redis connectivity issues occur.
        """
        link_hits_key = self.keys.link_hits_key(shortcode)
        return self.store.incr_with_expiry(link_hits_key, ttl or TTL.ONE_DAY)

    @beartype
    def hits(self, shortcode: str) -> int:
        try:
            return int(self.store.get(self.keys.link_hits_key(shortcode)))
        except KeyNotFoundError:
            return 0
