"""Thin operation set over the Redis key-value engine

Every DAO in this package talks to Redis exclusively through RedisStoreClient.
Store failures are classified exactly once here: an absent key is reported as
KeyNotFoundError (a normal outcome), while connection problems, timeouts and
failed commands are reported as DataStoreError. Callers never re-interpret
raw redis exceptions.

Responsibilities:
    - get / set-with-TTL / atomic increment / TTL query on single keys;
    - conditional "set only if absent" writes for exactly-once claims;
    - small MULTI/EXEC pipelines for paired operations that must observe
      the same key state (read+TTL+counter, claim+decrement+TTL, create-with-expiry+increment).

Classes:
    RedisStoreClient:
        Redis-backed store client. Inherits client setup, healthcheck and
        context-manager lifecycle from RedisClientMixin.

Example:
    >>> with RedisStoreClient(redis_url='redis://localhost:6379/0', prefix='urlshortener:dev') as store:
    ...     store.set_with_ttl('greeting', 'hello', ttl=60)
    ...     store.get('greeting')
    True
    'hello'
    >>> store.ttl('greeting')
    60
"""

from beartype import beartype

from urlshortener.dao.redis.mixins import RedisClientMixin
from urlshortener.dao.redis.helpers import handle_redis_connection_error
from urlshortener.dao.exceptions import KeyNotFoundError


# Values returned by the Redis TTL command
_TTL_KEY_MISSING = -2
_TTL_NO_EXPIRY = -1


def _normalize_ttl(key: str, ttl: int) -> int | None:
    if ttl == _TTL_KEY_MISSING:
        raise KeyNotFoundError(f"Key '{key}' not found.")
    if ttl == _TTL_NO_EXPIRY:
        return None
    return ttl


class RedisStoreClient(RedisClientMixin):
    """Redis store client shared by all DAOs of one request

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        get(key) -> str
        exists(key) -> bool
        set_with_ttl(key, value, ttl, only_if_absent=False) -> bool
        incr_by(key, delta) -> int
        ttl(key) -> int | None
        expire(key, ttl, only_if_unset=False) -> bool
        get_with_ttl(key) -> tuple[str, int | None]
        get_with_ttl_and_counter(key, counter_key) -> tuple[str, int | None, int]
        claim_and_decrement(key, initial, ttl) -> tuple[int, int | None]
        incr_with_expiry(key, ttl) -> int
    """

    @handle_redis_connection_error
    @beartype
    def get(self, key: str) -> str:
        """Return the value stored at `key`

        Raises:
            KeyNotFoundError:
                If the key doesn't exist (never set, or expired).
            DataStoreError:
                If Redis is unavailable.
        """
        value = self.redis.get(key)
        if value is None:
            raise KeyNotFoundError(f"Key '{key}' not found.")
        return value

    @handle_redis_connection_error
    @beartype
    def exists(self, key: str) -> bool:
        return bool(self.redis.exists(key))

    @handle_redis_connection_error
    @beartype
    def set_with_ttl(self, key: str, value: str | int, ttl: int, only_if_absent: bool = False) -> bool:
        """SET `key` to `value` expiring after `ttl` seconds

        Args:
            key (str):
                Redis key.
            value (str | int):
                Value to store.
            ttl (int):
                Time-to-live in seconds.
            only_if_absent (bool):
                If True, issue SET NX so the write only happens when the key
                doesn't exist yet. Defaults to False.

        Returns:
            bool:
                True if the value was written, False if `only_if_absent` was
                set and the key already existed.

        Raises:
            DataStoreError:
                If Redis is unavailable.
        """
        return bool(self.redis.set(key, value, ex=ttl, nx=only_if_absent))

    @handle_redis_connection_error
    @beartype
    def incr_by(self, key: str, delta: int) -> int:
        """Atomically add `delta` (may be negative) to the integer at `key`."""
        return self.redis.incrby(key, delta)

    @handle_redis_connection_error
    @beartype
    def ttl(self, key: str) -> int | None:
        """Return the remaining time-to-live of `key` in seconds

        Returns:
            int | None:
                Remaining seconds, or None if the key exists without an expiry.

        Raises:
            KeyNotFoundError:
                If the key doesn't exist.
            DataStoreError:
                If Redis is unavailable.
        """
        return _normalize_ttl(key, self.redis.ttl(key))

    @handle_redis_connection_error
    @beartype
    def expire(self, key: str, ttl: int, only_if_unset: bool = False) -> bool:
        """Set the expiry of `key`. `only_if_unset` issues EXPIRE NX, which needs Redis 7.0+."""
        return bool(self.redis.expire(key, ttl, nx=only_if_unset))

    @handle_redis_connection_error
    @beartype
    def get_with_ttl(self, key: str) -> tuple[str, int | None]:
        """Read the value and remaining TTL of `key` in one transaction

        Raises:
            KeyNotFoundError:
                If the key doesn't exist.
            DataStoreError:
                If Redis is unavailable.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(key)
            pipe.ttl(key)
            value, ttl = pipe.execute()

        if value is None:
            raise KeyNotFoundError(f"Key '{key}' not found.")
        return value, _normalize_ttl(key, ttl)

    @handle_redis_connection_error
    @beartype
    def get_with_ttl_and_counter(self, key: str, counter_key: str) -> tuple[str, int | None, int]:
        """Read the value and remaining TTL of `key` together with the counter at `counter_key`

        All three reads run in one MULTI/EXEC transaction. A missing counter reads as 0.

        Returns:
            tuple[str, int | None, int]:
                (value, seconds until `key` expires or None, counter value)

        Raises:
            KeyNotFoundError:
                If `key` doesn't exist.
            DataStoreError:
                If Redis is unavailable.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.get(key)
            pipe.ttl(key)
            pipe.get(counter_key)
            value, ttl, count = pipe.execute()

        if value is None:
            raise KeyNotFoundError(f"Key '{key}' not found.")
        return value, _normalize_ttl(key, ttl), int(count or 0)

    @handle_redis_connection_error
    @beartype
    def claim_and_decrement(self, key: str, initial: int, ttl: int) -> tuple[int, int | None]:
        """Decrement the counter at `key`, opening a fresh window if it's missing

        NOTE: SET NX, DECR and TTL run in a single MULTI/EXEC transaction.
              Without the SET NX a counter that expired since the caller last
              looked at it would be recreated by DECR with no TTL at all, and
              the client would stay locked out forever:

              (request 1): GET  clients:<ip>:quota  => 1
                           ... window expires
              (request 1): DECR clients:<ip>:quota  => -1 (no TTL!)

        Args:
            key (str):
                Counter key.
            initial (int):
                Value to open a new window with, if the key doesn't exist.
            ttl (int):
                Window length in seconds for a newly opened window.

        Returns:
            tuple[int, int | None]:
                (counter value after decrement, seconds until the window resets)

        Raises:
            DataStoreError:
                If Redis is unavailable.
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(key, initial, ex=ttl, nx=True)
            pipe.decr(key)
            pipe.ttl(key)
            _, value, remaining_ttl = pipe.execute()

        return value, _normalize_ttl(key, remaining_ttl)

    @handle_redis_connection_error
    @beartype
    def incr_with_expiry(self, key: str, ttl: int) -> int:
        """Increment the counter at `key` and make it expire after `ttl` seconds

        The counter is created at 0 with its expiry (SET NX EX) before INCR,
        so repeated increments never extend the counter's lifetime and a
        counter never exists without a TTL.

        Returns:
            int: counter value after increment
        """
        with self.redis.pipeline(transaction=True) as pipe:
            pipe.set(key, 0, ex=ttl, nx=True)
            pipe.incr(key)
            _, value = pipe.execute()

        return value
