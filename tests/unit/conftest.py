import math
from datetime import datetime, UTC

import pytest

from urlshortener.dao.exceptions import KeyNotFoundError
from urlshortener.dao.redis import RedisKeySchema


class InMemoryStore:
    """In-memory stand-in for RedisStoreClient

    Keys expire the way Redis expires them: an expired key is simply absent.
    Time is read from datetime.now(), so freezegun drives expiry.
    """

    def __init__(self, prefix: str | None = None):
        self.keys = RedisKeySchema(prefix=prefix)
        self.data: dict[str, tuple[str, float | None]] = {}
        self.closed = False

    def _now(self) -> float:
        return datetime.now(UTC).timestamp()

    def _entry(self, key: str) -> tuple[str, float | None] | None:
        entry = self.data.get(key)
        if entry is not None and entry[1] is not None and entry[1] <= self._now():
            del self.data[key]
            return None
        return entry

    def _remaining(self, key: str) -> int | None:
        entry = self._entry(key)
        if entry is None:
            raise KeyNotFoundError(f"Key '{key}' not found.")
        return None if entry[1] is None else math.ceil(entry[1] - self._now())

    def get(self, key: str) -> str:
        entry = self._entry(key)
        if entry is None:
            raise KeyNotFoundError(f"Key '{key}' not found.")
        return entry[0]

    def exists(self, key: str) -> bool:
        return self._entry(key) is not None

    def set_with_ttl(self, key: str, value, ttl: int, only_if_absent: bool = False) -> bool:
        if only_if_absent and self._entry(key) is not None:
            return False
        self.data[key] = (str(value), self._now() + ttl)
        return True

    def incr_by(self, key: str, delta: int) -> int:
        entry = self._entry(key)
        value = int(entry[0]) + delta if entry else delta
        self.data[key] = (str(value), entry[1] if entry else None)
        return value

    def ttl(self, key: str) -> int | None:
        return self._remaining(key)

    def expire(self, key: str, ttl: int, only_if_unset: bool = False) -> bool:
        entry = self._entry(key)
        if entry is None or (only_if_unset and entry[1] is not None):
            return False
        self.data[key] = (entry[0], self._now() + ttl)
        return True

    def get_with_ttl(self, key: str) -> tuple[str, int | None]:
        return self.get(key), self._remaining(key)

    def get_with_ttl_and_counter(self, key: str, counter_key: str) -> tuple[str, int | None, int]:
        value, ttl = self.get_with_ttl(key)
        entry = self._entry(counter_key)
        return value, ttl, int(entry[0]) if entry else 0

    def claim_and_decrement(self, key: str, initial: int, ttl: int) -> tuple[int, int | None]:
        self.set_with_ttl(key, initial, ttl, only_if_absent=True)
        return self.incr_by(key, -1), self._remaining(key)

    def incr_with_expiry(self, key: str, ttl: int) -> int:
        self.set_with_ttl(key, 0, ttl, only_if_absent=True)
        return self.incr_by(key, 1)

    def close(self) -> None:
        self.closed = True

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.close()


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def store(app_prefix: str) -> InMemoryStore:
    return InMemoryStore(prefix=app_prefix)
