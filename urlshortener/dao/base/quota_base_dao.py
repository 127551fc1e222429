"""Abstract base class for client quota data access objects (DAOs).

This interface defines the contract for accessing and managing per-client
shorten request quotas across different storage systems. A quota is a
counter of remaining requests that lives for exactly one quota window and
then disappears, at which point the next request opens a fresh window.

Responsibilities:
    - Open a client's quota window atomically.
    - Read the remaining quota and the time until the window resets.
    - Consume one request from the quota.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.dao.redis import QuotaRedisDAO
        >>> dao = QuotaRedisDAO(store)

        >>> dao.open_window('203.0.113.7', limit=10, window=1800)
        True
        >>> dao.get('203.0.113.7')
        QuotaStatus(client_key='203.0.113.7', remaining=10, reset_in=1800)

        >>> dao.consume('203.0.113.7', limit=10, window=1800)
        QuotaStatus(client_key='203.0.113.7', remaining=9, reset_in=1799)
"""

from abc import ABC, abstractmethod

from urlshortener.models import QuotaStatus


class QuotaBaseDAO(ABC):
    """Interface for per-client quota data access objects (DAOs)

    Methods:
        open_window(client_key: str, limit: int, window: int) -> bool:
            Initialize the client's quota to `limit` for `window` seconds,
            only if no window is currently open.

        get(client_key: str) -> QuotaStatus:
            Retrieve the client's remaining quota and reset time.
            Raises QuotaNotFoundError if the client has no open window.
            Raises DataStoreError on read failure.

        consume(client_key: str, limit: int, window: int) -> QuotaStatus:
            Decrement the client's quota by one and report the new state.
            Raises DataStoreError on write failure.

    NOTE:
        - Implementations must let the store expire the quota at the end of
          the window. There is no explicit reset operation.
    """

    @abstractmethod
    def open_window(self, client_key: str, limit: int, window: int) -> bool:
        """Open a new quota window for a client.

        Args:
            client_key (str):
                The client's identity (e.g. source IP address).

            limit (int):
                Number of shorten requests allowed in the window.

            window (int):
                Window length in seconds.

        Returns:
            bool:
                True if a new window was opened, False if one was already open.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, client_key: str) -> QuotaStatus:
        pass

    @abstractmethod
    def consume(self, client_key: str, limit: int, window: int) -> QuotaStatus:
        """Consume one request from a client's quota.

        NOTE: Implementations must guarantee that consuming from an expired
              (or never opened) window opens a fresh one first.

        Returns:
            QuotaStatus:
                The client's quota after consumption. `remaining` may be negative.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
