"""Abstract base class for ShortURL data access objects (DAOs).

This class establishes a consistent contract for all ShortURL DAO implementations,
regardless of the underlying storage mechanism.

Responsibilities:
    - Provide an interface for claiming, retrieving and checking ShortURLModel objects.
    - Track how many times each short URL was resolved.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from urlshortener.models import ShortURLModel
        >>> from urlshortener.dao.redis import RedisStoreClient, ShortURLRedisDAO

        >>> dao = ShortURLRedisDAO(RedisStoreClient(...))

        >>> short_url = ShortURLModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3",
        ... )
        >>> dao.insert(short_url, ttl=86400)

        >>> retrieved = dao.get("a1b2c3")
        >>> print(retrieved.target)
        https://example.com/blog/article-123

        >>> dao.hit("a1b2c3", ttl=86400)
        1
"""

from abc import ABC, abstractmethod

from urlshortener.models import ShortURLModel


class ShortURLBaseDAO(ABC):
    """Interface for ShortURL data access objects (DAOs).

    Methods:
        insert(short_url: ShortURLModel, ttl: int) -> ShortURLBaseDAO:
            Claim the shortcode and store its destination with an expiry.
            Raises ShortURLAlreadyExistsError if the short code is taken.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str) -> ShortURLModel:
            Retrieve a ShortURLModel by short code.
            Raises ShortURLNotFoundError if the entry does not exist.
            Raises DataStoreError on connection or read failure.

        exists(shortcode: str) -> bool:
            Check whether an unexpired mapping exists for the short code.

        hit(shortcode: str, ttl: int | None) -> int:
            Increment the usage counter of a short URL.

        hits(shortcode: str) -> int:
            Return the usage counter of a short URL (0 if never resolved).

    NOTE:
        - Mappings are expected to expire automatically. The DAO does not
          provide an interface to manually delete or update entries.
    """

    @abstractmethod
    def insert(self, short_url: ShortURLModel, ttl: int) -> 'ShortURLBaseDAO':
        """Insert a new ShortURLModel into the data store.

        Args:
            short_url (ShortURLModel):
                The ShortURLModel instance to be inserted.

            ttl (int):
                Lifetime of the mapping in seconds.

        Returns:
            ShortURLBaseDAO: self (for method chaining)

        Raises:
            ShortURLAlreadyExistsError:
                If an unexpired ShortURLModel with the same short code already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str) -> ShortURLModel:
        """Retrieve a ShortURLModel from the data store by its short code.

        Raises:
            ShortURLNotFoundError:
                If no ShortURLModel with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def exists(self, shortcode: str) -> bool:
        pass

    @abstractmethod
    def hit(self, shortcode: str, ttl: int | None = None) -> int:
        """Increment the usage counter of a short URL.

        Args:
            shortcode (str):
                The short code that was just resolved.

            ttl (int | None):
                Remaining lifetime of the mapping, so that the counter
                expires together with it.

        Returns:
            int: usage count after increment

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def hits(self, shortcode: str) -> int:
        pass
