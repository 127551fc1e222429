"""The two public workflows of the URL shortener: shorten and resolve

Classes:
    ShortenerService:
        Coordinates quota admission, URL validation, shortcode allocation,
        persistence and quota consumption.

Example:
    >>> service = ShortenerService(
    ...     allocator=IdentifierAllocator(short_url_dao),
    ...     resolver=MappingResolver(short_url_dao),
    ...     limiter=QuotaLimiter(quota_dao, limit=10, window=1800),
    ...     short_url_dao=short_url_dao,
    ...     domain='short.ly',
    ... )
    >>> result = service.shorten('203.0.113.7', 'example.com')
    >>> result.url
    'http://example.com'
    >>> service.resolve(result.shortcode)
    'http://example.com'
"""

import logging

from urlshortener.constants import DEFAULT_EXPIRY_HOURS, TTL
from urlshortener.models import ShortURLModel, ShortenResult
from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import ShortURLAlreadyExistsError
from urlshortener.exceptions import DomainRejectedError, IdentifierInUseError, InvalidExpiryError, InvalidURLError
from urlshortener.services.allocator import IdentifierAllocator
from urlshortener.services.limiter import QuotaLimiter
from urlshortener.services.resolver import MappingResolver
from urlshortener.utils.validators import enforce_http, is_url, targets_domain


logger = logging.getLogger(__name__)


def parse_expiry(expiry_hours, default: int = DEFAULT_EXPIRY_HOURS) -> int:
    """Return the mapping lifetime in hours

    None and 0 mean "use the default". Anything else must be a positive integer.

    Raises:
        InvalidExpiryError: if `expiry_hours` is negative or not an integer
    """
    if expiry_hours is None:
        return default
    if isinstance(expiry_hours, bool) or not isinstance(expiry_hours, int):
        raise InvalidExpiryError(f'Expiry must be a whole number of hours (given value: {expiry_hours!r}).')
    if expiry_hours < 0:
        raise InvalidExpiryError(f'Expiry must not be negative (given value: {expiry_hours}).')
    return expiry_hours or default


class ShortenerService:
    """Shorten and resolve URLs

    Attributes:
        allocator (IdentifierAllocator)
        resolver (MappingResolver)
        limiter (QuotaLimiter)
        short_url_dao (ShortURLBaseDAO)
        domain (str | None):
            Public domain of this service. URLs pointing at it are rejected.
        default_expiry_hours (int):
            Mapping lifetime used when the request doesn't specify one.
    """

    def __init__(
        self,
        allocator: IdentifierAllocator,
        resolver: MappingResolver,
        limiter: QuotaLimiter,
        short_url_dao: ShortURLBaseDAO,
        domain: str | None = None,
        default_expiry_hours: int = DEFAULT_EXPIRY_HOURS,
    ):
        self.allocator = allocator
        self.resolver = resolver
        self.limiter = limiter
        self.short_url_dao = short_url_dao
        self.domain = domain
        self.default_expiry_hours = default_expiry_hours

    def shorten(self, client_key: str, url: str, custom_short: str | None = None, expiry_hours: int | None = None) -> ShortenResult:
        """Create a new short URL mapping on behalf of `client_key`

        Quota is only consumed once the mapping has been stored. Failures
        after that point don't refund it.

        Raises:
            QuotaExceededError:
                If the client has no shorten requests left in this window.
            InvalidURLError:
                If `url` isn't a valid http(s) URL.
            DomainRejectedError:
                If `url` points back at this service.
            InvalidShortcodeError:
                If `custom_short` contains disallowed characters.
            InvalidExpiryError:
                If `expiry_hours` is negative or not an integer.
            IdentifierInUseError:
                If the shortcode is already mapped.
            DataStoreError:
                If the data store is unavailable.
        """
        # 1- Admit client (opens a quota window on first request)
        self.limiter.admit(client_key)

        # 2- Validate and normalize target URL
        if not is_url(url):
            raise InvalidURLError(f"Invalid URL: '{url}'.")
        if targets_domain(url, self.domain):
            raise DomainRejectedError(f"URL '{url}' points back at this service.")
        target = enforce_http(url)
        expiry = parse_expiry(expiry_hours, self.default_expiry_hours)

        # 3- Allocate shortcode
        shortcode = self.allocator.allocate(custom=custom_short)

        # 4- Persist mapping (SET NX claims the shortcode)
        try:
            self.short_url_dao.insert(ShortURLModel(target=target, shortcode=shortcode), ttl=expiry * TTL.ONE_HOUR)
        except ShortURLAlreadyExistsError as e:
            logger.info('Lost shortcode claim to a concurrent request.', extra={'shortcode': shortcode})
            raise IdentifierInUseError(shortcode) from e

        # 5- Consume quota
        status = self.limiter.consume(client_key)

        return ShortenResult(
            url=target,
            shortcode=shortcode,
            expiry=expiry,
            rate_remaining=status.remaining,
            rate_limit_reset=status.reset_in,
        )

    def resolve(self, shortcode: str) -> str:
        return self.resolver.resolve(shortcode)
