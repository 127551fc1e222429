from urlshortener.services.allocator import IdentifierAllocator
from urlshortener.services.resolver import MappingResolver
from urlshortener.services.limiter import QuotaLimiter
from urlshortener.services.shortener import ShortenerService, parse_expiry


__all__ = [
    'IdentifierAllocator',
    'MappingResolver',
    'QuotaLimiter',
    'ShortenerService',
    'parse_expiry',
]
