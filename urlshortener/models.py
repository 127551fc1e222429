from dataclasses import dataclass
from datetime import datetime


# fmt: off
@dataclass(frozen=True)
class ShortURLModel:
    target: str                         # Destination URL (always carries a scheme)
    shortcode: str                      # Unique short identifier of shortened URL
    hits: int | None = None             # Number of successful resolutions so far
    expires_at: datetime | None = None  # TTL as Python datetime, after which this record is expired


@dataclass(frozen=True)
class QuotaStatus:
    client_key: str                     # Request origin (e.g. source IP address)
    remaining: int                      # Shorten requests left in this window (may be negative)
    reset_in: int                       # Seconds until the quota window resets


@dataclass(frozen=True)
class ShortenResult:
    url: str                            # Normalized destination URL
    shortcode: str                      # Allocated shortcode
    expiry: int                         # Mapping lifetime in hours
    rate_remaining: int                 # Shorten requests left in this window
    rate_limit_reset: int               # Seconds until the quota window resets
# fmt: on
