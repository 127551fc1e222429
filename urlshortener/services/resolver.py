"""Shortcode resolution with best-effort usage counting

Classes:
    MappingResolver:
        Look up the destination URL of a shortcode and count the resolution.
"""

import logging
from concurrent.futures import Executor
from datetime import datetime, UTC

from urlshortener.dao.base import ShortURLBaseDAO
from urlshortener.dao.exceptions import DataStoreError, ShortURLNotFoundError
from urlshortener.exceptions import ResolutionFailedError, UnknownShortcodeError


logger = logging.getLogger(__name__)


class MappingResolver:
    """Resolve shortcodes to destination URLs

    Every successful resolution increments the link's usage counter. The
    increment is fire-and-forget: when an executor is given it runs there,
    otherwise it runs inline. Either way a failed increment is logged and
    never affects the resolution result.

    Attributes:
        short_url_dao (ShortURLBaseDAO):
            DAO used to read mappings and bump usage counters.
        executor (Executor | None):
            Optional executor for usage counting.
    """

    def __init__(self, short_url_dao: ShortURLBaseDAO, executor: Executor | None = None):
        self.short_url_dao = short_url_dao
        self.executor = executor

    def resolve(self, shortcode: str) -> str:
        """Return the destination URL for `shortcode`

        Raises:
            UnknownShortcodeError:
                If the shortcode was never created or has already expired.
            ResolutionFailedError:
                If the data store is unavailable.
        """
        try:
            short_url = self.short_url_dao.get(shortcode)
        except ShortURLNotFoundError as e:
            raise UnknownShortcodeError(f"Shortcode '{shortcode}' not found.") from e
        except DataStoreError as e:
            raise ResolutionFailedError(f"Couldn't resolve shortcode '{shortcode}': {e}") from e

        ttl = None
        if short_url.expires_at is not None:
            ttl = max(int((short_url.expires_at - datetime.now(UTC)).total_seconds()), 1)

        if self.executor is None:
            self._count_hit(shortcode, ttl)
        else:
            try:
                self.executor.submit(self._count_hit, shortcode, ttl)
            except RuntimeError as e:
                # Executor already shut down
                logger.warning('Usage counter not submitted.', extra={'shortcode': shortcode, 'error': str(e)})

        return short_url.target

    def _count_hit(self, shortcode: str, ttl: int | None) -> None:
        try:
            hits = self.short_url_dao.hit(shortcode, ttl=ttl)
        except Exception as e:
            # Counting never fails the resolution
            logger.warning(
                'Failed to increment usage counter.',
                extra={'shortcode': shortcode, 'error': str(e), 'errorType': e.__class__.__name__},
            )
        else:
            logger.debug('Usage counter incremented.', extra={'shortcode': shortcode, 'hits': hits})
