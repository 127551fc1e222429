"""Fixed-window per-client quota on shorten requests

Each client gets `limit` shorten requests per `window` seconds. The window
opens on the client's first request and is closed by Redis expiring the
quota key; there is no background reset job.

Classes:
    QuotaLimiter:
        Admit or reject a client's request and consume quota after success.
"""

import logging

from urlshortener.models import QuotaStatus
from urlshortener.dao.base import QuotaBaseDAO
from urlshortener.dao.exceptions import QuotaNotFoundError
from urlshortener.exceptions import QuotaExceededError


logger = logging.getLogger(__name__)


class QuotaLimiter:
    """Per-client fixed-window limiter

    Attributes:
        quota_dao (QuotaBaseDAO):
            DAO holding the per-client counters.
        limit (int):
            Accepted shorten requests per window.
        window (int):
            Window length in seconds.
    """

    def __init__(self, quota_dao: QuotaBaseDAO, limit: int, window: int):
        self.quota_dao = quota_dao
        self.limit = limit
        self.window = window

    def admit(self, client_key: str) -> QuotaStatus:
        """Check that the client may make another shorten request

        A client without a quota entry gets a fresh window of `limit` requests.
        Admission never decrements the counter.

        Raises:
            QuotaExceededError:
                If the client has no requests left in the current window.
            DataStoreError:
                If the data store is unavailable.
        """
        if self.quota_dao.open_window(client_key, self.limit, self.window):
            logger.debug('Opened quota window.', extra={'clientKey': client_key, 'limit': self.limit, 'window': self.window})

        try:
            status = self.quota_dao.get(client_key)
        except QuotaNotFoundError:
            # Window expired right after it was opened; the next write reopens it
            return QuotaStatus(client_key=client_key, remaining=self.limit, reset_in=self.window)

        if status.remaining <= 0:
            raise QuotaExceededError(reset_in=status.reset_in)
        return status

    def consume(self, client_key: str) -> QuotaStatus:
        """Spend one request of the client's quota

        Raises:
            DataStoreError:
                If the data store is unavailable.
        """
        return self.quota_dao.consume(client_key, self.limit, self.window)
