"""Per-client link creation quota

The tracker answers two questions for a client identity: may it create another
link right now, and when does its allowance reset. Counters live in the data
store only (see QuotaBaseDAO); the tracker holds no state between requests.

Usage follows a check-then-decrement protocol:

    >>> tracker = QuotaTracker(dao, quota=10, window=1800)
    >>> tracker.check_and_reserve('203.0.113.7')    # raises RateLimitedError when exhausted
    >>> ...                                         # perform the protected action
    >>> tracker.decrement('203.0.113.7')            # exactly once, only on success

NOTE: check and decrement are separate data store operations. Concurrent requests
      from one client can all pass the check before any of them decrements, so a
      client may exceed its quota by the number of racing requests. The decrement
      itself is atomic and never drives the counter below zero.
"""

import logging
from datetime import timedelta

from shortlink.models import QuotaModel
from shortlink.dao.base import QuotaBaseDAO
from shortlink.dao.exceptions import DataStoreError, QuotaCounterNotFoundError
from shortlink.exceptions import RateLimitedError, StorageUnavailableError


logger = logging.getLogger(__name__)


class QuotaTracker:
    def __init__(self, dao: QuotaBaseDAO, quota: int, window: int):
        self.dao = dao
        self.quota = quota
        self.window = window

    def check_and_reserve(self, client_key: str) -> QuotaModel:
        """Allow or deny a client's next action

        The first request of a window initializes the client's counter.

        Returns:
            QuotaModel: the client's counter when the action is allowed.

        Raises:
            RateLimitedError:
                If the client has no allowance left, with the time until reset.
            StorageUnavailableError:
                If the data store can't be reached.
        """
        try:
            quota = self.dao.reserve(client_key, quota=self.quota, window=self.window)
        except DataStoreError as e:
            raise StorageUnavailableError('Cannot connect to the data store.') from e

        if quota.exhausted:
            logger.debug('Quota exhausted for client.', extra={'clientKey': client_key, 'resetIn': quota.reset_in_minutes})
            raise RateLimitedError('Rate limit exceeded.', reset_in=quota.reset_in)
        return quota

    def decrement(self, client_key: str) -> QuotaModel:
        """Consume one unit of the client's allowance

        Returns:
            QuotaModel: post-decrement counter and reset time, as stored.

        Raises:
            StorageUnavailableError:
                If the data store can't be reached.
        """
        try:
            return self.dao.decrement(client_key)
        except QuotaCounterNotFoundError:
            # The window elapsed between check and decrement; the next request
            # starts a fresh one.
            logger.debug('Quota window elapsed before decrement.', extra={'clientKey': client_key})
            return QuotaModel(client_key=client_key, remaining=self.quota, reset_in=timedelta(seconds=self.window))
        except DataStoreError as e:
            raise StorageUnavailableError('Cannot connect to the data store.') from e
