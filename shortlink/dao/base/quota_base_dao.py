"""Abstract base class for client quota data access objects (DAOs).

A quota counter holds how many link creations a client has left in the
current window. Counters are created lazily with a fixed TTL and vanish when
the window elapses; the next request then starts a fresh window.

Example:
        >>> from shortlink.dao.redis import QuotaRedisDAO
        >>> dao = QuotaRedisDAO(...)

        >>> dao.reserve("203.0.113.7", quota=10, window=1800)
        QuotaModel(client_key='203.0.113.7', remaining=10, reset_in=datetime.timedelta(seconds=1800))

        >>> dao.decrement("203.0.113.7")
        QuotaModel(client_key='203.0.113.7', remaining=9, reset_in=datetime.timedelta(seconds=1799))
"""

from abc import ABC, abstractmethod

from shortlink.models import QuotaModel


class QuotaBaseDAO(ABC):
    """Interface for per-client quota counters

    Methods:
        reserve(client_key: str, quota: int, window: int, **kwargs) -> QuotaModel:
            Read the client's counter, initializing it to `quota` with a `window`
            seconds TTL when it doesn't exist.
            Raises DataStoreError on read/write failure.

        decrement(client_key: str, **kwargs) -> QuotaModel:
            Atomically decrement the client's counter, never below zero, and return
            the post-decrement state read from the data store.
            Raises QuotaCounterNotFoundError if the counter does not exist.
            Raises DataStoreError on write failure.
    """

    @abstractmethod
    def reserve(self, client_key: str, quota: int, window: int, **kwargs) -> QuotaModel:
        """Retrieve (and lazily initialize) a client's quota counter.

        NOTE: Implementations must initialize the counter and its TTL in a single
              atomic step so two concurrent first requests don't both reset it.

        Args:
            client_key (str):
                Client identity.

            quota (int):
                Initial counter value for a new window.

            window (int):
                Window length (counter TTL) in seconds.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            QuotaModel:
                The client's counter and the time until it resets.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def decrement(self, client_key: str, **kwargs) -> QuotaModel:
        """Atomically decrement a client's quota counter.

        Args:
            client_key (str):
                Client identity.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            QuotaModel:
                The client's counter after decrementing.

        Raises:
            QuotaCounterNotFoundError:
                If the client has no counter (e.g. the window just elapsed).

            DataStoreError:
                If there is an error in the data store.
        """
        pass
