"""Abstract base class for short link data access objects (DAOs).

This class establishes a consistent contract for all short link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB).

Responsibilities:
    - Provide an interface for inserting and retrieving ShortLinkModel objects.
    - Guarantee that an insert never overwrites a live mapping.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlink.models import ShortLinkModel
        >>> from shortlink.dao.redis import ShortLinkRedisDAO

        >>> dao = ShortLinkRedisDAO(...)

        >>> short_link = ShortLinkModel(
        ...     target="https://example.com/blog/article-123",
        ...     shortcode="a1b2c3",
        ...     expiry_hours=24,
        ... )
        >>> dao.insert(short_link)

        >>> retrieved = dao.get("a1b2c3")
        >>> print(retrieved.target)
        https://example.com/blog/article-123
"""

from abc import ABC, abstractmethod

from shortlink.models import ShortLinkModel


class ShortLinkBaseDAO(ABC):
    """Interface for short link data access objects (DAOs).

    Methods:
        insert(short_link: ShortLinkModel, **kwargs) -> ShortLinkBaseDAO:
            Insert a new ShortLinkModel into the data store with its expiry.
            Raises ShortLinkAlreadyExistsError if the shortcode is taken.
            Raises DataStoreError on connection or write failure.

        get(shortcode: str, **kwargs) -> ShortLinkModel:
            Retrieve a ShortLinkModel from the data store by shortcode.
            Raises ShortLinkNotFoundError if the entry does not exist or expired.
            Raises DataStoreError on connection or read failure.

    NOTE:
        - Mappings expire through the data store's TTL mechanism. The DAO does
          not provide an interface to manually delete entries.
    """

    @abstractmethod
    def insert(self, short_link: ShortLinkModel, **kwargs) -> 'ShortLinkBaseDAO':
        """Insert a new ShortLinkModel into the data store.

        Args:
            short_link (ShortLinkModel):
                The ShortLinkModel instance to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkBaseDAO: self (for method chaining)

        Raises:
            ShortLinkAlreadyExistsError:
                If a live mapping with the same shortcode already exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> ShortLinkModel:
        """Retrieve a ShortLinkModel from the data store by its shortcode.

        Args:
            shortcode (str):
                The shortcode of the ShortLinkModel to be retrieved.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            ShortLinkModel: The stored mapping.

        Raises:
            ShortLinkNotFoundError:
                If no mapping with the given shortcode exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass
