from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from shortlink.constants import Defaults, TTL


@dataclass(frozen=True)
class ShortLinkModel:
    """Represent a short link mapping.

    Attributes:
        target (str):
            The normalized long URL that the shortcode redirects to.
        shortcode (str):
            The unique short identifier used as the lookup key.
        expiry_hours (int):
            Lifetime of the mapping in hours. The data store drops the
            mapping once it elapses.
        expires_at (Optional[datetime]):
            Expiry as Python datetime, only known for mappings read back
            from the data store.

    Example:
        >>> link = ShortLinkModel(target="https://example.com/x", shortcode="abc123")
        >>> link.expiry_hours
        24
        >>> link.ttl_seconds
        86400
    """

    target: str
    shortcode: str
    expiry_hours: int = Defaults.EXPIRY_HOURS
    expires_at: Optional[datetime] = None

    @property
    def ttl_seconds(self) -> int:
        return self.expiry_hours * TTL.ONE_HOUR
