"""Short link creation and resolution

Creation path:
    1. Quota check (RateLimitedError, no writes)
    2. URL acceptability (InvalidURLError, ForbiddenTargetError)
    3. Normalization to https:// when the URL has no scheme
    4. Shortcode selection: custom code verbatim, or a random one
    5. Collision check (IdentifierInUseError)
    6. Expiry resolution (default 24 hours)
    7. Storage with TTL (StorageUnavailableError)
    8. Quota decrement, reporting the post-decrement counter

Resolution path reads the mapping and returns the stored URL verbatim.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from shortlink.constants import Defaults
from shortlink.models import ShortLinkModel, QuotaModel
from shortlink.dao.base import ShortLinkBaseDAO
from shortlink.dao.exceptions import DataStoreError, ShortLinkAlreadyExistsError, ShortLinkNotFoundError
from shortlink.exceptions import (
    ForbiddenTargetError,
    IdentifierInUseError,
    InvalidInputError,
    InvalidURLError,
    NotFoundError,
    StorageUnavailableError,
)
from shortlink.services.quota_tracker import QuotaTracker
from shortlink.utils.settings import ShortenerSettings
from shortlink.utils.shortcode import generate_shortcode
from shortlink.utils.urls import enforce_https, is_forbidden_target, is_valid_url


logger = logging.getLogger(__name__)

# First path segment of the shorten route
RESERVED_SHORTCODES = frozenset({'api'})


@dataclass(frozen=True)
class CreationResult:
    short_link: ShortLinkModel
    quota: QuotaModel


class Shortener:
    """Create and resolve short links

    Args:
        link_dao (ShortLinkBaseDAO):
            Data store access for short link mappings.
        quota_tracker (QuotaTracker | None):
            Per-client creation quota. Only needed to create links.
        settings (ShortenerSettings | None):
            Expiry, shortcode and denylist settings. Defaults apply when omitted.
        shortcode_factory (Callable[[int], str]):
            Produces a random shortcode of the given length.
    """

    def __init__(
        self,
        link_dao: ShortLinkBaseDAO,
        quota_tracker: QuotaTracker | None = None,
        settings: ShortenerSettings | None = None,
        shortcode_factory: Callable[[int], str] = generate_shortcode,
    ):
        self.link_dao = link_dao
        self.quota_tracker = quota_tracker
        self.settings = settings or ShortenerSettings()
        self.shortcode_factory = shortcode_factory

    def create(self, client_key: str, raw_url: str, custom_id: str | None = None, expiry_hours: int | None = None) -> CreationResult:
        """Create a short link on behalf of a client

        Args:
            client_key (str):
                Client identity for quota accounting.
            raw_url (str):
                Target URL, with or without scheme.
            custom_id (str | None):
                Caller-chosen shortcode. A random one is generated when empty.
            expiry_hours (int | None):
                Link lifetime in hours. Empty or 0 means the default (24 hours).

        Returns:
            CreationResult: the stored link and the client's post-decrement quota.

        Raises:
            RateLimitedError, InvalidURLError, InvalidInputError, ForbiddenTargetError,
            IdentifierInUseError, StorageUnavailableError
        """
        if self.quota_tracker is None:
            raise RuntimeError("Shortener can't create links without a quota tracker.")

        self.quota_tracker.check_and_reserve(client_key)

        if not is_valid_url(raw_url):
            raise InvalidURLError('Invalid URL.')
        if is_forbidden_target(raw_url, self.settings.forbidden_domains):
            raise ForbiddenTargetError('Target domain is not allowed.')

        target = enforce_https(raw_url)
        expiry_hours = self._resolve_expiry(expiry_hours)

        if custom_id:
            self._validate_custom_id(custom_id)
            short_link = self._store(ShortLinkModel(target=target, shortcode=custom_id, expiry_hours=expiry_hours))
        else:
            short_link = self._store_generated(target, expiry_hours)

        quota = self.quota_tracker.decrement(client_key)
        logger.debug(
            'Short link stored.',
            extra={'shortcode': short_link.shortcode, 'expiryHours': expiry_hours, 'remainingQuota': quota.remaining},
        )
        return CreationResult(short_link=short_link, quota=quota)

    def resolve(self, shortcode: str) -> str:
        """Resolve a shortcode to its stored target URL

        Raises:
            NotFoundError:
                If the shortcode is unknown or expired.
            StorageUnavailableError:
                If the data store can't be reached.
        """
        if not shortcode:
            raise NotFoundError('Short link not found.')
        try:
            return self.link_dao.get(shortcode).target
        except ShortLinkNotFoundError as e:
            raise NotFoundError(f"Short link '{shortcode}' not found.") from e
        except DataStoreError as e:
            raise StorageUnavailableError('Cannot connect to the data store.') from e

    def _resolve_expiry(self, expiry_hours: int | None) -> int:
        if expiry_hours is None or expiry_hours == 0:
            return self.settings.default_expiry_hours
        if isinstance(expiry_hours, bool) or not isinstance(expiry_hours, int) or expiry_hours < 0:
            raise InvalidInputError('Expiry must be a non-negative number of hours.')
        if expiry_hours > Defaults.MAX_EXPIRY_HOURS:
            raise InvalidInputError(f'Expiry must be at most {Defaults.MAX_EXPIRY_HOURS} hours.')
        return expiry_hours

    def _validate_custom_id(self, custom_id: str) -> None:
        # GET /{shortcode} matches a single path segment
        if '/' in custom_id:
            raise InvalidInputError('Custom short must not contain "/".')
        if custom_id.lower() in RESERVED_SHORTCODES:
            raise InvalidInputError(f"Custom short '{custom_id}' is reserved.")

    def _store(self, short_link: ShortLinkModel) -> ShortLinkModel:
        try:
            self.link_dao.insert(short_link)
        except ShortLinkAlreadyExistsError as e:
            raise IdentifierInUseError('URL custom short is already in use.') from e
        except DataStoreError as e:
            raise StorageUnavailableError('Cannot connect to the data store.') from e
        return short_link

    def _store_generated(self, target: str, expiry_hours: int) -> ShortLinkModel:
        for attempt in range(1, self.settings.shortcode_attempts + 1):
            short_link = ShortLinkModel(
                target=target,
                shortcode=self.shortcode_factory(self.settings.shortcode_length),
                expiry_hours=expiry_hours,
            )
            try:
                return self._store(short_link)
            except IdentifierInUseError:
                logger.debug('Generated shortcode collided, re-rolling.', extra={'shortcode': short_link.shortcode, 'attempt': attempt})

        raise IdentifierInUseError('Could not allocate a unique short.')
