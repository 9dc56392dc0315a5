"""Typed service settings built from the 'app' configuration section

Example:
    >>> settings = ShortenerSettings.from_config({'app': {'domain': 'sho.rt', 'api_quota': '5'}})
    >>> settings.api_quota
    5
    >>> settings.forbidden_domains
    frozenset({'sho.rt'})
"""

from dataclasses import dataclass, field
from typing import Any

from shortlink.constants import Defaults, TTL
from shortlink.exceptions import BadConfigurationError
from shortlink.types import LambdaConfiguration
from shortlink.utils.urls import normalize_host


@dataclass(frozen=True)
class ShortenerSettings:
    """Settings consumed by the Shortener and Quota Tracker.

    Attributes:
        domain (str | None):
            Public domain used to compose short links ('<domain>/<shortcode>').
            Always part of the forbidden domains.
        port (int):
            Local listening port, used for short links when no domain is known.
        api_quota (int):
            Link creations per client per quota window.
        quota_window (int):
            Quota window length in seconds.
        default_expiry_hours (int):
            Short link lifetime when the caller gives none.
        shortcode_length (int):
            Length of generated shortcodes.
        shortcode_attempts (int):
            How many generated shortcodes to try before giving up on collisions.
        forbidden_domains (frozenset[str]):
            Hosts that can't be shortened.
    """

    domain: str | None = None
    port: int = Defaults.PORT
    api_quota: int = Defaults.API_QUOTA
    quota_window: int = TTL.QUOTA_WINDOW
    default_expiry_hours: int = Defaults.EXPIRY_HOURS
    shortcode_length: int = Defaults.SHORTCODE_LENGTH
    shortcode_attempts: int = Defaults.SHORTCODE_ATTEMPTS
    forbidden_domains: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self):
        for name in ('port', 'api_quota', 'quota_window', 'default_expiry_hours', 'shortcode_length', 'shortcode_attempts'):
            if getattr(self, name) <= 0:
                raise BadConfigurationError(f"'{name}' must be a positive integer (given value: {getattr(self, name)}).")

        # The service must never shorten links pointing back to itself
        if self.domain:
            object.__setattr__(self, 'forbidden_domains', self.forbidden_domains | {normalize_host(self.domain)})

    @classmethod
    def from_config(cls, config: LambdaConfiguration) -> 'ShortenerSettings':
        """Build settings from load_config() output

        Raises:
            BadConfigurationError:
                If a value has the wrong type or is out of range.
        """
        app_config = config.get('app', {})

        forbidden = app_config.get('forbidden_domains', [])
        if isinstance(forbidden, str):
            forbidden = forbidden.split(',')
        if not isinstance(forbidden, list) or not all(isinstance(host, str) for host in forbidden):
            raise BadConfigurationError(f"'forbidden_domains' must be a list of hosts or a comma separated string (given value: {forbidden!r}).")

        window_minutes = app_config.get('quota_window_minutes')
        return cls(
            domain=app_config.get('domain') or None,
            port=_as_int(app_config, 'port', Defaults.PORT),
            api_quota=_as_int(app_config, 'api_quota', Defaults.API_QUOTA),
            quota_window=_as_int(app_config, 'quota_window_minutes', 0) * 60 if window_minutes is not None else TTL.QUOTA_WINDOW,
            default_expiry_hours=_as_int(app_config, 'default_expiry_hours', Defaults.EXPIRY_HOURS),
            shortcode_length=_as_int(app_config, 'shortcode_length', Defaults.SHORTCODE_LENGTH),
            shortcode_attempts=_as_int(app_config, 'shortcode_attempts', Defaults.SHORTCODE_ATTEMPTS),
            forbidden_domains=frozenset(normalize_host(host) for host in forbidden if host.strip()),
        )


def _as_int(section: dict[str, Any], key: str, default: int) -> int:
    value = section.get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f"'{key}' must be an integer (given value: {value!r}).") from e
