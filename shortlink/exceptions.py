"""Application-level exceptions.

Every exception carries a stable `error_code` which lambda handlers expose to
clients next to a human-readable message.

Request outcomes:
    InvalidInputError       malformed request body, bad custom shortcode or expiry
    InvalidURLError         target is not a URL
    ForbiddenTargetError    target host is denylisted (e.g. the service's own domain)
    RateLimitedError        client quota exhausted, carries the time until reset
    IdentifierInUseError    shortcode already maps to a live link
    NotFoundError           shortcode is unknown or expired
    StorageUnavailableError data store unreachable or timed out
"""

from datetime import timedelta


class ShortlinkError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:shortlink_error'


class ConfigurationError(ShortlinkError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class InvalidInputError(ShortlinkError):
    """Raised when a request carries malformed input."""

    error_code = 'request:invalid_input'


class InvalidURLError(InvalidInputError):
    """Raised when the target is not a valid URL."""

    error_code = 'request:invalid_url'


class ForbiddenTargetError(ShortlinkError):
    """Raised when the target URL points at a denylisted host."""

    error_code = 'request:forbidden_target'


class RateLimitedError(ShortlinkError):
    """Raised when a client has exhausted its link creation quota."""

    error_code = 'quota:rate_limited'

    def __init__(self, message: str, reset_in: timedelta):
        super().__init__(message)
        self.reset_in = reset_in

    @property
    def reset_in_minutes(self) -> int:
        return max(int(self.reset_in.total_seconds()) // 60, 0)


class IdentifierInUseError(ShortlinkError):
    """Raised when a shortcode already maps to a live link."""

    error_code = 'links:identifier_in_use'


class NotFoundError(ShortlinkError):
    """Raised when a shortcode doesn't resolve to a link."""

    error_code = 'links:not_found'


class StorageUnavailableError(ShortlinkError):
    """Raised when the data store can't serve a request."""

    error_code = 'infra:storage_unavailable'
