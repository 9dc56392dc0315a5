from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    ONE_HOUR = 3_600
    # Per-client quota window (30 minutes in seconds)
    QUOTA_WINDOW = 1_800  # 60 * 30


class Defaults:
    """Default service values."""

    API_QUOTA = 10  # Link creations allowed per client per quota window
    EXPIRY_HOURS = 24  # Short link lifetime when the caller supplies none
    MAX_EXPIRY_HOURS = 8_760  # 365 days
    SHORTCODE_LENGTH = 6
    SHORTCODE_ATTEMPTS = 3  # Re-rolls of generated shortcodes on collision
    PORT = 3000  # sam local start-api
    SOCKET_TIMEOUT = 2.0  # Redis command timeout in seconds
    LINKS_DB = 0
    QUOTA_DB = 1


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'

    class Service(StrEnum):
        # Used when AppConfig is not configured
        DB_ADDR = 'DB_ADDR'  # host:port
        DB_USER = 'DB_USER'
        DB_PASS = 'DB_PASS'  # noqa: S105
        APP_PORT = 'APP_PORT'
        DOMAIN = 'DOMAIN'
        API_QUOTA = 'API_QUOTA'
        QUOTA_WINDOW_MINUTES = 'QUOTA_WINDOW_MINUTES'
        DEFAULT_EXPIRY_HOURS = 'DEFAULT_EXPIRY_HOURS'
        FORBIDDEN_DOMAINS = 'FORBIDDEN_DOMAINS'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
