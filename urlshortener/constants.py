from enum import StrEnum


class TTL:
    """TTL durations in seconds."""

    # Default short URL lifetime (24 hours in seconds)
    ONE_DAY = 86_400  # 60 * 60 * 24
    # Default client quota window (30 minutes in seconds)
    THIRTY_MINUTES = 1_800  # 60 * 30
    ONE_HOUR = 3_600


class DefaultQuota:
    """Default quota values."""

    LINK_GENERATION = 10  # Shorten requests per client per quota window
    WINDOW = TTL.THIRTY_MINUTES


class Shortcode:
    """Shortcode generation and validation parameters."""

    LENGTH = 6
    MAX_CUSTOM_LENGTH = 64
    CUSTOM_PATTERN = r'^[A-Za-z0-9_-]{1,64}$'


DEFAULT_EXPIRY_HOURS = 24
DEFAULT_REDIS_SOCKET_TIMEOUT = 5  # seconds
MAX_URL_LENGTH = 2048


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
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'

    class Local(StrEnum):
        # Plain environment configuration for running without AppConfig
        REDIS_URL = 'REDIS_URL'
        API_QUOTA = 'API_QUOTA'
        QUOTA_WINDOW_SECONDS = 'QUOTA_WINDOW_SECONDS'
        DEFAULT_EXPIRY_HOURS = 'DEFAULT_EXPIRY_HOURS'
        DOMAIN = 'DOMAIN'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
