"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile (typically `backend-config`) and deployed to the
corresponding environment.

The configuration JSON follows this structure:

    {
        "active_backend": "redis",
        "configs": {
            "shorten_url": {
                "redis": { "url": "redis://...", "socket_timeout": 5 },
                "shortener": {
                    "quota_limit": 10,
                    "quota_window": 1800,
                    "default_expiry_hours": 24,
                    "domain": "short.ly"
                }
            },
            "redirect_url": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this AppConfig
document, determined by the current application environment.

When running locally without an AppConfig agent, the configuration is built
from plain environment variables instead:

    REDIS_URL, API_QUOTA, QUOTA_WINDOW_SECONDS, DEFAULT_EXPIRY_HOURS, DOMAIN

Typical usage inside a Lambda handler:
    >>> from urlshortener.utils.config import load_config, ShortenerSettings
    >>> settings = ShortenerSettings.from_config(load_config('shorten_url'))
    >>> settings.quota_limit
    10
"""

import os
import json
import functools
import urllib.parse
import urllib.request
import logging
from dataclasses import dataclass, field
from collections.abc import Callable
from typing import Any

import boto3

from urlshortener.types import LambdaConfiguration, RedisConfiguration
from urlshortener.constants import ENV, DEFAULT_EXPIRY_HOURS, DefaultQuota
from urlshortener.utils.helpers import require_environment
from urlshortener.utils.runtime import running_locally
from urlshortener.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

SHORTENER_SECTION = 'shortener'


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'urlshortener'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'urlshortener:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _lambda_section(document: dict, lambda_name: str) -> LambdaConfiguration:
    """Pick the active backend and shortener settings for one lambda out of the full document"""
    try:
        backend = document['active_backend']
        section = document['configs'][lambda_name]
        data = {backend: section[backend]}
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"AppConfig document has no usable section for '{lambda_name}': missing {e}.") from e

    data[SHORTENER_SECTION] = section.get(SHORTENER_SECTION, {})
    return data


def _sam_load_local_appconfig(func: Callable) -> Callable:  # pragma: no cover
    """Decorator: load AppConfig from a local AppConfig Agent when running under SAM.

    Behavior:
        - If the application is running locally and `APPCONFIG_AGENT_URL` is set
          to a safe local URL, fetch the app configuration JSON from the local
          AppConfig agent.
        - Else, call the wrapped function.

    Environment variables used:
        APPCONFIG_AGENT_URL     : Base URL of the local AppConfig Agent (e.g., http://appconfig-agent:2772).
        APPCONFIG_PROFILE_NAME  : Optional profile name (default: "backend-config").
    """

    # ruff: noqa: E701
    def __validate_appconfig_url(url: str) -> str:
        if not url:
            return ''
        components = urllib.parse.urlparse(url)
        if components.scheme not in {'http', 'https'}:
            raise BadConfigurationError(f'Bad scheme {url}')
        if components.hostname not in {'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'}:
            raise BadConfigurationError(f'Bad host {url}')
        if components.port not in {2772, None}:
            raise BadConfigurationError(f'Bad port {url}')
        return url

    # ruff: enable

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        agent_url = __validate_appconfig_url(os.getenv(ENV.AppConfig.AGENT_URL))
        if not running_locally() or not agent_url:
            return func(lambda_name)

        profile_name = os.getenv(ENV.AppConfig.PROFILE_NAME, 'backend-config')
        url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile_name}'

        logger.debug('Trying to load AppConfig from local agent.', extra={'agentUrl': url, 'lambdaName': lambda_name})
        with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
            document = json.load(r)

        data = _lambda_section(document, lambda_name)
        logger.debug('Loaded AppConfig from local agent.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
        return data

    return wrapper


def _load_environment_config(func: Callable) -> Callable:
    """Decorator: build the lambda configuration from environment variables when running locally.

    Behavior:
        - If the application is running locally and `REDIS_URL` is set, build the
          configuration from `REDIS_URL`, `API_QUOTA`, `QUOTA_WINDOW_SECONDS`,
          `DEFAULT_EXPIRY_HOURS` and `DOMAIN`. Unset variables fall back to defaults.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        redis_url = os.getenv(ENV.Local.REDIS_URL)
        if not running_locally() or not redis_url:
            return func(lambda_name)

        # fmt: off
        settings = {
            'quota_limit':          os.getenv(ENV.Local.API_QUOTA),
            'quota_window':         os.getenv(ENV.Local.QUOTA_WINDOW_SECONDS),
            'default_expiry_hours': os.getenv(ENV.Local.DEFAULT_EXPIRY_HOURS),
            'domain':               os.getenv(ENV.Local.DOMAIN),
        }
        # fmt: on
        logger.debug('Loaded configuration from environment variables.', extra={'lambdaName': lambda_name})
        return {
            'redis': {'url': redis_url},
            SHORTENER_SECTION: {k: v for k, v in settings.items() if v not in (None, '')},
        }

    return wrapper


@_sam_load_local_appconfig
@_load_environment_config
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url').

    Environment variables required:
        APPCONFIG_APP_ID       : AppConfig Application ID
        APPCONFIG_ENV_ID       : AppConfig Environment ID
        APPCONFIG_PROFILE_ID   : AppConfig Configuration Profile ID

    Args:
        lambda_name (str):
            Name of the Lambda (e.g., "shorten_url" or "redirect_url").

    Returns:
        dict: The lambda's config section as a Python dictionary, i.e.
              {"<backend>": {...}, "shortener": {...}}

    Raises:
        MissingEnvironmentVariableError:
            If any of the AppConfig identifiers isn't set.
        BadConfigurationError:
            If the AppConfig document has no section for this lambda.
    """
    logger.debug('Trying to load AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name})

    appconfig = boto3.client('appconfigdata')

    # Start an AppConfig data session
    session_token = appconfig.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # Fetch the configuration
    response = appconfig.get_latest_configuration(ConfigurationToken=session_token)
    content = response['Configuration'].read()
    document = json.loads(content.decode('utf-8'))

    data = _lambda_section(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data


def _positive_int(name: str, value: Any) -> int:
    if isinstance(value, bool):
        raise BadConfigurationError(f"'{name}' must be a positive integer (given value: {value!r}).")
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise BadConfigurationError(f"'{name}' must be a positive integer (given value: {value!r}).") from e
    if number <= 0 or (isinstance(value, float) and not value.is_integer()):
        raise BadConfigurationError(f"'{name}' must be a positive integer (given value: {value!r}).")
    return number


@dataclass(frozen=True)
class ShortenerSettings:
    """Typed view over a lambda's configuration section

    Attributes:
        redis (dict):
            Redis connection parameters, e.g. {"url": "redis://..."} or
            {"host": ..., "port": ..., "db": ...}.
        quota_limit (int):
            Shorten requests a client may make per quota window.
        quota_window (int):
            Quota window length in seconds.
        default_expiry_hours (int):
            Lifetime of a mapping when the request doesn't ask for one.
        domain (str | None):
            Public domain of the service. None means "derive it from the request".
    """

    redis: RedisConfiguration = field(default_factory=dict)
    quota_limit: int = DefaultQuota.LINK_GENERATION
    quota_window: int = DefaultQuota.WINDOW
    default_expiry_hours: int = DEFAULT_EXPIRY_HOURS
    domain: str | None = None

    @classmethod
    def from_config(cls, app_config: LambdaConfiguration, backend: str = 'redis') -> 'ShortenerSettings':
        """Build settings from the output of `load_config()`

        Raises:
            BadConfigurationError: if the backend section is missing or a value is invalid
        """
        redis = app_config.get(backend)
        if not isinstance(redis, dict):
            raise BadConfigurationError(f"Missing '{backend}' section in lambda configuration.")

        shortener = app_config.get(SHORTENER_SECTION) or {}
        domain = shortener.get('domain') or None
        if domain is not None and not isinstance(domain, str):
            raise BadConfigurationError(f"'domain' must be a string (given value: {domain!r}).")

        return cls(
            redis=dict(redis),
            quota_limit=_positive_int('quota_limit', shortener.get('quota_limit', DefaultQuota.LINK_GENERATION)),
            quota_window=_positive_int('quota_window', shortener.get('quota_window', DefaultQuota.WINDOW)),
            default_expiry_hours=_positive_int('default_expiry_hours', shortener.get('default_expiry_hours', DEFAULT_EXPIRY_HOURS)),
            domain=domain,
        )

    @property
    def redis_config(self) -> RedisConfiguration:
        """Redis parameters as `RedisClientMixin` keyword arguments (redis_host, redis_url, ...)"""
        return {f'redis_{k}': v for k, v in self.redis.items()}
