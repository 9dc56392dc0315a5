"""Utility functions for application configuration management.

This module provides a standardized interface for Lambda functions to access
configuration data stored in **AWS AppConfig**. Each environment (`APP_ENV`) has
a dedicated AppConfig *Environment* within the shared AppConfig *Application*
identified by `APP_NAME`. Configuration data is stored as a JSON document under
a configuration profile and deployed to the corresponding environment.

The configuration JSON follows this structure:

    {
        "build": 7,
        "active_backend": "redis",
        "app": {
            "domain": "sho.rt",
            "api_quota": 10,
            ...
        },
        "configs": {
            "shorten_url": {
                "redis": {"host": ..., "port": ..., "password": ..., "links_db": 0, "quota_db": 1}
            },
            "redirect_url": {
                "redis": { ... }
            }
        }
    }

Each Lambda loads its own section (e.g., `"shorten_url"`) from this AppConfig
document plus the shared `"app"` section. Lambda sections may override `"app"` keys.

When AppConfig isn't configured (no `APPCONFIG_*` variables), the same structure
is built from plain environment variables:

    DB_ADDR                 Redis address as host:port (default: localhost:6379)
    DB_USER / DB_PASS       Redis credentials
    APP_PORT                local listening port
    DOMAIN                  public domain used to compose short links
    API_QUOTA               link creations per client per window
    QUOTA_WINDOW_MINUTES    quota window length
    DEFAULT_EXPIRY_HOURS    short link lifetime when the caller gives none
    FORBIDDEN_DOMAINS       comma separated hosts that can't be shortened

Typical usage inside a Lambda handler:
    >>> from shortlink.utils.config import load_config
    >>> config = load_config('shorten_url')
    >>> print(config['redis']['host'])
    redis-15501.host.docker.internal
"""

import os
import json
import functools
import logging
from collections.abc import Callable

import boto3

from shortlink.types import AppConfig, LambdaConfiguration
from shortlink.constants import ENV, Defaults
from shortlink.exceptions import BadConfigurationError
from shortlink.utils.helpers import require_environment


logger = logging.getLogger(__name__)


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs as <app name>:<app env>, None if APP_NAME is not set."""
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def redis_kwargs(config: LambdaConfiguration, database: str) -> dict:
    """Translate a lambda's redis config section into RedisClientMixin keyword arguments

    Args:
        config (LambdaConfiguration):
            Output of load_config().
        database (str):
            Which logical database to connect to: 'links_db' or 'quota_db'.

    Example:
        >>> redis_kwargs({'redis': {'host': 'redis', 'port': 6379, 'quota_db': 1}}, 'quota_db')
        {'redis_host': 'redis', 'redis_port': 6379, 'redis_db': 1, ...}
    """
    defaults = {'links_db': Defaults.LINKS_DB, 'quota_db': Defaults.QUOTA_DB}
    if database not in defaults:
        raise ValueError(f"Unknown Redis database '{database}' (expected one of: {', '.join(defaults)}).")

    redis_config = config.get('redis', {})
    return {
        'redis_host': redis_config.get('host', 'localhost'),
        'redis_port': redis_config.get('port', 6379),
        'redis_db': redis_config.get(database, defaults[database]),
        'redis_username': redis_config.get('username'),
        'redis_password': redis_config.get('password'),
        'redis_socket_timeout': redis_config.get('socket_timeout', Defaults.SOCKET_TIMEOUT),
    }


def _select_lambda_config(document: AppConfig, lambda_name: str) -> LambdaConfiguration:
    try:
        backend = document['active_backend']
        lambda_config = document['configs'][lambda_name]
        return {
            backend: lambda_config[backend],
            'app': {**document.get('app', {}), **lambda_config.get('app', {})},
        }
    except (KeyError, TypeError) as e:
        raise BadConfigurationError(f"Malformed configuration document for lambda '{lambda_name}' (missing {e}).") from e


def _environment_document(lambda_name: str) -> AppConfig:
    address = os.getenv(ENV.Service.DB_ADDR, 'localhost:6379')
    host, _, port = address.rpartition(':') if ':' in address else (address, '', '6379')

    redis_config = {'host': host, 'port': port}
    if os.getenv(ENV.Service.DB_USER):
        redis_config['username'] = os.environ[ENV.Service.DB_USER]
    if os.getenv(ENV.Service.DB_PASS):
        redis_config['password'] = os.environ[ENV.Service.DB_PASS]

    app_keys = {
        'domain': ENV.Service.DOMAIN,
        'port': ENV.Service.APP_PORT,
        'api_quota': ENV.Service.API_QUOTA,
        'quota_window_minutes': ENV.Service.QUOTA_WINDOW_MINUTES,
        'default_expiry_hours': ENV.Service.DEFAULT_EXPIRY_HOURS,
        'forbidden_domains': ENV.Service.FORBIDDEN_DOMAINS,
    }
    app_config = {key: os.environ[name] for key, name in app_keys.items() if os.getenv(name)}

    return {
        'build': 'environment',
        'active_backend': 'redis',
        'app': app_config,
        'configs': {lambda_name: {'redis': redis_config}},
    }


def _load_from_environment(func: Callable) -> Callable:
    """Decorator: build the configuration from environment variables when AppConfig isn't set up.

    Behavior:
        - If any of `APPCONFIG_APP_ID`, `APPCONFIG_ENV_ID`, `APPCONFIG_PROFILE_ID` is missing,
          assemble the configuration document from `DB_ADDR`, `DOMAIN`, `API_QUOTA`, etc.
        - Else, call the wrapped function (which pulls from AWS AppConfig via boto3).
    """

    @functools.wraps(func)
    def wrapper(lambda_name: str) -> LambdaConfiguration:
        if all(os.getenv(name) for name in ENV.AppConfig):
            return func(lambda_name)

        logger.debug('AppConfig is not configured, loading configuration from environment.', extra={'lambdaName': lambda_name})
        return _select_lambda_config(_environment_document(lambda_name), lambda_name)

    return wrapper


@_load_from_environment
@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def load_config(lambda_name: str) -> LambdaConfiguration:
    """Load configuration for a given Lambda from AWS AppConfig.

    Fetches the AppConfig JSON once and returns the section relevant
    to the requested Lambda function (e.g., 'shorten_url', 'redirect_url')
    together with the shared 'app' section.

    Raises:
        BadConfigurationError:
            If the document lacks the lambda's section or its backend settings.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
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
    try:
        document = json.loads(content.decode('utf-8'))
    except json.JSONDecodeError as e:
        raise BadConfigurationError('AppConfig document is not valid JSON.') from e

    data = _select_lambda_config(document, lambda_name)
    logger.debug('Loaded AppConfig from AWS AppConfig.', extra={'lambdaName': lambda_name, 'build': document.get('build')})
    return data
