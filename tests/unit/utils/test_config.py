"""Unit tests for configuration utilities in config.py

Test coverage includes:

1. Environment variable resolution
   - Ensures app_env(), app_name(), app_prefix() correctly read environment variables.

2. AppConfig loading behavior
   - Ensures load_config() returns the lambda's backend section merged with the shared 'app' section.
   - Ensures load_config() raises ClientError when AppConfig calls fail.
   - Ensures malformed documents raise BadConfigurationError.

3. Environment fallback
   - Ensures the configuration is built from DB_ADDR, DOMAIN, API_QUOTA, etc.
     when AppConfig isn't configured.

4. Redis connection arguments
   - Ensures redis_kwargs() selects the links or quota database.
"""

import json
from io import BytesIO
from unittest.mock import MagicMock

import pytest
import botocore

from shortlink.utils import config
from shortlink.exceptions import BadConfigurationError


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture
def appconfig_env(monkeypatch):
    """Set up AppConfig environment variables for testing."""
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    monkeypatch.setenv('APPCONFIG_ENV_ID', 'env123')
    monkeypatch.setenv('APPCONFIG_PROFILE_ID', 'prof123')


@pytest.fixture
def appconfig_payload():
    """Provide a default AppConfig payload used by multiple tests."""
    # fmt: off
    return {
        'build': 42,
        'active_backend': 'redis',
        'app': {
            'domain': 'sho.rt',
            'api_quota': 10,
        },
        'configs': {
            'test_lambda': {
                'redis': {
                    'host': 'monkey',
                    'port': 659595,
                    'links_db': 3,
                    'quota_db': 4,
                },
                'app': {
                    'api_quota': 5,
                },
            }
        },
    }
    # fmt: on


@pytest.fixture
def mock_appconfig(monkeypatch, appconfig_payload):
    """Mock the AppConfig Data client returned by boto3."""
    _mock = MagicMock()
    _mock.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
    _mock.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
    monkeypatch.setattr(config.boto3, 'client', lambda service: _mock)
    return _mock


# -------------------------------
# 1. Environment variable resolution
# -------------------------------


def test_app_env(monkeypatch):
    """Ensure app_env() returns the correct environment value from APP_ENV"""
    monkeypatch.setenv('APP_ENV', 'Test')
    assert config.app_env() == 'test'


def test_app_env_defaults_to_local():
    assert config.app_env() == 'local'


def test_app_name(monkeypatch):
    """Ensure app_name() returns the correct environment value from APP_NAME"""
    monkeypatch.setenv('APP_NAME', 'test-app')
    assert config.app_name() == 'test-app'


def test_app_name_not_set():
    """Ensure app_name() returns None when APP_NAME is not set"""
    assert config.app_name() is None
    assert config.app_prefix() is None


def test_app_prefix(monkeypatch):
    """Ensure app_prefix() joins APP_NAME and APP_ENV"""
    monkeypatch.setenv('APP_NAME', 'test-app')
    monkeypatch.setenv('APP_ENV', 'test')
    assert config.app_prefix() == 'test-app:test'


# -------------------------------
# 2. AppConfig loading behavior
# -------------------------------


@pytest.mark.usefixtures('appconfig_env')
def test_load_config_from_appconfig(mock_appconfig):
    """Ensure load_config() pulls the document from AppConfig and selects the lambda's section."""
    result = config.load_config('test_lambda')

    assert result == {
        'redis': {'host': 'monkey', 'port': 659595, 'links_db': 3, 'quota_db': 4},
        'app': {'domain': 'sho.rt', 'api_quota': 5},
    }
    mock_appconfig.start_configuration_session.assert_called_once_with(
        ApplicationIdentifier='app123',
        EnvironmentIdentifier='env123',
        ConfigurationProfileIdentifier='prof123',
    )
    mock_appconfig.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')


@pytest.mark.usefixtures('appconfig_env')
def test_load_config_with_appconfig_error(monkeypatch):
    """Ensure load_config() propagates ClientError when AppConfig returns an error."""
    mock_appconfig = MagicMock()
    mock_appconfig.start_configuration_session.side_effect = botocore.exceptions.ClientError(
        {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
    )
    monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)

    with pytest.raises(botocore.exceptions.ClientError):
        config.load_config('test_lambda')


@pytest.mark.usefixtures('appconfig_env', 'mock_appconfig')
def test_load_config_for_unknown_lambda():
    """Ensure a document without the lambda's section raises BadConfigurationError."""
    with pytest.raises(BadConfigurationError, match="lambda 'other_lambda'"):
        config.load_config('other_lambda')


@pytest.mark.usefixtures('appconfig_env')
def test_load_config_with_invalid_json(mock_appconfig):
    mock_appconfig.get_latest_configuration.return_value = {'Configuration': BytesIO(b'{"build": 4')}
    with pytest.raises(BadConfigurationError):
        config.load_config('test_lambda')


# -------------------------------
# 3. Environment fallback
# -------------------------------


def test_load_config_from_environment(monkeypatch, mock_appconfig):
    """Ensure service variables are used when AppConfig isn't configured."""
    monkeypatch.setenv('DB_ADDR', 'redis.internal:6380')
    monkeypatch.setenv('DB_USER', 'shortlink')
    monkeypatch.setenv('DB_PASS', 'secret')
    monkeypatch.setenv('DOMAIN', 'sho.rt')
    monkeypatch.setenv('API_QUOTA', '20')
    monkeypatch.setenv('QUOTA_WINDOW_MINUTES', '15')
    monkeypatch.setenv('FORBIDDEN_DOMAINS', 'evil.example,bad.example')

    result = config.load_config('shorten_url')

    assert result == {
        'redis': {'host': 'redis.internal', 'port': '6380', 'username': 'shortlink', 'password': 'secret'},
        'app': {
            'domain': 'sho.rt',
            'api_quota': '20',
            'quota_window_minutes': '15',
            'forbidden_domains': 'evil.example,bad.example',
        },
    }
    mock_appconfig.start_configuration_session.assert_not_called()


def test_load_config_from_environment_defaults():
    """Ensure a bare environment points at a local Redis with default settings."""
    assert config.load_config('redirect_url') == {'redis': {'host': 'localhost', 'port': '6379'}, 'app': {}}


def test_load_config_with_partial_appconfig_env(monkeypatch, mock_appconfig):
    """Ensure AppConfig is only used when all of its variables are set."""
    monkeypatch.setenv('APPCONFIG_APP_ID', 'app123')
    config.load_config('shorten_url')
    mock_appconfig.start_configuration_session.assert_not_called()


def test_load_config_with_host_only_address(monkeypatch):
    monkeypatch.setenv('DB_ADDR', 'redis')
    assert config.load_config('shorten_url')['redis'] == {'host': 'redis', 'port': '6379'}


# -------------------------------
# 4. Redis connection arguments
# -------------------------------


def test_redis_kwargs_links_db():
    lambda_config = {'redis': {'host': 'redis', 'port': 6379, 'password': 'pw', 'links_db': 2, 'quota_db': 3}}
    assert config.redis_kwargs(lambda_config, 'links_db') == {
        'redis_host': 'redis',
        'redis_port': 6379,
        'redis_db': 2,
        'redis_username': None,
        'redis_password': 'pw',
        'redis_socket_timeout': 2.0,
    }


def test_redis_kwargs_default_databases():
    assert config.redis_kwargs({'redis': {}}, 'links_db')['redis_db'] == 0
    assert config.redis_kwargs({'redis': {}}, 'quota_db')['redis_db'] == 1


def test_redis_kwargs_unknown_database():
    with pytest.raises(ValueError):
        config.redis_kwargs({'redis': {}}, 'hits_db')
