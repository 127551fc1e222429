"""Unit tests for configuration utilities in config.py.

Test coverage includes:
    1. Application identity
       - app_env(), app_name(), app_prefix().
    2. Loading configuration
       - AWS AppConfig via boto3 (lambda section + shortener settings).
       - Plain environment variables when running locally.
       - Missing AppConfig identifiers and unusable documents.
    3. ShortenerSettings
       - Defaults, parsing, validation and redis_* keyword arguments.
"""

import json
from io import BytesIO
from typing import cast
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError
from pytest import MonkeyPatch

from urlshortener.types import LambdaConfiguration
from urlshortener.utils import config
from urlshortener.utils.config import ShortenerSettings
from urlshortener.constants import ENV
from urlshortener.exceptions import BadConfigurationError, MissingEnvironmentVariableError


# -------------------------------
# 1. Application identity
# -------------------------------


def test_app_prefix(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv(ENV.App.APP_NAME, 'urlshortener')
    monkeypatch.setenv(ENV.App.APP_ENV, 'Dev')

    assert config.app_env() == 'dev'
    assert config.app_name() == 'urlshortener'
    assert config.app_prefix() == 'urlshortener:dev'


def test_app_prefix_without_app_name(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.delenv(ENV.App.APP_NAME, raising=False)
    monkeypatch.delenv(ENV.App.APP_ENV, raising=False)

    assert config.app_env() == 'local'
    assert config.app_prefix() is None


# -------------------------------
# 2. Loading configuration
# -------------------------------


class TestLoadConfig:
    appconfig_payload: dict

    @pytest.fixture
    def appconfig_payload(self) -> dict:
        # fmt: off
        return {
            'build': 42,
            'active_backend': 'redis',
            'configs': {
                'shorten_url': {
                    'redis': {
                        'host': 'monkey',
                        'port': 6380,
                        'db': 3
                    },
                    'shortener': {
                        'quota_limit': 5,
                        'domain': 'short.ly'
                    }
                },
                'redirect_url': {
                    'redis': {
                        'url': 'redis://monkey:6380/3'
                    }
                }
            },
        }
        # fmt: on

    @pytest.fixture
    def appconfig_client(self, monkeypatch: MonkeyPatch, appconfig_payload: dict) -> MagicMock:
        mock_appconfig = MagicMock()
        mock_appconfig.start_configuration_session.return_value = {'InitialConfigurationToken': 'monkey_token'}
        mock_appconfig.get_latest_configuration.return_value = {'Configuration': BytesIO(json.dumps(appconfig_payload).encode('utf-8'))}
        monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)
        return mock_appconfig

    @pytest.fixture(autouse=True)
    def setup(self, monkeypatch: MonkeyPatch, appconfig_payload: dict) -> None:
        monkeypatch.setenv(ENV.AppConfig.APP_ID, 'app123')
        monkeypatch.setenv(ENV.AppConfig.ENV_ID, 'env123')
        monkeypatch.setenv(ENV.AppConfig.PROFILE_ID, 'prof123')
        monkeypatch.setenv(ENV.App.APP_ENV, 'dev')
        for name in (ENV.App.AWS_SAM_LOCAL, ENV.AppConfig.AGENT_URL, *ENV.Local):
            monkeypatch.delenv(name, raising=False)

        self.appconfig_payload = appconfig_payload

    def test_load_config_from_appconfig(self, appconfig_client: MagicMock) -> None:
        result = config.load_config('shorten_url')

        assert result == {
            'redis': {'host': 'monkey', 'port': 6380, 'db': 3},
            'shortener': {'quota_limit': 5, 'domain': 'short.ly'},
        }
        appconfig_client.start_configuration_session.assert_called_once_with(
            ApplicationIdentifier='app123',
            EnvironmentIdentifier='env123',
            ConfigurationProfileIdentifier='prof123',
        )
        appconfig_client.get_latest_configuration.assert_called_once_with(ConfigurationToken='monkey_token')

    def test_load_config_without_shortener_section(self, appconfig_client: MagicMock) -> None:
        result = config.load_config('redirect_url')
        assert result == {'redis': {'url': 'redis://monkey:6380/3'}, 'shortener': {}}

    def test_load_config_for_unknown_lambda(self, appconfig_client: MagicMock) -> None:
        with pytest.raises(BadConfigurationError, match="no usable section for 'unknown_lambda'"):
            config.load_config('unknown_lambda')

    def test_load_config_without_appconfig_identifiers(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.delenv(ENV.AppConfig.PROFILE_ID)

        with pytest.raises(MissingEnvironmentVariableError, match="'APPCONFIG_PROFILE_ID'"):
            config.load_config('shorten_url')

    def test_missing_appconfig_raises_error(self, monkeypatch: MonkeyPatch) -> None:
        mock_appconfig = MagicMock()
        mock_appconfig.start_configuration_session.side_effect = ClientError(
            {'Error': {'Code': 'ResourceNotFoundException'}}, 'StartConfigurationSession'
        )
        monkeypatch.setattr(config.boto3, 'client', lambda service: mock_appconfig)

        with pytest.raises(ClientError):
            config.load_config('shorten_url')

    def test_load_config_from_environment_when_local(self, monkeypatch: MonkeyPatch) -> None:
        monkeypatch.setenv(ENV.App.APP_ENV, 'local')
        monkeypatch.setenv(ENV.Local.REDIS_URL, 'redis://localhost:6379/0')
        monkeypatch.setenv(ENV.Local.API_QUOTA, '2')
        monkeypatch.setenv(ENV.Local.DOMAIN, 'localhost:3000')
        monkeypatch.setattr(config.boto3, 'client', MagicMock(side_effect=AssertionError('AppConfig must not be called')))

        result = config.load_config('shorten_url')

        assert result == {
            'redis': {'url': 'redis://localhost:6379/0'},
            'shortener': {'quota_limit': '2', 'domain': 'localhost:3000'},
        }

    def test_environment_is_ignored_when_deployed(self, monkeypatch: MonkeyPatch, appconfig_client: MagicMock) -> None:
        monkeypatch.setenv(ENV.Local.REDIS_URL, 'redis://localhost:6379/0')

        assert config.load_config('shorten_url')['redis']['host'] == 'monkey'


# -------------------------------
# 3. ShortenerSettings
# -------------------------------


def test_settings_defaults() -> None:
    settings = ShortenerSettings.from_config(cast(LambdaConfiguration, {'redis': {'host': 'redis.test'}}))

    assert settings.quota_limit == 10
    assert settings.quota_window == 1800
    assert settings.default_expiry_hours == 24
    assert settings.domain is None


def test_settings_from_environment_strings() -> None:
    app_config = {
        'redis': {'url': 'redis://localhost:6379/0'},
        'shortener': {'quota_limit': '2', 'quota_window': '60', 'default_expiry_hours': '1', 'domain': 'short.ly'},
    }
    settings = ShortenerSettings.from_config(cast(LambdaConfiguration, app_config))

    assert settings.quota_limit == 2
    assert settings.quota_window == 60
    assert settings.default_expiry_hours == 1
    assert settings.domain == 'short.ly'


def test_settings_redis_config() -> None:
    settings = ShortenerSettings.from_config(cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}}))
    assert settings.redis_config == {'redis_host': 'redis.test', 'redis_port': 6379, 'redis_db': 0}


def test_settings_without_redis_section() -> None:
    with pytest.raises(BadConfigurationError, match="Missing 'redis' section"):
        ShortenerSettings.from_config(cast(LambdaConfiguration, {'shortener': {}}))


@pytest.mark.parametrize(
    'shortener',
    [
        {'quota_limit': 0},
        {'quota_limit': -3},
        {'quota_limit': 'ten'},
        {'quota_window': 1.5},
        {'quota_window': True},
        {'default_expiry_hours': None},
        {'domain': 42},
    ],
)
def test_settings_with_invalid_values(shortener: dict) -> None:
    with pytest.raises(BadConfigurationError):
        ShortenerSettings.from_config(cast(LambdaConfiguration, {'redis': {}, 'shortener': shortener}))
