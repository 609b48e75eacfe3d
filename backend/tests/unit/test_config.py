"""
Jersey Catalog API - Configuration Unit Tests

Tests the Config class with:
- Environment variable loading
- AWS SSM Parameter Store integration (mocked)
- Type conversions (int, bool, list)
- Schema policy and session constants

Priority: P0 - Foundation (configuration used by all modules)
"""

import os
from unittest.mock import patch, MagicMock

import pytest


class ParameterNotFound(Exception):
    pass


def _ssm_client(side_effect=None, value=None):
    mock_ssm = MagicMock()
    mock_ssm.exceptions = MagicMock()
    mock_ssm.exceptions.ParameterNotFound = ParameterNotFound
    if side_effect is not None:
        mock_ssm.get_parameter.side_effect = side_effect
    else:
        mock_ssm.get_parameter.return_value = {'Parameter': {'Value': value}}
    return mock_ssm


class TestConfigLocalMode:
    """Config in local mode reads os.environ (populated by python-dotenv)."""

    def test_config_defaults_to_local_environment(self):
        with patch.dict(os.environ, {}, clear=True):
            from utils.config import Config
            config = Config()
            assert config.environment == 'local'
            assert config.is_local is True
            assert config.is_production is False

    def test_get_returns_environment_variable(self):
        with patch.dict(os.environ, {'ENVIRONMENT': 'local', 'TEST_KEY': 'test_value'}):
            from utils.config import Config
            assert Config().get('TEST_KEY') == 'test_value'

    def test_get_returns_default_when_key_not_found(self):
        with patch.dict(os.environ, {'ENVIRONMENT': 'local'}, clear=True):
            from utils.config import Config
            config = Config()
            assert config.get('MISSING_KEY', 'default_value') == 'default_value'
            assert config.get('MISSING_KEY') is None


class TestConfigProductionMode:
    """Config in production mode reads AWS SSM Parameter Store (mocked)."""

    @patch('boto3.client')
    def test_get_fetches_from_ssm(self, mock_boto_client):
        mock_ssm = _ssm_client(value='prod-database.aws.com')
        mock_boto_client.return_value = mock_ssm

        with patch.dict(os.environ, {'ENVIRONMENT': 'production'}):
            from utils.config import Config
            result = Config().get('DB_HOST')

        mock_boto_client.assert_called_once_with('ssm', region_name='us-east-1')
        mock_ssm.get_parameter.assert_called_once_with(
            Name='/jersey-catalog/DB_HOST',
            WithDecryption=True
        )
        assert result == 'prod-database.aws.com'

    @patch('boto3.client')
    def test_get_uses_custom_ssm_prefix(self, mock_boto_client):
        mock_ssm = _ssm_client(value='custom-database.aws.com')
        mock_boto_client.return_value = mock_ssm

        with patch.dict(os.environ, {'ENVIRONMENT': 'production', 'AWS_SSM_PREFIX': '/custom/prefix'}):
            from utils.config import Config
            Config().get('DB_HOST')

        mock_ssm.get_parameter.assert_called_once_with(
            Name='/custom/prefix/DB_HOST',
            WithDecryption=True
        )

    @patch('boto3.client')
    def test_missing_parameter_returns_default(self, mock_boto_client):
        mock_boto_client.return_value = _ssm_client(side_effect=ParameterNotFound("Not found"))

        with patch.dict(os.environ, {'ENVIRONMENT': 'production'}):
            from utils.config import Config
            assert Config().get('MISSING_PARAM', 'default_value') == 'default_value'

    @patch('boto3.client')
    def test_missing_parameter_without_default_raises(self, mock_boto_client):
        from utils.config import Config, ConfigurationError
        mock_boto_client.return_value = _ssm_client(side_effect=ParameterNotFound("Not found"))

        with patch.dict(os.environ, {'ENVIRONMENT': 'production'}):
            with pytest.raises(ConfigurationError) as exc_info:
                Config().get('SECRET_KEY')

        assert 'SECRET_KEY' in str(exc_info.value)
        assert '/jersey-catalog/SECRET_KEY' in str(exc_info.value)

    @patch('boto3.client')
    def test_credentials_error_falls_back_to_default(self, mock_boto_client):
        mock_boto_client.return_value = _ssm_client(side_effect=Exception("NoCredentialsError"))

        with patch.dict(os.environ, {'ENVIRONMENT': 'production'}):
            from utils.config import Config
            assert Config().get('DB_HOST', 'localhost') == 'localhost'


class TestConfigTypeConversions:
    """get_int(), get_bool() and get_list()."""

    def test_get_int_converts_string_to_integer(self):
        with patch.dict(os.environ, {'ENVIRONMENT': 'local', 'SESSION_TIMEOUT_SECONDS': '900'}):
            from utils.config import Config
            result = Config().get_int('SESSION_TIMEOUT_SECONDS', 1800)
            assert result == 900
            assert isinstance(result, int)

    def test_get_int_returns_default_on_invalid_value(self):
        with patch.dict(os.environ, {'ENVIRONMENT': 'local', 'DB_PORT': 'not-a-number'}):
            from utils.config import Config
            assert Config().get_int('DB_PORT', 3306) == 3306

    @pytest.mark.parametrize('value,expected', [
        ('true', True), ('1', True), ('Yes', True), ('on', True),
        ('false', False), ('0', False), ('off', False), ('random', False),
    ])
    def test_get_bool(self, value, expected):
        with patch.dict(os.environ, {'ENVIRONMENT': 'local', 'TEST_BOOL': value}):
            from utils.config import Config
            assert Config().get_bool('TEST_BOOL', not expected) is expected

    def test_get_list_splits_and_strips(self):
        with patch.dict(os.environ, {'ENVIRONMENT': 'local', 'CORS_ORIGINS': ' http://a.test, ,http://b.test '}):
            from utils.config import Config
            assert Config().get_list('CORS_ORIGINS') == ['http://a.test', 'http://b.test']

    def test_get_list_uses_default(self):
        with patch.dict(os.environ, {'ENVIRONMENT': 'local'}, clear=True):
            from utils.config import Config
            assert Config().get_list('IMMUTABLE_COLUMNS', 'tax_id') == ['tax_id']
            assert Config().get_list('EMPTY_LIST') == []


class TestGlobalConfigConstants:
    """Module-level constants used throughout the application."""

    def test_database_constants(self):
        from utils.config import DB_HOST, DB_PORT, DB_NAME, DB_USER
        assert DB_HOST is not None
        assert isinstance(DB_PORT, int)
        assert DB_NAME
        assert DB_USER is not None

    def test_session_constants(self):
        from utils.config import SESSION_TIMEOUT_SECONDS, SESSION_COOKIE_SECURE
        assert isinstance(SESSION_TIMEOUT_SECONDS, int)
        assert SESSION_TIMEOUT_SECONDS > 0
        assert isinstance(SESSION_COOKIE_SECURE, bool)

    def test_schema_policy_constants_are_tuples(self):
        from utils.config import EXCLUDED_JOIN_TABLES, IMMUTABLE_COLUMNS
        assert isinstance(EXCLUDED_JOIN_TABLES, tuple)
        assert isinstance(IMMUTABLE_COLUMNS, tuple)
