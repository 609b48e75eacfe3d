"""
Jersey Catalog API - Configuration Management
Handles environment configuration with AWS SSM Parameter Store for production
and python-dotenv for local development.
"""

import logging
import os
from typing import List, Optional
from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()


class Config:
    """
    Configuration manager with dual-mode operation:
    - Local: Reads from .env file via python-dotenv
    - Production: Reads from AWS SSM Parameter Store
    """

    def __init__(self):
        self.environment = os.getenv('ENVIRONMENT', 'local')
        self._ssm_client = None

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration value from SSM (production) or environment (local).

        Args:
            key: Configuration key name
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        if self.environment == 'production':
            return self._get_from_ssm(key, default)
        return os.getenv(key, default)

    def _get_from_ssm(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """
        Fetch configuration from AWS SSM Parameter Store.

        Raises:
            ConfigurationError: If parameter not found and no default provided,
                               or if AWS credentials/permissions are invalid
        """
        ssm_prefix = os.getenv('AWS_SSM_PREFIX', '/jersey-catalog')
        parameter_name = f"{ssm_prefix}/{key}"

        try:
            if self._ssm_client is None:
                import boto3
                self._ssm_client = boto3.client(
                    'ssm',
                    region_name=os.getenv('AWS_REGION', 'us-east-1')
                )

            response = self._ssm_client.get_parameter(
                Name=parameter_name,
                WithDecryption=True
            )
            return response['Parameter']['Value']

        except self._ssm_client.exceptions.ParameterNotFound:
            if default is not None:
                return default
            raise ConfigurationError(
                f"Required parameter '{key}' not found in SSM at path '{parameter_name}'."
            )

        except ConfigurationError:
            raise

        except Exception as e:
            error_type = type(e).__name__
            if default is not None:
                logging.warning(
                    f"Failed to fetch SSM parameter '{key}': {error_type}: {e}. "
                    f"Using default value."
                )
                return default
            raise ConfigurationError(
                f"Failed to fetch parameter '{key}' from SSM: {error_type}: {e}."
            ) from e

    def get_int(self, key: str, default: int) -> int:
        """
        Get configuration value as integer.

        Invalid values fall back to the default with a warning.
        """
        value = self.get(key, str(default))
        try:
            return int(value)
        except (ValueError, TypeError) as e:
            logging.warning(
                f"Invalid integer for config key '{key}': '{value}'. "
                f"Using default={default}. Error: {e}"
            )
            return default

    def get_bool(self, key: str, default: bool) -> bool:
        """Get configuration value as boolean."""
        value = self.get(key, str(default))
        if value is None:
            return default
        return value.lower() in ('true', '1', 'yes', 'on')

    def get_list(self, key: str, default: str = '') -> List[str]:
        """
        Get a comma-separated configuration value as a list.

        Whitespace around items is stripped and empty items are dropped.
        """
        value = self.get(key, default) or ''
        return [item.strip() for item in value.split(',') if item.strip()]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == 'production'

    @property
    def is_local(self) -> bool:
        """Check if running in local development environment."""
        return self.environment == 'local'


class ConfigurationError(Exception):
    """Raised when configuration cannot be loaded."""
    pass


# Global configuration instance
config = Config()


# Database configuration
DB_HOST = config.get('DB_HOST', 'localhost')
DB_PORT = config.get_int('DB_PORT', 3306)
DB_NAME = config.get('DB_NAME', 'jersey_catalog_dev')
DB_USER = config.get('DB_USER', 'root')
DB_PASSWORD = config.get('DB_PASSWORD', '')

# Flask configuration
FLASK_ENV = config.get('FLASK_ENV', 'development')
FLASK_DEBUG = config.get_bool('FLASK_DEBUG', True)
SECRET_KEY = config.get('SECRET_KEY', 'dev-secret-key-change-in-production')
CORS_ORIGINS = config.get_list('CORS_ORIGINS', 'http://localhost:8000')

# Session cookie: the lifetime doubles as the inactivity timeout (30 minutes)
SESSION_TIMEOUT_SECONDS = config.get_int('SESSION_TIMEOUT_SECONDS', 1800)
SESSION_COOKIE_SECURE = config.get_bool('SESSION_COOKIE_SECURE', False)

# Logging configuration
LOG_LEVEL = config.get('LOG_LEVEL', 'INFO')

# Schema introspection policy
EXCLUDED_JOIN_TABLES = tuple(config.get_list('EXCLUDED_JOIN_TABLES', 'reservations'))
IMMUTABLE_COLUMNS = tuple(config.get_list('IMMUTABLE_COLUMNS', 'tax_id'))

# Database connection pool settings
DB_POOL_SIZE = config.get_int('DB_POOL_SIZE', 10)
DB_POOL_MAX_OVERFLOW = config.get_int('DB_POOL_MAX_OVERFLOW', 20)
DB_POOL_RECYCLE = 3600  # Recycle connections after 1 hour
DB_POOL_PRE_PING = True  # Health check connections before use
