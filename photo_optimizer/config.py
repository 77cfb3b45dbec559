"""
Configuration management for the photo optimizer
Supports environment variables, SSM Parameter Store, and local defaults
"""
import os
import json
from typing import Optional, Any
from functools import lru_cache
import boto3
from botocore.exceptions import ClientError, BotoCoreError

from .exceptions import ConfigurationError


class Config:
    """
    Configuration manager with hybrid approach:
    1. Environment Variables (highest priority)
    2. AWS Parameter Store (environment-specific)
    3. Local defaults (development fallback)
    """

    def __init__(self):
        self.environment = os.environ.get('ENVIRONMENT', 'dev')
        self.parameter_store_prefix = os.environ.get(
            'PARAMETER_STORE_PREFIX',
            f'/photo-optimizer/{self.environment}/optimizer-service'
        )
        self.parameter_store_enabled = os.environ.get(
            'PARAMETER_STORE_ENABLED', 'true'
        ).lower() in ('true', '1', 'yes', 'on')
        self._ssm_client = None

    @property
    def ssm_client(self):
        """Lazy initialization of SSM client"""
        if self._ssm_client is None and self.parameter_store_enabled:
            try:
                self._ssm_client = boto3.client('ssm')
            except BotoCoreError:
                # Local development without a region or credentials
                self._ssm_client = None
        return self._ssm_client

    def get_parameter(self, key: str, default: Any = None) -> Any:
        """
        Get configuration parameter with fallback hierarchy:
        1. Environment variable (PHOTO_OPTIMIZER_ prefixed, then plain)
        2. SSM Parameter Store
        3. Default value
        """
        env_key = f"PHOTO_OPTIMIZER_{key.upper().replace('-', '_')}"
        env_value = os.environ.get(env_key)
        if env_value is not None:
            return env_value

        env_value = os.environ.get(key.upper().replace('-', '_'))
        if env_value is not None:
            return env_value

        ssm_value = self.get_ssm_parameter(key)
        if ssm_value is not None:
            return ssm_value

        return default

    @lru_cache(maxsize=128)
    def get_ssm_parameter(self, key: str) -> Optional[str]:
        """
        Get parameter from AWS SSM Parameter Store with caching
        """
        if not self.ssm_client:
            return None

        parameter_name = f"{self.parameter_store_prefix}/{key}"

        try:
            response = self.ssm_client.get_parameter(Name=parameter_name)
            return response['Parameter']['Value']
        except ClientError as e:
            if e.response['Error']['Code'] != 'ParameterNotFound':
                print(f"Error getting SSM parameter {parameter_name}: {e}")
            return None
        except BotoCoreError as e:
            print(f"Unexpected error getting SSM parameter {parameter_name}: {e}")
            return None

    def require_parameter(self, key: str) -> str:
        """Get a mandatory parameter or raise ConfigurationError"""
        value = self.get_parameter(key)
        if value is None or value == '':
            raise ConfigurationError(
                f"Missing required configuration: {key}",
                config_key=key,
                config_source='env/ssm'
            )
        return value

    def get_int_parameter(self, key: str, default: int = 0) -> int:
        """Get integer parameter"""
        value = self.get_parameter(key, default)
        try:
            return int(value)
        except (ValueError, TypeError):
            return default

    def get_bool_parameter(self, key: str, default: bool = False) -> bool:
        """Get boolean parameter"""
        value = self.get_parameter(key, default)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            return value.lower() in ('true', '1', 'yes', 'on')
        return default

    def get_json_parameter(self, key: str, default: dict = None) -> dict:
        """Get JSON parameter"""
        value = self.get_parameter(key)
        if value is None:
            return default or {}

        try:
            if isinstance(value, str):
                return json.loads(value)
            return value
        except (json.JSONDecodeError, TypeError):
            return default or {}

    def get_list_parameter(self, key: str, default: list = None, separator: str = ',') -> list:
        """Get list parameter (comma-separated string)"""
        value = self.get_parameter(key)
        if value is None:
            return default or []

        if isinstance(value, list):
            return value

        if isinstance(value, str):
            return [item.strip() for item in value.split(separator) if item.strip()]

        return default or []

    # Storage
    @property
    def bucket_name(self) -> str:
        """Bucket holding both raw/ uploads and published photo/ objects"""
        return self.require_parameter('bucket-name')

    @property
    def upload_url_expiry(self) -> int:
        """Signed write URL expiry in seconds"""
        return self.get_int_parameter('upload-url-expiry', 5 * 60)

    # CDN
    @property
    def distribution_id(self) -> str:
        return self.require_parameter('distribution-id')

    @property
    def root_domain(self) -> str:
        return self.require_parameter('root-domain')

    @property
    def sub_domain(self) -> str:
        return self.require_parameter('sub-domain')

    @property
    def infra_domain(self) -> str:
        return self.require_parameter('infra-domain')

    # Optimizer toolchain
    @property
    def toolchain_archive(self) -> str:
        """Bundled jpegoptim archive, relative to the Lambda task root"""
        return self.get_parameter('toolchain-archive', 'jpegoptim.tar.gz')

    @property
    def toolchain_install_root(self) -> str:
        return self.get_parameter('toolchain-install-root', '/tmp')

    @property
    def toolchain_binary(self) -> str:
        """Executable path relative to the install root"""
        return self.get_parameter('toolchain-binary', 'bin/jpegoptim')

    @property
    def jpeg_quality(self) -> int:
        return self.get_int_parameter('jpeg-quality', 80)

    @property
    def work_dir(self) -> str:
        return self.get_parameter('work-dir', '/tmp')

    @property
    def hash_algorithm(self) -> str:
        return self.get_parameter('hash-algorithm', 'md5')

    @property
    def enable_debug_logging(self) -> bool:
        """Get debug logging flag"""
        return self.get_bool_parameter('enable-debug-logging', False)


# Global configuration instance
config = Config()


def get_config() -> Config:
    """Get global configuration instance"""
    return config
