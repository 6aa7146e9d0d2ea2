"""
Toolkit settings and configuration.

Centralizes all configurable values.
"""

import os
from typing import Optional, Dict, Any
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings:
    """
    Toolkit settings.

    Centralizes all configuration values.
    """

    def __init__(self):
        """Initialize settings from environment and defaults."""
        # Logging Settings
        self.log_level = os.getenv('SAPPY_LOG_LEVEL', 'INFO')
        self.log_format = os.getenv(
            'SAPPY_LOG_FORMAT',
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # Container Settings
        self.parameter_prefix = os.getenv('SAPPY_PARAMETER_PREFIX', 'SAPPY_PARAM_')
        self.lock_env_parameters = os.getenv('SAPPY_LOCK_ENV_PARAMETERS', 'false').lower() == 'true'
        self.auto_compile = os.getenv('SAPPY_AUTO_COMPILE', 'false').lower() == 'true'

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            key: Configuration key (supports dot notation)
            default: Default value if not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self

        for k in keys:
            if hasattr(value, k):
                value = getattr(value, k)
            else:
                return default

        return value if value is not None else default

    def environment_parameters(self) -> Dict[str, str]:
        """
        Collect container parameters from the environment.

        Every variable starting with the parameter prefix becomes a
        parameter named after the rest of the variable, lower-cased.

        Returns:
            Mapping of parameter name to (string) value
        """
        prefix = self.parameter_prefix
        if not prefix:
            return {}

        parameters = {}
        for name, value in os.environ.items():
            if name.startswith(prefix) and len(name) > len(prefix):
                parameters[name[len(prefix):].lower()] = value
        return parameters

    def to_dict(self) -> Dict[str, Any]:
        """Convert settings to dictionary."""
        return {
            'log_level': self.log_level,
            'log_format': self.log_format,
            'parameter_prefix': self.parameter_prefix,
            'lock_env_parameters': self.lock_env_parameters,
            'auto_compile': self.auto_compile,
        }


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def set_settings(settings: Optional[Settings]):
    """Set the global settings instance (useful for testing)."""
    global _settings
    _settings = settings
