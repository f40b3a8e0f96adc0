"""
Engine configuration module.

This module defines configuration classes for different environments
(development, testing, strict). Configuration values are loaded from
environment variables with sensible defaults, so a whole test run can be
switched to strict mocks without touching the tests.
"""

import os


class Config:
    """Base configuration with default settings."""

    # Behavior of mocks created without an explicit behavior ("loose" or "strict")
    DEFAULT_BEHAVIOR: str = os.environ.get("UNDERSTUDY_BEHAVIOR", "loose")

    # Fallback policy for unmatched loose calls ("empty" or "mock")
    DEFAULT_VALUE: str = os.environ.get("UNDERSTUDY_DEFAULT_VALUE", "empty")

    LOG_LEVEL: str = os.environ.get("UNDERSTUDY_LOG_LEVEL", "WARNING")


class DevelopmentConfig(Config):
    """Development configuration with verbose engine logging."""

    LOG_LEVEL: str = os.environ.get("UNDERSTUDY_LOG_LEVEL", "DEBUG")


class TestingConfig(Config):
    """Testing configuration."""

    # Keep pytest output readable; failures still carry full messages
    LOG_LEVEL: str = os.environ.get("UNDERSTUDY_LOG_LEVEL", "INFO")


class StrictConfig(Config):
    """Configuration where every mock rejects unconfigured calls by default."""

    DEFAULT_BEHAVIOR: str = "strict"


# Configuration mapping for easy access
config = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "strict": StrictConfig,
    "default": Config,
}


def get_config(env: str | None = None) -> type[Config]:
    """
    Get the configuration class for the specified environment.

    Args:
        env: Environment name (development, testing, strict).
             If None, uses the UNDERSTUDY_ENV environment variable.

    Returns:
        Configuration class for the specified environment.
    """
    if env is None:
        env = os.environ.get("UNDERSTUDY_ENV", "default")
    return config.get(env, config["default"])
