"""
Configuration module for the listener reconciler.

Loads configuration from environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class AWSConfig:
    """AWS client configuration."""

    region: str = "us-east-1"
    endpoint_url: Optional[str] = None  # e.g. a localstack endpoint

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            region=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION", "us-east-1"),
            endpoint_url=os.getenv("AWS_ENDPOINT_URL") or None,
        )


# Policy ELBv2 assigns to HTTPS listeners created without one.
DEFAULT_SSL_POLICY = "ELBSecurityPolicy-2016-08"


@dataclass
class ListenerConfig:
    """Defaults applied when building desired listeners."""

    default_ssl_policy: str = DEFAULT_SSL_POLICY

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(
            default_ssl_policy=os.getenv("DEFAULT_SSL_POLICY") or DEFAULT_SSL_POLICY
        )


@dataclass
class LoggingConfig:
    """Logging configuration."""

    log_level: str = "INFO"

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        return cls(log_level=os.getenv("LOG_LEVEL", "INFO").upper())


@dataclass
class EventConfig:
    """Event recorder configuration."""

    max_events: int = 256

    @classmethod
    def from_env(cls):
        """Load from environment variables."""
        max_events = int(os.getenv("EVENT_BUFFER_SIZE", "256"))
        if max_events < 1:
            raise ValueError(
                f"EVENT_BUFFER_SIZE must be a positive integer, got {max_events}"
            )
        return cls(max_events=max_events)


@dataclass
class Config:
    """Main configuration object."""

    aws: AWSConfig
    listeners: ListenerConfig
    logging: LoggingConfig
    events: EventConfig

    @classmethod
    def from_env(cls):
        """Load all configuration from environment variables."""
        return cls(
            aws=AWSConfig.from_env(),
            listeners=ListenerConfig.from_env(),
            logging=LoggingConfig.from_env(),
            events=EventConfig.from_env(),
        )

    @classmethod
    def default(cls):
        """Return default configuration."""
        return cls(
            aws=AWSConfig(),
            listeners=ListenerConfig(),
            logging=LoggingConfig(),
            events=EventConfig(),
        )


# Global config instance
config: Optional[Config] = None


def load_config() -> Config:
    """Load configuration (singleton pattern)."""
    global config
    if config is None:
        config = Config.from_env()
    return config


def get_config() -> Config:
    """Get the current configuration."""
    if config is None:
        return load_config()
    return config


def reset_config() -> None:
    """Reset configuration (mainly for testing)."""
    global config
    config = None
