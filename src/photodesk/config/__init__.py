"""Application configuration helpers."""

from __future__ import annotations

from .env import optional_env_var, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .github import GitHubConfig, default_github_resilience, get_github_config
from .http_resilience import RateLimit, ResilienceConfig, RetryPolicy
from .logging import configure_logging
from .paths import ProcessingConfig, SitePaths, get_processing_config

__all__ = [
    "ConfigurationError",
    "GitHubConfig",
    "MissingConfigurationError",
    "ProcessingConfig",
    "RateLimit",
    "ResilienceConfig",
    "RetryPolicy",
    "SitePaths",
    "configure_logging",
    "default_github_resilience",
    "get_github_config",
    "get_processing_config",
    "optional_env_var",
    "require_env_vars",
]
