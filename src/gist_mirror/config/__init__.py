"""Configuration for Gist Mirror."""

from .config import (
    Config,
    FilterConfig,
    GitConfig,
    GitHubConfig,
    LoggingConfig,
    MirrorMode,
    RewriteConfig,
)

__all__ = [
    'Config',
    'FilterConfig',
    'GitConfig',
    'GitHubConfig',
    'LoggingConfig',
    'MirrorMode',
    'RewriteConfig',
]
