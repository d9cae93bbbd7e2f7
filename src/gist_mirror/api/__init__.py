"""GitHub API access and throttling."""

from .base import SnippetHost
from .client import APIResponse, GitHubClient
from .throttle import ThrottleGate

__all__ = ['SnippetHost', 'APIResponse', 'GitHubClient', 'ThrottleGate']
