"""Data models for snippets and mirror targets."""

from .snippet import Snippet, SnippetFile
from .repository import MirrorPair, MirrorTarget, RepositoryTarget, TargetExistence

__all__ = [
    'Snippet',
    'SnippetFile',
    'MirrorPair',
    'MirrorTarget',
    'RepositoryTarget',
    'TargetExistence',
]
