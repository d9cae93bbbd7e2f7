"""Gist Mirror

Mirror a user's public gists into named repositories of a GitHub
organization, optionally concealing the originals afterwards.
"""

__version__ = '0.1.0'

from .cli.main import main

__all__ = ['main']
