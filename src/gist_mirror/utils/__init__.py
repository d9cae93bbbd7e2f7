"""Shared utilities."""

from .logging import mask_secrets, setup_logging

__all__ = ['mask_secrets', 'setup_logging']
