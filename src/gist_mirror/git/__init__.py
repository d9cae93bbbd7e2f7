"""Git operations for snippet content transfer."""

from .base import ContentTransfer
from .transfer import GitTransfer

__all__ = ['ContentTransfer', 'GitTransfer']
