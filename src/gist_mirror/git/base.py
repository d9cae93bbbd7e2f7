"""Content transfer interface."""

from abc import ABC, abstractmethod


class ContentTransfer(ABC):
    """Moves snippet content between remotes through a local working copy.

    All operations raise ``TransportError`` on failure.
    """

    @abstractmethod
    async def clone_into(self, source_url: str, local_path: str) -> None:
        """Clone ``source_url`` into ``local_path``."""

    @abstractmethod
    async def current_branch(self, local_path: str) -> str:
        """Name of the branch checked out in ``local_path``."""

    @abstractmethod
    async def push_from(
        self,
        local_path: str,
        destination_url: str,
        branch: str,
        force: bool = False,
    ) -> None:
        """Push ``branch`` of ``local_path`` to ``destination_url``."""
