"""Remote API interface used by the migration pipeline."""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..models.repository import RepositoryTarget
from ..models.snippet import Snippet


class SnippetHost(ABC):
    """Operations the pipeline needs from the remote API.

    Implementations raise ``RemoteCallError`` subclasses on failure;
    ``get_repository`` raises ``GitHubNotFoundError`` when the repository
    does not exist.
    """

    @abstractmethod
    def list_snippets(self, page: int, per_page: int) -> List[Snippet]:
        """List one page of the authenticated user's snippets (1-based)."""

    @abstractmethod
    def get_snippet(self, snippet_id: str) -> Snippet:
        """Fetch a full snippet record."""

    @abstractmethod
    def create_snippet(
        self, public: bool, description: str, files: Dict[str, str]
    ) -> Snippet:
        """Create a snippet from filename -> content."""

    @abstractmethod
    def update_snippet(self, snippet_id: str, files: Dict[str, str]) -> Snippet:
        """Replace the content of the given files."""

    @abstractmethod
    def delete_snippet(self, snippet_id: str) -> None:
        """Delete a snippet."""

    @abstractmethod
    def get_repository(self, org: str, name: str) -> RepositoryTarget:
        """Fetch an existing repository."""

    @abstractmethod
    def create_repository(
        self, org: str, name: str, description: str, homepage: Optional[str]
    ) -> RepositoryTarget:
        """Create a repository in an organization."""

    def close(self) -> None:
        """Release any held resources."""
