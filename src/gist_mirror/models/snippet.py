"""Snippet (gist) entity models."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class SnippetFile(BaseModel):
    """A single file inside a snippet."""

    model_config = ConfigDict(frozen=True)

    filename: str = Field(..., description='File name')
    content: Optional[str] = Field(
        default=None, description='File content, absent in listings'
    )
    raw_url: Optional[str] = Field(default=None, description='Raw content URL')
    size: Optional[int] = Field(default=None, description='Size in bytes')
    language: Optional[str] = Field(default=None, description='Detected language')
    truncated: bool = Field(default=False, description='Content was truncated')


class Snippet(BaseModel):
    """GitHub gist model.

    A *summary* snippet, as returned by the listing endpoint, omits file
    contents. Its ``id`` is enough to fetch the full record.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description='Snippet ID')
    public: bool = Field(..., description='Snippet is public')
    description: Optional[str] = Field(default=None, description='Description')

    # Insertion order matters: the first filename names the target repository
    files: Dict[str, SnippetFile] = Field(
        default_factory=dict, description='Files keyed by filename'
    )

    # URLs
    git_pull_url: Optional[str] = Field(default=None, description='Git pull URL')
    git_push_url: Optional[str] = Field(default=None, description='Git push URL')
    html_url: Optional[str] = Field(default=None, description='Browse URL')

    @property
    def is_summary(self) -> bool:
        """Whether file contents (or the browse URL) still need to be fetched."""
        if not self.html_url:
            return True
        return any(f.content is None for f in self.files.values())

    @property
    def filenames(self) -> list:
        """Filenames in their original order."""
        return list(self.files)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Snippet':
        """Create a snippet from a GitHub gist payload.

        Args:
            data: Gist JSON as returned by the API

        Returns:
            Snippet model
        """
        files = {}
        for filename, file_data in (data.get('files') or {}).items():
            file_data = file_data or {}
            files[filename] = SnippetFile(
                filename=file_data.get('filename') or filename,
                content=file_data.get('content'),
                raw_url=file_data.get('raw_url'),
                size=file_data.get('size'),
                language=file_data.get('language'),
                truncated=bool(file_data.get('truncated', False)),
            )

        return cls(
            id=str(data['id']),
            public=bool(data.get('public', False)),
            description=data.get('description'),
            files=files,
            git_pull_url=data.get('git_pull_url'),
            git_push_url=data.get('git_push_url'),
            html_url=data.get('html_url'),
        )

    def details(self) -> str:
        """Multi-line human readable summary."""
        lines = [
            f'  id: {self.id}',
            f'  description: {self.description or ""}',
            f'  files: {", ".join(self.filenames)}',
            f'  url: {self.html_url or ""}',
        ]
        return '\n'.join(lines)
