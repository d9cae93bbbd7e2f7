"""Repository target models."""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .snippet import Snippet


class TargetExistence(str, Enum):
    """Existence state of a target repository."""

    UNKNOWN = 'unknown'
    EXISTS = 'exists'
    MISSING = 'missing'


class RepositoryTarget(BaseModel):
    """Organization repository a snippet is mirrored into."""

    model_config = ConfigDict(frozen=True)

    org: str = Field(..., description='Owning organization')
    name: str = Field(..., description='Repository name, unique within org')
    description: str = Field(default='', description='Repository description')
    homepage: Optional[str] = Field(default=None, description='Homepage URL')

    html_url: Optional[str] = Field(default=None, description='Browse URL')
    clone_url: Optional[str] = Field(default=None, description='HTTPS clone URL')

    existence: TargetExistence = Field(
        default=TargetExistence.UNKNOWN, description='Resolved by existence probe'
    )

    @property
    def full_name(self) -> str:
        return f'{self.org}/{self.name}'

    @property
    def push_url(self) -> str:
        """URL to push content to, falling back to the conventional one."""
        return self.clone_url or f'https://github.com/{self.full_name}.git'

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'RepositoryTarget':
        """Create a target from a GitHub repository payload.

        Args:
            data: Repository JSON as returned by the API

        Returns:
            Repository target with EXISTS state
        """
        owner = data.get('owner') or {}
        return cls(
            org=owner.get('login', ''),
            name=data.get('name', ''),
            description=data.get('description') or '',
            homepage=data.get('homepage') or None,
            html_url=data.get('html_url'),
            clone_url=data.get('clone_url'),
            existence=TargetExistence.EXISTS,
        )

    def matches(self, org: str, name: str) -> bool:
        """Check that this record is the repository that was asked for."""
        return (
            self.org.lower() == org.lower() and self.name.lower() == name.lower()
        )


MirrorTarget = Union[RepositoryTarget, Snippet]


class MirrorPair(BaseModel):
    """Completed migration: source snippet and where it went."""

    model_config = ConfigDict(frozen=True)

    source: Snippet = Field(..., description='Source snippet')
    target: MirrorTarget = Field(..., description='Resulting repository or snippet')

    def describe(self) -> str:
        """Human-readable pairing for audit logs."""
        if isinstance(self.target, RepositoryTarget):
            where = self.target.html_url or self.target.full_name
            return f'Mirrored gist {self.source.id} to {where}'
        where = self.target.html_url or self.target.id
        return f'Concealed gist {self.source.id} as {where}'
