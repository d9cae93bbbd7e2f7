"""Repository name and description derivation."""

import re
from typing import Mapping

from ..config.config import RewriteConfig
from ..exceptions import PreconditionError
from ..models.repository import RepositoryTarget, TargetExistence
from ..models.snippet import Snippet

# From the last dot to the end: "a.b.tar.gz" -> "a.b.tar"
EXTENSION_PATTERN = re.compile(r'\.[^.]*$')


class NameTransform:
    """Derives target repository names and descriptions from gists.

    Every rule is a single substitution, not a global one.
    """

    def __init__(self, rules: RewriteConfig):
        self.rules = rules

    def repository_name(self, files: Mapping[str, object]) -> str:
        """Derive a repository name from the first filename.

        Args:
            files: Snippet files in their original order

        Returns:
            Repository name

        Raises:
            PreconditionError: If there are no files or the name is empty
        """
        if not files:
            raise PreconditionError('Gist has no files to derive a name from')

        first = next(iter(files))
        name = self.rules.name_match.sub(self.rules.name_replace, first, count=1)
        name = EXTENSION_PATTERN.sub('', name, count=1)

        if not name:
            raise PreconditionError(f'Derived an empty repository name from {first!r}')
        return name

    def description(self, description: str) -> str:
        """Rewrite a gist description (None is treated as empty)."""
        return self.rules.description_match.sub(
            self.rules.description_replace, description or '', count=1
        )

    def target_for(self, snippet: Snippet, org: str) -> RepositoryTarget:
        """Build the not-yet-probed target for a snippet.

        Args:
            snippet: Full snippet
            org: Target organization

        Returns:
            Target with UNKNOWN existence
        """
        return RepositoryTarget(
            org=org,
            name=self.repository_name(snippet.files),
            description=self.description(snippet.description),
            homepage=snippet.html_url,
            existence=TargetExistence.UNKNOWN,
        )
