"""Discovery of gists to migrate."""

from typing import AsyncIterator, List

from loguru import logger

from ..api.base import SnippetHost
from ..api.throttle import ThrottleGate
from ..config.config import FilterConfig
from ..models.snippet import Snippet


class Discovery:
    """Paginates the user's gists and keeps those matching the filters."""

    def __init__(
        self,
        host: SnippetHost,
        filters: FilterConfig,
        throttle: ThrottleGate,
        page_size: int = 100,
    ):
        """Initialize discovery.

        Args:
            host: Remote API
            filters: Description and filename patterns
            throttle: Gate awaited between page requests
            page_size: Items requested per page
        """
        self.host = host
        self.filters = filters
        self.throttle = throttle
        self.page_size = page_size
        self.logger = logger.bind(component='Discovery')

    def matches(self, snippet: Snippet) -> bool:
        """Check a snippet against the filters.

        Private snippets never match. A missing description is matched as
        the empty string.
        """
        if not snippet.public:
            return False
        if not self.filters.description_match.search(snippet.description or ''):
            return False
        return any(self.filters.filename_match.search(name) for name in snippet.files)

    async def iter_matches(self) -> AsyncIterator[Snippet]:
        """Yield matching snippets in listing order.

        The iterator is single-use. A page shorter than ``page_size`` ends
        the listing; the throttle is awaited between pages.
        """
        found = 0
        page = 1

        while True:
            snippets = self.host.list_snippets(page=page, per_page=self.page_size)

            for snippet in snippets:
                if self.matches(snippet):
                    found += 1
                    yield snippet

            self.logger.info(f'Found {found} matching gists...')

            if len(snippets) < self.page_size:
                break

            await self.throttle.wait()
            page += 1

        self.logger.info(f'Found a total of {found} matching gists.')

    async def discover(self) -> List[Snippet]:
        """Collect all matching snippets.

        Returns:
            Matching snippets in listing order
        """
        return [snippet async for snippet in self.iter_matches()]
