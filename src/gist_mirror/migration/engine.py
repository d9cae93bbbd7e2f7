"""Mirror engine - main entry point for mirror operations."""

from datetime import datetime
from typing import List, Optional

from loguru import logger

from ..api.base import SnippetHost
from ..api.client import GitHubClient
from ..api.throttle import ThrottleGate
from ..config.config import Config
from ..git.base import ContentTransfer
from ..git.transfer import GitTransfer
from ..models.snippet import Snippet
from .discovery import Discovery
from .orchestrator import MirrorOrchestrator
from .state import MirrorSummary


class MirrorEngine:
    """Wires configuration, API client, throttle and transfer together."""

    def __init__(
        self,
        config: Config,
        host: Optional[SnippetHost] = None,
        transfer: Optional[ContentTransfer] = None,
        throttle: Optional[ThrottleGate] = None,
    ):
        """Initialize mirror engine.

        Args:
            config: Run configuration
            host: Remote API, a GitHub client by default
            transfer: Content transfer, git by default
            throttle: Shared throttle gate
        """
        self.config = config
        self.logger = logger.bind(component='MirrorEngine')

        self.host = host or GitHubClient(config.github)
        self.transfer = transfer or GitTransfer(config.git, token=config.github.token)
        self.throttle = throttle or ThrottleGate(config.github.throttle)

        self.discovery = Discovery(
            self.host,
            config.filters,
            self.throttle,
            page_size=config.github.page_size,
        )
        self.orchestrator = MirrorOrchestrator(
            self.host, self.transfer, self.throttle, config
        )

    async def find(self) -> List[Snippet]:
        """Discover matching gists without changing anything.

        Returns:
            Matching gists
        """
        try:
            return await self.discovery.discover()
        finally:
            self.host.close()

    async def run(self) -> MirrorSummary:
        """Discover matching gists and mirror them.

        Returns:
            Mirror summary
        """
        self.logger.info(
            f'Starting gist {self.config.mode.value} to org {self.config.org}'
        )

        try:
            snippets = await self.discovery.discover()
            if not snippets:
                self.logger.info('No matching gists found')
                return MirrorSummary(completed_at=datetime.now())

            # Pause between the last listing call and the first mirror call
            await self.throttle.wait()
            return await self.orchestrator.mirror_all(snippets)

        except Exception as e:
            self.logger.error(f'Mirror run failed: {e}')
            raise
        finally:
            self.host.close()
