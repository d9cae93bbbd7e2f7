"""Mirror orchestrator: migrates matched gists one at a time."""

import os
import shutil
import tempfile
from datetime import datetime
from typing import Iterable

from loguru import logger

from ..api.base import SnippetHost
from ..api.exceptions import GitHubNotFoundError, GitHubRateLimitError
from ..api.throttle import ThrottleGate
from ..config.config import Config, MirrorMode
from ..exceptions import PreconditionError
from ..git.base import ContentTransfer
from ..models.repository import TargetExistence
from ..models.snippet import Snippet
from .naming import NameTransform
from .state import MigrationState, MirrorSummary, SnippetMigration


class MirrorOrchestrator:
    """Drives each matched gist through the migration states.

    Snippets are processed strictly in order, each to completion or abort
    before the next one starts. A failure aborts only the snippet it
    happened in. Every remote call is followed by a throttle wait, whether
    it succeeded or not.
    """

    def __init__(
        self,
        host: SnippetHost,
        transfer: ContentTransfer,
        throttle: ThrottleGate,
        config: Config,
    ):
        """Initialize mirror orchestrator.

        Args:
            host: Remote API
            transfer: Content transfer (clone/push)
            throttle: Gate awaited after each remote call
            config: Run configuration
        """
        self.host = host
        self.transfer = transfer
        self.throttle = throttle
        self.config = config
        self.naming = NameTransform(config.rewrite)
        self.logger = logger.bind(component='MirrorOrchestrator')

    @property
    def concealing(self) -> bool:
        return self.config.mode == MirrorMode.CONCEAL

    async def mirror_all(self, snippets: Iterable[Snippet]) -> MirrorSummary:
        """Migrate a batch of matched snippets.

        Args:
            snippets: Matched snippets in discovery order

        Returns:
            Summary with completed pairs and failures in input order
        """
        snippets = list(snippets)
        summary = MirrorSummary()

        for index, snippet in enumerate(snippets, 1):
            self.logger.info(
                f'Mirroring gist {snippet.id} [{index} of {len(snippets)}] ...'
            )
            migration = await self.mirror_one(snippet)
            summary.migrations.append(migration)
            if migration.state == MigrationState.REPORTED:
                summary.pairs.append(migration.pair())

        summary.completed_at = datetime.now()
        self.logger.info(
            f'Mirroring completed: {summary.successful} successful, '
            f'{summary.failed} failed'
        )
        return summary

    async def mirror_one(self, snippet: Snippet) -> SnippetMigration:
        """Run a single snippet through every state.

        Args:
            snippet: Matched snippet, summary or full

        Returns:
            Migration record in REPORTED or ABORTED state
        """
        migration = SnippetMigration(snippet=snippet)

        try:
            await self._resolve(migration)
            await self._check_target(migration)
            await self._transfer(migration)
            await self._retire_source(migration)
            self._report(migration)
        except Exception as e:
            migration.abort(e)
            self.logger.error(
                f'Failed to mirror gist {snippet.id} '
                f'(after {migration.failed_state.value}): {e}'
            )

        return migration

    async def _call(self, func, *args, **kwargs):
        """Make a remote call, then wait out the throttle.

        A rate-limit response stretches this wait to the server's retry delay,
        so the next remote call is the one that gets held back.
        """
        try:
            return func(*args, **kwargs)
        except GitHubRateLimitError as e:
            self.throttle.back_off(e.retry_after)
            raise
        finally:
            await self.throttle.wait()

    async def _resolve(self, migration: SnippetMigration) -> None:
        """Matched -> Resolved: fetch the full gist if only a summary is known."""
        if migration.snippet.is_summary:
            self.logger.debug(f'Fetching full gist {migration.snippet.id}')
            migration.snippet = await self._call(
                self.host.get_snippet, migration.snippet.id
            )

        if not migration.snippet.git_pull_url:
            raise PreconditionError(f'Gist {migration.snippet.id} has no pull URL')

        self.logger.info(f'Resolved gist:\n{migration.snippet.details()}')
        migration.advance(MigrationState.RESOLVED)

    async def _check_target(self, migration: SnippetMigration) -> None:
        """Resolved -> TargetChecked: derive the target and probe for it."""
        snippet = migration.snippet

        if self.concealing:
            # Conceal targets are always fresh private gists; validate the name only
            self.naming.repository_name(snippet.files)
            migration.advance(MigrationState.TARGET_CHECKED)
            return

        target = self.naming.target_for(snippet, self.config.org)

        try:
            existing = await self._call(
                self.host.get_repository, target.org, target.name
            )
        except GitHubNotFoundError:
            target = target.model_copy(update={'existence': TargetExistence.MISSING})
            self.logger.info(f'Repo {target.full_name} does not exist yet')
        else:
            if not existing.matches(target.org, target.name):
                raise PreconditionError(
                    f'Probe for {target.full_name} returned {existing.full_name}'
                )
            target = existing.model_copy(
                update={'existence': TargetExistence.EXISTS}
            )
            self.logger.info(f'Repo {target.full_name} already exists, reusing it')

        migration.target = target
        migration.advance(MigrationState.TARGET_CHECKED)

    async def _transfer(self, migration: SnippetMigration) -> None:
        """TargetChecked -> Transferred: create the target if needed and push."""
        snippet = migration.snippet

        if self.concealing:
            files = {name: self.config.placeholder for name in snippet.files}
            target = await self._call(
                self.host.create_snippet,
                False,
                self.naming.description(snippet.description),
                files,
            )
            self.logger.info(f'Created private gist {target.id}')
            destination = target.git_push_url or target.git_pull_url
            if not destination:
                raise PreconditionError(f'Created gist {target.id} has no push URL')
            migration.target = target
            # The new gist only holds the placeholder commit
            await self._push_content(snippet, destination, force=True)
        else:
            target = migration.target
            if target.existence == TargetExistence.MISSING:
                self.logger.info(f'Creating repo {target.full_name} ...')
                created = await self._call(
                    self.host.create_repository,
                    target.org,
                    target.name,
                    target.description,
                    target.homepage,
                )
                target = created.model_copy(
                    update={'existence': TargetExistence.EXISTS}
                )
                migration.target = target
            self.logger.info(f'Pushing gist to repo {target.full_name} ...')
            await self._push_content(snippet, target.push_url, force=False)

        migration.advance(MigrationState.TRANSFERRED)

    async def _push_content(
        self, snippet: Snippet, destination_url: str, force: bool
    ) -> None:
        """Clone the gist into a scratch directory and push it onward.

        The scratch directory is removed whether or not the transfer succeeds.
        """
        scratch = tempfile.mkdtemp(prefix='gist_mirror_', dir=self.config.git.temp_dir)
        try:
            work_dir = os.path.join(scratch, snippet.id)
            await self.transfer.clone_into(snippet.git_pull_url, work_dir)
            branch = await self.transfer.current_branch(work_dir)
            await self.transfer.push_from(work_dir, destination_url, branch, force=force)
        finally:
            self._cleanup_scratch(scratch)

    def _cleanup_scratch(self, scratch: str) -> None:
        try:
            if os.path.exists(scratch):
                shutil.rmtree(scratch)
                self.logger.debug(f'Cleaned up temporary directory: {scratch}')
        except OSError as e:
            self.logger.warning(f'Failed to cleanup temporary directory {scratch}: {e}')

    async def _retire_source(self, migration: SnippetMigration) -> None:
        """Transferred -> SourceRetired: conceal the source, or leave it."""
        snippet = migration.snippet

        if self.concealing:
            files = {name: self.config.placeholder for name in snippet.files}
            await self._call(self.host.update_snippet, snippet.id, files)
            self.logger.info(f'Emptied source gist {snippet.id}')
            await self._call(self.host.delete_snippet, snippet.id)
            self.logger.info(f'Deleted source gist {snippet.id}')
        else:
            self.logger.debug(f'Leaving source gist {snippet.id} untouched')

        migration.advance(MigrationState.SOURCE_RETIRED)

    def _report(self, migration: SnippetMigration) -> None:
        """SourceRetired -> Reported."""
        self.logger.info(migration.pair().describe())
        migration.advance(MigrationState.REPORTED)
