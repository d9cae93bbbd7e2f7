"""Shared fixtures and in-memory collaborators."""

import os
from typing import Dict, List, Optional

import pytest

from gist_mirror.api.base import SnippetHost
from gist_mirror.api.exceptions import GitHubNotFoundError
from gist_mirror.config.config import Config
from gist_mirror.exceptions import TransportError
from gist_mirror.git.base import ContentTransfer
from gist_mirror.models.repository import RepositoryTarget, TargetExistence
from gist_mirror.models.snippet import Snippet, SnippetFile

ENV_VARS = [
    'GITHUB_TOKEN',
    'GITHUB_THROTTLE',
    'GITHUB_API_URL',
    'GIST_MIRROR_ORG',
    'GIST_MIRROR_MODE',
    'GIT_TEMP_DIR',
    'LOG_LEVEL',
    'LOG_FILE',
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Isolate tests from the caller's environment and any .env file."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        'gist_mirror.config.config.load_dotenv', lambda *args, **kwargs: False
    )


def make_snippet(
    snippet_id: str,
    files=('script.sh',),
    public: bool = True,
    description: Optional[str] = 'A gist',
    summary: bool = False,
) -> Snippet:
    """Build a snippet; summaries carry no file content."""
    return Snippet(
        id=snippet_id,
        public=public,
        description=description,
        files={
            name: SnippetFile(
                filename=name, content=None if summary else f'content of {name}'
            )
            for name in files
        },
        git_pull_url=f'https://gist.github.com/{snippet_id}.git',
        git_push_url=f'https://gist.github.com/{snippet_id}.git',
        html_url=f'https://gist.github.com/user/{snippet_id}',
    )


def make_config(**overrides) -> Config:
    data = {
        'org': 'acme',
        'github': {'token': 'test-token', 'throttle': 0},
    }
    data.update(overrides)
    return Config.build(data)


class FakeHost(SnippetHost):
    """In-memory remote API recording every call."""

    def __init__(
        self,
        pages: Optional[List[List[Snippet]]] = None,
        full: Optional[Dict[str, Snippet]] = None,
        repos: Optional[Dict[str, RepositoryTarget]] = None,
    ):
        self.pages = pages or []
        self.full = full or {}
        self.repos = repos or {}
        self.probe_errors: Dict[str, Exception] = {}
        self.calls: List[tuple] = []
        self.created_repos: List[RepositoryTarget] = []
        self.created_snippets: List[Snippet] = []
        self.closed = False

    def list_snippets(self, page, per_page):
        self.calls.append(('list_snippets', page, per_page))
        if page - 1 < len(self.pages):
            return self.pages[page - 1]
        return []

    def get_snippet(self, snippet_id):
        self.calls.append(('get_snippet', snippet_id))
        return self.full[snippet_id]

    def create_snippet(self, public, description, files):
        self.calls.append(('create_snippet', public, description, dict(files)))
        new_id = f'new-{len(self.created_snippets) + 1}'
        snippet = Snippet(
            id=new_id,
            public=public,
            description=description,
            files={
                name: SnippetFile(filename=name, content=content)
                for name, content in files.items()
            },
            git_pull_url=f'https://gist.github.com/{new_id}.git',
            git_push_url=f'https://gist.github.com/{new_id}.git',
            html_url=f'https://gist.github.com/user/{new_id}',
        )
        self.created_snippets.append(snippet)
        return snippet

    def update_snippet(self, snippet_id, files):
        self.calls.append(('update_snippet', snippet_id, dict(files)))
        return self.full.get(snippet_id)

    def delete_snippet(self, snippet_id):
        self.calls.append(('delete_snippet', snippet_id))

    def get_repository(self, org, name):
        self.calls.append(('get_repository', org, name))
        if name in self.probe_errors:
            raise self.probe_errors[name]
        if name in self.repos:
            return self.repos[name]
        raise GitHubNotFoundError('Resource not found', status_code=404)

    def create_repository(self, org, name, description, homepage):
        self.calls.append(('create_repository', org, name, description, homepage))
        repo = RepositoryTarget(
            org=org,
            name=name,
            description=description,
            homepage=homepage,
            html_url=f'https://github.com/{org}/{name}',
            clone_url=f'https://github.com/{org}/{name}.git',
            existence=TargetExistence.EXISTS,
        )
        self.created_repos.append(repo)
        return repo

    def close(self):
        self.closed = True

    def call_names(self) -> List[str]:
        return [call[0] for call in self.calls]


class FakeTransfer(ContentTransfer):
    """Transfer that writes files locally and records pushes."""

    def __init__(self):
        self.clones: List[tuple] = []
        self.pushes: List[tuple] = []
        self.fail_clone: set = set()
        self.fail_push: set = set()

    async def clone_into(self, source_url, local_path):
        self.clones.append((source_url, local_path))
        if source_url in self.fail_clone:
            raise TransportError(f'clone failed: {source_url}')
        os.makedirs(local_path)
        with open(os.path.join(local_path, 'file.txt'), 'w') as f:
            f.write('content')

    async def current_branch(self, local_path):
        return 'main'

    async def push_from(self, local_path, destination_url, branch, force=False):
        self.pushes.append((local_path, destination_url, branch, force))
        if destination_url in self.fail_push:
            raise TransportError(f'push failed: {destination_url}')


@pytest.fixture
def config():
    return make_config()


@pytest.fixture
def transfer():
    return FakeTransfer()
