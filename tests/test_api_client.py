"""Tests for GitHub API client."""

import time
from unittest.mock import Mock, patch

import pytest
import requests

from gist_mirror.api.client import APIResponse, GitHubClient
from gist_mirror.api.exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from gist_mirror.config.config import GitHubConfig
from gist_mirror.models.repository import TargetExistence


GIST_PAYLOAD = {
    'id': 'aa5a315d61ae9438b18d',
    'public': True,
    'description': 'Sleep for a while.',
    'html_url': 'https://gist.github.com/octocat/aa5a315d61ae9438b18d',
    'git_pull_url': 'https://gist.github.com/aa5a315d61ae9438b18d.git',
    'git_push_url': 'https://gist.github.com/aa5a315d61ae9438b18d.git',
    'files': {
        'sleep.sh': {
            'filename': 'sleep.sh',
            'language': 'Shell',
            'size': 12,
            'content': 'sleep 10',
        },
        'README.md': {'filename': 'README.md', 'content': '# sleep'},
    },
}

REPO_PAYLOAD = {
    'name': 'sleep',
    'owner': {'login': 'acme'},
    'description': 'Sleep for a while.',
    'homepage': 'https://gist.github.com/octocat/aa5a315d61ae9438b18d',
    'html_url': 'https://github.com/acme/sleep',
    'clone_url': 'https://github.com/acme/sleep.git',
}


def make_response(status_code=200, payload=None, headers=None):
    response = Mock()
    response.status_code = status_code
    response.headers = headers or {}
    response.json.return_value = payload
    response.content = b'{}' if payload is not None else b''
    response.text = ''
    return response


class TestAPIResponse:
    """Test API response model."""

    def test_api_response_creation(self):
        """Test API response creation."""
        response = APIResponse(
            status_code=200,
            data={'id': 1},
            headers={'Content-Type': 'application/json'},
            success=True,
        )

        assert response.status_code == 200
        assert response.data == {'id': 1}
        assert response.success is True


class TestGitHubClient:
    """Test GitHub API client."""

    def setup_method(self):
        """Set up test fixtures."""
        self.config = GitHubConfig(token='test-token', timeout=15)

    def test_client_initialization(self):
        """Test client initialization."""
        client = GitHubClient(self.config)

        assert client.base_url == 'https://api.github.com'
        assert client.session.headers['Authorization'] == 'Bearer test-token'
        assert client.session.headers['Accept'] == 'application/vnd.github+json'
        assert client.session.headers['User-Agent'].startswith('gist-mirror/')

    def test_client_initialization_no_auth(self):
        """Test client initialization without a token."""
        with pytest.raises(GitHubAuthenticationError):
            GitHubClient(GitHubConfig())

    def test_build_url(self):
        """Test URL building."""
        client = GitHubClient(self.config)

        assert client._build_url('/gists') == 'https://api.github.com/gists'
        assert client._build_url('gists/1') == 'https://api.github.com/gists/1'

    def test_build_url_enterprise(self):
        """Test URL building under an API path prefix."""
        client = GitHubClient(
            GitHubConfig(url='https://ghe.example.com/api/v3', token='t')
        )

        assert client._build_url('/gists') == 'https://ghe.example.com/api/v3/gists'

    @patch('requests.Session.request')
    def test_request_uses_timeout(self, mock_request):
        """Test that the configured timeout is passed on."""
        mock_request.return_value = make_response(payload=[])
        client = GitHubClient(self.config)

        client.get('/gists')

        assert mock_request.call_args.kwargs['timeout'] == 15

    @patch('requests.Session.request')
    def test_list_snippets(self, mock_request):
        """Test listing one page of gists."""
        mock_request.return_value = make_response(payload=[GIST_PAYLOAD])
        client = GitHubClient(self.config)

        snippets = client.list_snippets(page=2, per_page=50)

        method, url = mock_request.call_args.args
        assert method == 'GET'
        assert url == 'https://api.github.com/gists'
        assert mock_request.call_args.kwargs['params'] == {'per_page': 50, 'page': 2}
        assert len(snippets) == 1
        assert snippets[0].id == 'aa5a315d61ae9438b18d'
        assert snippets[0].filenames == ['sleep.sh', 'README.md']

    @patch('requests.Session.request')
    def test_get_snippet(self, mock_request):
        """Test fetching a full gist."""
        mock_request.return_value = make_response(payload=GIST_PAYLOAD)
        client = GitHubClient(self.config)

        snippet = client.get_snippet('aa5a315d61ae9438b18d')

        assert mock_request.call_args.args[1].endswith('/gists/aa5a315d61ae9438b18d')
        assert snippet.is_summary is False
        assert snippet.files['sleep.sh'].content == 'sleep 10'

    @patch('requests.Session.request')
    def test_create_snippet(self, mock_request):
        """Test gist creation payload."""
        mock_request.return_value = make_response(201, payload=GIST_PAYLOAD)
        client = GitHubClient(self.config)

        client.create_snippet(False, 'hidden', {'a.sh': 'EMPTY'})

        assert mock_request.call_args.args[0] == 'POST'
        assert mock_request.call_args.kwargs['json'] == {
            'public': False,
            'description': 'hidden',
            'files': {'a.sh': {'content': 'EMPTY'}},
        }

    @patch('requests.Session.request')
    def test_update_and_delete_snippet(self, mock_request):
        """Test gist update and deletion requests."""
        mock_request.side_effect = [
            make_response(payload=GIST_PAYLOAD),
            make_response(204),
        ]
        client = GitHubClient(self.config)

        client.update_snippet('abc', {'a.sh': 'EMPTY'})
        client.delete_snippet('abc')

        update_call, delete_call = mock_request.call_args_list
        assert update_call.args == ('PATCH', 'https://api.github.com/gists/abc')
        assert update_call.kwargs['json'] == {'files': {'a.sh': {'content': 'EMPTY'}}}
        assert delete_call.args == ('DELETE', 'https://api.github.com/gists/abc')

    @patch('requests.Session.request')
    def test_get_repository(self, mock_request):
        """Test repository probe."""
        mock_request.return_value = make_response(payload=REPO_PAYLOAD)
        client = GitHubClient(self.config)

        repo = client.get_repository('acme', 'sleep')

        assert mock_request.call_args.args[1] == 'https://api.github.com/repos/acme/sleep'
        assert repo.full_name == 'acme/sleep'
        assert repo.existence == TargetExistence.EXISTS
        assert repo.matches('ACME', 'Sleep')

    @patch('requests.Session.request')
    def test_create_repository(self, mock_request):
        """Test repository creation payload."""
        mock_request.return_value = make_response(201, payload=REPO_PAYLOAD)
        client = GitHubClient(self.config)

        repo = client.create_repository(
            'acme', 'sleep', 'Sleep for a while.', 'https://gist.github.com/x'
        )

        assert mock_request.call_args.args == (
            'POST',
            'https://api.github.com/orgs/acme/repos',
        )
        assert mock_request.call_args.kwargs['json'] == {
            'name': 'sleep',
            'description': 'Sleep for a while.',
            'homepage': 'https://gist.github.com/x',
        }
        assert repo.clone_url == 'https://github.com/acme/sleep.git'

    @patch('requests.Session.request')
    def test_create_repository_without_homepage(self, mock_request):
        """Test that an empty homepage is left out."""
        mock_request.return_value = make_response(201, payload=REPO_PAYLOAD)
        client = GitHubClient(self.config)

        client.create_repository('acme', 'sleep', '', None)

        assert 'homepage' not in mock_request.call_args.kwargs['json']


class TestErrorMapping:
    """Test HTTP status to exception mapping."""

    def setup_method(self):
        """Set up test fixtures."""
        self.client = GitHubClient(GitHubConfig(token='test-token'))

    @pytest.mark.parametrize(
        'status, error_class',
        [
            (401, GitHubAuthenticationError),
            (403, GitHubPermissionError),
            (404, GitHubNotFoundError),
            (422, GitHubValidationError),
            (500, GitHubAPIError),
        ],
    )
    def test_status_mapping(self, status, error_class):
        """Test that each status maps to its error type."""
        response = make_response(status, payload={'message': 'nope'})

        with patch('requests.Session.request', return_value=response):
            with pytest.raises(error_class) as exc_info:
                self.client.get('/gists')

        assert exc_info.value.status_code == status

    def test_error_message_from_body(self):
        """Test that the API message is surfaced."""
        response = make_response(422, payload={'message': 'name already exists'})

        with patch('requests.Session.request', return_value=response):
            with pytest.raises(GitHubValidationError, match='name already exists'):
                self.client.post('/orgs/acme/repos', data={'name': 'x'})

    def test_rate_limit_retry_after(self):
        """Test rate limit with Retry-After header."""
        response = make_response(429, headers={'Retry-After': '42'})

        with patch('requests.Session.request', return_value=response):
            with pytest.raises(GitHubRateLimitError) as exc_info:
                self.client.get('/gists')

        assert exc_info.value.retry_after == 42

    def test_rate_limit_exhausted_quota(self):
        """Test that a 403 with no remaining quota is a rate limit."""
        reset = str(int(time.time()) + 30)
        response = make_response(
            403,
            headers={'X-RateLimit-Remaining': '0', 'X-RateLimit-Reset': reset},
        )

        with patch('requests.Session.request', return_value=response):
            with pytest.raises(GitHubRateLimitError) as exc_info:
                self.client.get('/gists')

        assert 0 < exc_info.value.retry_after <= 30

    def test_rate_limit_default(self):
        """Test the default back-off without headers."""
        response = make_response(429)

        with patch('requests.Session.request', return_value=response):
            with pytest.raises(GitHubRateLimitError) as exc_info:
                self.client.get('/gists')

        assert exc_info.value.retry_after == 60

    def test_network_error(self):
        """Test that connection failures become API errors."""
        with patch(
            'requests.Session.request',
            side_effect=requests.ConnectionError('connection refused'),
        ):
            with pytest.raises(GitHubAPIError, match='Network error'):
                self.client.get('/gists')


class TestLifecycle:
    """Test session lifecycle."""

    def test_context_manager(self):
        """Test that leaving the context closes the session."""
        with patch('requests.Session.close') as mock_close:
            with GitHubClient(GitHubConfig(token='test-token')):
                pass

        mock_close.assert_called_once()
