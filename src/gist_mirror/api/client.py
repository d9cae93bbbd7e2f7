"""GitHub API client implementation."""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urljoin

import requests
from loguru import logger
from pydantic import BaseModel

from .. import __version__
from ..config.config import GitHubConfig
from ..models.repository import RepositoryTarget
from ..models.snippet import Snippet
from .base import SnippetHost
from .exceptions import (
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubValidationError,
)


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


class GitHubClient(SnippetHost):
    """GitHub REST API client for gists and organization repositories."""

    def __init__(self, config: GitHubConfig):
        """Initialize GitHub client.

        Args:
            config: GitHub API configuration
        """
        if not config.token:
            raise GitHubAuthenticationError('No authentication token provided')

        self.config = config
        self.base_url = config.url.rstrip('/')
        self.session = requests.Session()

        self.session.headers.update(
            {
                'Authorization': f'Bearer {config.token}',
                'Accept': 'application/vnd.github+json',
                'X-GitHub-Api-Version': '2022-11-28',
                'User-Agent': f'gist-mirror/{__version__}',
            }
        )

        logger.info(f'Initialized GitHub client for {self.base_url}')

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(self, response: requests.Response) -> APIResponse:
        """Handle API response and convert to standard format.

        Args:
            response: Raw HTTP response

        Returns:
            Standardized API response

        Raises:
            GitHubAPIError: For various API errors
        """
        headers = dict(response.headers)
        status = response.status_code

        if status == 429 or (
            status == 403 and headers.get('X-RateLimit-Remaining') == '0'
        ):
            retry_after = self._retry_after(headers)
            raise GitHubRateLimitError(
                f'Rate limit exceeded. Retry after {retry_after} seconds',
                retry_after=retry_after,
                status_code=status,
            )

        if status == 401:
            raise GitHubAuthenticationError('Authentication failed', status_code=401)

        if status >= 400:
            error_data = None
            try:
                error_data = response.json()
                message = error_data.get('message', f'HTTP {status}')
            except (ValueError, AttributeError):
                message = f'HTTP {status}: {response.text}'

            if status == 403:
                error_class = GitHubPermissionError
            elif status == 404:
                error_class = GitHubNotFoundError
            elif status == 422:
                error_class = GitHubValidationError
            else:
                error_class = GitHubAPIError

            raise error_class(
                f'API request failed: {message}',
                status_code=status,
                response_data=error_data if isinstance(error_data, dict) else None,
            )

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        return APIResponse(
            status_code=status,
            data=data,
            headers=headers,
            success=200 <= status < 300,
        )

    @staticmethod
    def _retry_after(headers: Dict[str, str]) -> int:
        """Seconds to wait from Retry-After or X-RateLimit-Reset, default 60."""
        if headers.get('Retry-After', '').isdigit():
            return int(headers['Retry-After'])

        reset = headers.get('X-RateLimit-Reset', '')
        if reset.isdigit():
            return max(0, int(reset) - int(time.time()))

        return 60

    def _request(self, method: str, endpoint: str, **kwargs) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method
            endpoint: API endpoint
            **kwargs: Additional request arguments

        Returns:
            API response
        """
        url = self._build_url(endpoint)
        kwargs.setdefault('timeout', self.config.timeout)

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f'Network error during {method} request: {e}')
            raise GitHubAPIError(f'Network error: {e}')

        return self._handle_response(response)

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make GET request."""
        return self._request('GET', endpoint, params=params, **kwargs)

    def post(
        self, endpoint: str, data: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make POST request."""
        return self._request('POST', endpoint, json=data, **kwargs)

    def patch(
        self, endpoint: str, data: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make PATCH request."""
        return self._request('PATCH', endpoint, json=data, **kwargs)

    def delete(self, endpoint: str, **kwargs) -> APIResponse:
        """Make DELETE request."""
        return self._request('DELETE', endpoint, **kwargs)

    def list_snippets(self, page: int, per_page: int) -> List[Snippet]:
        """List one page of the authenticated user's gists.

        Args:
            page: Page number, starting at 1
            per_page: Items per page (max 100)

        Returns:
            Summary snippets in API order
        """
        response = self.get('/gists', params={'per_page': per_page, 'page': page})
        return [Snippet.from_api(item) for item in response.data or []]

    def get_snippet(self, snippet_id: str) -> Snippet:
        response = self.get(f'/gists/{quote(snippet_id)}')
        return Snippet.from_api(response.data)

    def create_snippet(
        self, public: bool, description: str, files: Dict[str, str]
    ) -> Snippet:
        """Create a gist.

        Args:
            public: Visibility of the new gist
            description: Gist description
            files: Filename to content mapping

        Returns:
            Created snippet
        """
        payload = {
            'public': public,
            'description': description,
            'files': {name: {'content': content} for name, content in files.items()},
        }
        response = self.post('/gists', data=payload)
        return Snippet.from_api(response.data)

    def update_snippet(self, snippet_id: str, files: Dict[str, str]) -> Snippet:
        payload = {
            'files': {name: {'content': content} for name, content in files.items()}
        }
        response = self.patch(f'/gists/{quote(snippet_id)}', data=payload)
        return Snippet.from_api(response.data)

    def delete_snippet(self, snippet_id: str) -> None:
        self.delete(f'/gists/{quote(snippet_id)}')

    def get_repository(self, org: str, name: str) -> RepositoryTarget:
        """Fetch a repository.

        Raises:
            GitHubNotFoundError: If the repository does not exist
        """
        response = self.get(f'/repos/{quote(org)}/{quote(name)}')
        return RepositoryTarget.from_api(response.data)

    def create_repository(
        self, org: str, name: str, description: str, homepage: Optional[str]
    ) -> RepositoryTarget:
        """Create a repository in an organization.

        Args:
            org: Organization login
            name: Repository name
            description: Repository description
            homepage: Homepage URL, usually the source gist

        Returns:
            Created repository target
        """
        payload = {'name': name, 'description': description}
        if homepage:
            payload['homepage'] = homepage

        response = self.post(f'/orgs/{quote(org)}/repos', data=payload)
        return RepositoryTarget.from_api(response.data)

    def close(self):
        """Close the client session."""
        self.session.close()
        logger.debug('GitHub client session closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
