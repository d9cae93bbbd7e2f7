"""GitHub API exceptions."""

from ..exceptions import RemoteCallError


class GitHubAPIError(RemoteCallError):
    """Base exception for GitHub API errors."""

    pass


class GitHubAuthenticationError(GitHubAPIError):
    """Authentication error with GitHub API."""

    pass


class GitHubRateLimitError(GitHubAPIError):
    """Rate limit exceeded error."""

    def __init__(self, message: str, retry_after: float = 60, **kwargs):
        """Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before the next call
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class GitHubNotFoundError(GitHubAPIError):
    """Resource not found error."""

    pass


class GitHubPermissionError(GitHubAPIError):
    """Permission denied error."""

    pass


class GitHubValidationError(GitHubAPIError):
    """Validation error for API requests (HTTP 422)."""

    pass
