"""Error taxonomy for Gist Mirror."""

from typing import Optional


class GistMirrorError(Exception):
    """Base exception for all Gist Mirror errors."""

    pass


class ConfigurationError(GistMirrorError):
    """Configuration is missing or invalid.

    Raised before any remote call is made.
    """

    pass


class RemoteCallError(GistMirrorError):
    """A call to the remote API failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[dict] = None,
    ):
        """Initialize remote call error.

        Args:
            message: Error message
            status_code: HTTP status code
            response_data: Response data from API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class TransportError(GistMirrorError):
    """Content transfer (clone or push) failed."""

    def __init__(self, message: str, command: Optional[str] = None):
        """Initialize transport error.

        Args:
            message: Error message
            command: Masked command line that failed
        """
        super().__init__(message)
        self.command = command


class PreconditionError(GistMirrorError):
    """A matched snippet cannot be migrated as-is."""

    pass
