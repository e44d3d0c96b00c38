"""
Error types raised by the upstream fetcher.

Everything derives from `ArtifactsError` so callers can catch a single base.
"""


class ArtifactsError(Exception):
    """Base class for all artifact-harvester errors."""


class UpstreamError(ArtifactsError):
    """The GitHub API could not deliver usable data."""

    def __init__(self, message: str, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class TransportError(UpstreamError):
    """Network, connection or timeout failure before a response arrived."""


class DecodeError(UpstreamError):
    """The response body was not the JSON shape we expected."""
