"""
Audio service error taxonomy.

Every failure the pipeline surfaces carries an HTTP status code and a short,
client-safe message. Upstream detail is logged where the error is raised and
never placed in the message.
"""

from typing import Optional

from fastapi import status


class AudioServiceError(Exception):
    """Base class for errors mapped to an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class BadRequest(AudioServiceError):
    """Missing, empty, oversized or malformed request parameters."""

    status_code = status.HTTP_400_BAD_REQUEST


class Forbidden(AudioServiceError):
    """Credential check failed."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFound(AudioServiceError):
    """Requested pre-recorded file is absent."""

    status_code = status.HTTP_404_NOT_FOUND


class UpstreamFailure(AudioServiceError):
    """Dataset query error or synthesizer non-success response."""

    status_code = status.HTTP_502_BAD_GATEWAY
