from __future__ import annotations

from typing import Optional


DASHBOARD_URL = "https://app.videosummary.io/dashboard"


class VideoSummaryError(Exception):
    """Base class for every error the SDK reports."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MissingInputError(VideoSummaryError):
    pass


class UnsupportedSourceError(VideoSummaryError):
    pass


class LocalFileNotFoundError(VideoSummaryError, FileNotFoundError):
    def __init__(self, path: str) -> None:
        super().__init__("file does not exist")
        self.path = path


class LocalFileReadError(VideoSummaryError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"could not read {path}: {reason}")
        self.path = path


class InvalidApiKeyError(VideoSummaryError):
    def __init__(self, detail: Optional[str] = None) -> None:
        super().__init__(f"invalid api key. head over to {DASHBOARD_URL} and double check!")
        self.detail = detail


class UploadNegotiationError(VideoSummaryError):
    pass


class MalformedTicketError(VideoSummaryError):
    pass


class UploadTransportError(VideoSummaryError):
    def __init__(self, status: int) -> None:
        super().__init__(f"upload failed with status {status}")
        self.status = status


class HttpError(VideoSummaryError):
    def __init__(self, status: int, url: Optional[str] = None) -> None:
        super().__init__(f"HTTP error! Status: {status}")
        self.status = status
        self.url = url


class TransportError(VideoSummaryError):
    """The request never produced a response (connect failure, timeout)."""


class ServiceError(VideoSummaryError):
    """The service answered with a top-level ``error`` body."""


class JobFailedError(VideoSummaryError):
    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ProtocolViolationError(VideoSummaryError):
    pass


class PollTimeoutError(VideoSummaryError):
    def __init__(self, file_id: str, attempts: int) -> None:
        super().__init__(f"file {file_id} not complete after {attempts} poll attempts")
        self.file_id = file_id
        self.attempts = attempts
