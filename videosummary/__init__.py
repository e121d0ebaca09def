import logging

from .client import VideoSummaryClient
from .core.config import ClientSettings, load_settings
from .errors import (
    HttpError,
    InvalidApiKeyError,
    JobFailedError,
    LocalFileNotFoundError,
    LocalFileReadError,
    MalformedTicketError,
    MissingInputError,
    PollTimeoutError,
    ProtocolViolationError,
    ServiceError,
    TransportError,
    UnsupportedSourceError,
    UploadNegotiationError,
    UploadTransportError,
    VideoSummaryError,
)
from .sources import Source, SourceKind, classify
from .types import (
    ChapterResult,
    FileList,
    FileRecord,
    JobAccepted,
    Result,
    SummaryChapterResult,
    SummaryResult,
    TranscriptResult,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "VideoSummaryClient",
    "ClientSettings",
    "load_settings",
    "Source",
    "SourceKind",
    "classify",
    "Result",
    "FileRecord",
    "FileList",
    "TranscriptResult",
    "ChapterResult",
    "SummaryResult",
    "SummaryChapterResult",
    "JobAccepted",
    "VideoSummaryError",
    "MissingInputError",
    "UnsupportedSourceError",
    "LocalFileNotFoundError",
    "LocalFileReadError",
    "InvalidApiKeyError",
    "UploadNegotiationError",
    "MalformedTicketError",
    "UploadTransportError",
    "HttpError",
    "TransportError",
    "ServiceError",
    "JobFailedError",
    "ProtocolViolationError",
    "PollTimeoutError",
]
