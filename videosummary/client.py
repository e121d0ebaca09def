from __future__ import annotations

import asyncio
from typing import Any, Optional, Union

import httpx
from pydantic import ValidationError

from videosummary.core.config import ClientSettings, get_settings
from videosummary.core.logging import get_logger
from videosummary.errors import (
    MissingInputError,
    ProtocolViolationError,
    UnsupportedSourceError,
    VideoSummaryError,
)
from videosummary.services.http import ServiceTransport
from videosummary.services.poller import ResolutionKind, Sleep, file_record, require_file_id, resolve
from videosummary.services.results import project
from videosummary.services.submit import Operation, build_job_request, submit_job
from videosummary.services.upload import negotiate_upload
from videosummary.sources import SourceKind, classify
from videosummary.types import FileList, FileRecord, JobAccepted, JobResult, Result


logger = get_logger(__name__)


JobOutcome = Union[JobResult, JobAccepted]


class VideoSummaryClient:
    """Async client for the VideoSummary API.

    Every public operation returns a :class:`Result`; SDK errors are carried
    in ``Result.error`` instead of being raised. Cancelling the calling task
    aborts whatever request or poll wait is in flight.

    Example::

        async with VideoSummaryClient("sk-...") as client:
            result = await client.summarize("https://example.com/talk.mp4")
            print(result.unwrap().summary)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        *,
        settings: Optional[ClientSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        settings = settings or get_settings()
        overrides = {}
        if api_key:
            overrides["api_key"] = api_key
        if base_url:
            overrides["base_url"] = base_url.rstrip("/")
        self.settings = settings.model_copy(update=overrides) if overrides else settings
        if not self.settings.api_key:
            raise MissingInputError("api key is required")

        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(timeout=self.settings.request_timeout_seconds)
        self._transport = ServiceTransport(self.settings.api_key, self.settings.base_url, self._client)
        self._sleep = sleep

    @property
    def base_url(self) -> str:
        return self._transport.base_url

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "VideoSummaryClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def transcribe(self, source: Any, id: Optional[str] = None, callback_url: Optional[str] = None) -> Result[JobOutcome]:
        """Transcribe a video. Resolves to ``TranscriptResult``."""
        return await self._run(Operation.TRANSCRIBE, source, id, callback_url)

    async def chapter(self, source: Any, id: Optional[str] = None, callback_url: Optional[str] = None) -> Result[JobOutcome]:
        """Split a video into chapters. Resolves to ``ChapterResult``."""
        return await self._run(Operation.CHAPTER, source, id, callback_url)

    async def summarize(self, source: Any, id: Optional[str] = None, callback_url: Optional[str] = None) -> Result[JobOutcome]:
        """Summarize a video. Resolves to ``SummaryResult``."""
        return await self._run(Operation.SUMMARIZE, source, id, callback_url)

    async def summarize_and_chapter(self, source: Any, id: Optional[str] = None, callback_url: Optional[str] = None) -> Result[JobOutcome]:
        """Summarize and chapter in one job. Resolves to ``SummaryChapterResult``."""
        return await self._run(Operation.SUMMARIZE_AND_CHAPTER, source, id, callback_url)

    async def get_files(self, limit: int = 10, offset: int = 0) -> Result[FileList]:
        try:
            body = await self._transport.get_json("/v1/auto/files", params={"limit": limit, "offset": offset})
            if not isinstance(body, dict):
                raise ProtocolViolationError("file list response is not an object")
            try:
                return Result.success(FileList.model_validate(body))
            except ValidationError as e:
                raise ProtocolViolationError(f"malformed file list: {e}")
        except VideoSummaryError as e:
            return Result.failure(e)

    async def get_file(self, file_id: str) -> Result[FileRecord]:
        if not file_id:
            return Result.failure(MissingInputError("file id is required"))
        try:
            body = await self._transport.get_json(f"/v1/auto/file/{file_id}")
            return Result.success(file_record(body))
        except VideoSummaryError as e:
            return Result.failure(e)

    async def _run(self, operation: Operation, source: Any, id: Optional[str], callback_url: Optional[str]) -> Result[JobOutcome]:
        try:
            outcome = await self._run_job(operation, source, id, callback_url)
        except VideoSummaryError as e:
            logger.warning(
                "operation failed",
                extra={"component": "client", "operation": operation.value, "error_type": type(e).__name__, "error": e.message},
            )
            return Result.failure(e)
        return Result.success(outcome)

    async def _run_job(self, operation: Operation, source: Any, id: Optional[str], callback_url: Optional[str]) -> JobOutcome:
        if not source:
            raise MissingInputError("url is required")

        classified = classify(source)
        if classified.kind is SourceKind.URL:
            request = build_job_request(operation, classified.value, id=id, callback=callback_url)
        elif classified.kind is SourceKind.LOCAL_PATH:
            public_url = await negotiate_upload(
                self._transport,
                classified.value,
                chunk_size=self.settings.upload_chunk_size,
                timeout=self.settings.upload_timeout_seconds,
            )
            request = build_job_request(operation, public_url, uploaded=True, id=id, callback=callback_url)
        elif classified.kind is SourceKind.FILE_HANDLE:
            raise UnsupportedSourceError("file handles not supported")
        else:
            raise UnsupportedSourceError(f"unknown source kind: {classified.kind}")

        submission = await submit_job(self._transport, operation, request)
        resolution = await resolve(
            self._transport,
            submission,
            interval=self.settings.poll_interval_seconds,
            max_attempts=self.settings.max_poll_attempts,
            sleep=self._sleep,
        )
        if resolution.kind is ResolutionKind.ASYNC_ACCEPTED:
            return JobAccepted(
                file_id=require_file_id(resolution.file),
                callback=resolution.file.callback,
                response=resolution.response,
            )
        return await project(self._transport, operation, resolution.file)
