from __future__ import annotations

from typing import Any, Optional

from videosummary.core.logging import get_logger
from videosummary.services.http import ServiceTransport
from videosummary.services.poller import require_file_id
from videosummary.services.submit import Operation
from videosummary.types import (
    ChapterResult,
    FileRecord,
    JobResult,
    SummaryChapterResult,
    SummaryResult,
    TranscriptResult,
)


logger = get_logger(__name__)


async def fetch_transcript(transport: ServiceTransport, record: FileRecord) -> Optional[Any]:
    # The transcript link is pre-signed; no bearer token
    if not record.transcript:
        return None
    transcript = await transport.fetch_artifact(record.transcript)
    logger.info("transcript fetched", extra={"component": "results", "file_id": record.id})
    return transcript


async def project(transport: ServiceTransport, operation: Operation, record: FileRecord) -> JobResult:
    file_id = require_file_id(record)
    transcript = await fetch_transcript(transport, record)
    if operation is Operation.TRANSCRIBE:
        return TranscriptResult(transcript=transcript, file_id=file_id)
    if operation is Operation.CHAPTER:
        return ChapterResult(transcript=transcript, chapters=record.chaptering, file_id=file_id)
    if operation is Operation.SUMMARIZE:
        return SummaryResult(transcript=transcript, summary=record.final_summary, file_id=file_id)
    if operation is Operation.SUMMARIZE_AND_CHAPTER:
        return SummaryChapterResult(
            transcript=transcript,
            chapters=record.chaptering,
            summary=record.final_summary,
            file_id=file_id,
        )
    raise ValueError(f"unknown operation: {operation}")
