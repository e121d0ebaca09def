from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional

from videosummary.core.logging import get_logger
from videosummary.services.http import ServiceTransport
from videosummary.types import JobRequest


logger = get_logger(__name__)


class Operation(str, Enum):
    TRANSCRIBE = "transcribe"
    CHAPTER = "chapter"
    SUMMARIZE = "summarize"
    SUMMARIZE_AND_CHAPTER = "summarize_and_chapter"

    @property
    def endpoint(self) -> str:
        return "/v1/transcribe" if self is Operation.TRANSCRIBE else "/v1/summary"


# (chapter, summarize); transcribe sends neither flag
OPERATION_FLAGS: Dict[Operation, tuple] = {
    Operation.TRANSCRIBE: (None, None),
    Operation.CHAPTER: (True, False),
    Operation.SUMMARIZE: (False, True),
    Operation.SUMMARIZE_AND_CHAPTER: (True, True),
}


def build_job_request(operation: Operation, url: str, uploaded: bool = False, id: Optional[str] = None, callback: Optional[str] = None) -> JobRequest:
    chapter, summarize = OPERATION_FLAGS[operation]
    return JobRequest(
        url=url,
        external_url=False if uploaded else None,
        id=id,
        callback=callback,
        chapter=chapter,
        summarize=summarize,
    )


async def submit(transport: ServiceTransport, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
    """POST a job and hand back the decoded body untouched."""
    body = await transport.post_json(endpoint, payload)
    file = body.get("file") if isinstance(body, dict) else None
    logger.info(
        "job submitted",
        extra={"component": "submit", "endpoint": endpoint, "file_id": file.get("id") if isinstance(file, dict) else None},
    )
    return body


async def submit_job(transport: ServiceTransport, operation: Operation, request: JobRequest) -> Dict[str, Any]:
    return await submit(transport, operation.endpoint, request.to_payload())
