from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional

from pydantic import ValidationError

from videosummary.core.logging import get_logger
from videosummary.errors import JobFailedError, PollTimeoutError, ProtocolViolationError, ServiceError
from videosummary.services.http import ServiceTransport
from videosummary.types import FileRecord


logger = get_logger(__name__)


Sleep = Callable[[float], Awaitable[Any]]


class ResolutionKind(str, Enum):
    ASYNC_ACCEPTED = "async_accepted"
    COMPLETE = "complete"


@dataclass(frozen=True)
class Resolution:
    kind: ResolutionKind
    file: FileRecord
    response: Dict[str, Any]


def file_record(body: Any) -> FileRecord:
    file = body.get("file") if isinstance(body, dict) else None
    if not isinstance(file, dict):
        raise ProtocolViolationError("response has no file object")
    try:
        return FileRecord.model_validate(file)
    except ValidationError as e:
        raise ProtocolViolationError(f"malformed file object: {e}")


def require_file_id(record: FileRecord) -> str:
    if not record.id:
        raise ProtocolViolationError("response file object has no id")
    return record.id


async def poll_for_result(
    transport: ServiceTransport,
    file_id: str,
    interval: float = 3.0,
    max_attempts: Optional[int] = None,
    sleep: Sleep = asyncio.sleep,
) -> Dict[str, Any]:
    """Fetch the file record until the service reports it complete.

    Waits a constant ``interval`` between attempts. A top-level ``error``
    raises ServiceError, a failed job raises JobFailedError. With
    ``max_attempts`` unset this only stops on a terminal state, so bound it
    with asyncio.timeout() if wall-clock matters; cancellation interrupts the
    current request or wait.
    """
    attempts = 0
    while True:
        attempts += 1
        body = await transport.get_json(f"/v1/auto/file/{file_id}", params={"id": file_id})
        if isinstance(body, dict) and body.get("error"):
            logger.error("poll returned error", extra={"component": "poller", "file_id": file_id, "error": body["error"]})
            raise ServiceError(str(body["error"]))

        record = file_record(body)
        if record.failed_reason or record.failed:
            reason = record.failed_reason or "job failed"
            logger.error("job failed", extra={"component": "poller", "file_id": file_id, "reason": reason, "attempts": attempts})
            raise JobFailedError(reason)
        if record.complete:
            logger.info("job complete", extra={"component": "poller", "file_id": file_id, "attempts": attempts})
            return body

        if max_attempts is not None and attempts >= max_attempts:
            raise PollTimeoutError(file_id, attempts)
        logger.debug("job pending", extra={"component": "poller", "file_id": file_id, "attempts": attempts})
        await sleep(interval)


async def resolve(
    transport: ServiceTransport,
    submission: Dict[str, Any],
    interval: float = 3.0,
    max_attempts: Optional[int] = None,
    sleep: Sleep = asyncio.sleep,
) -> Resolution:
    record = file_record(submission)
    file_id = require_file_id(record)
    if record.callback:
        logger.info("callback job accepted", extra={"component": "poller", "file_id": file_id})
        return Resolution(ResolutionKind.ASYNC_ACCEPTED, record, submission)

    body = await poll_for_result(transport, file_id, interval=interval, max_attempts=max_attempts, sleep=sleep)
    return Resolution(ResolutionKind.COMPLETE, file_record(body), body)
