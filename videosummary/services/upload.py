from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncIterator, BinaryIO, Tuple

from videosummary.core.logging import get_logger, redact_url
from videosummary.errors import (
    HttpError,
    InvalidApiKeyError,
    LocalFileNotFoundError,
    LocalFileReadError,
    MalformedTicketError,
    UploadNegotiationError,
    UploadTransportError,
)
from videosummary.services.http import ServiceTransport, decode_json
from videosummary.types import UploadTicket


logger = get_logger(__name__)


def content_type_hint(path: str) -> str:
    """The service keys uploads by extension, so that is what goes in Content-Type."""
    suffix = Path(path).suffix
    if not suffix or suffix == ".":
        raise UploadNegotiationError(f"cannot determine file extension for {path}")
    return suffix[1:]


async def request_upload_ticket(transport: ServiceTransport, extension: str) -> UploadTicket:
    response = await transport.request("GET", transport.url(f"/v1/auto/upload/{extension}"))
    try:
        body = response.json()
    except ValueError:
        body = None

    error = body.get("error") if isinstance(body, dict) else None
    if error:
        message = str(error)
        if "Authorization" in message:
            logger.error("upload negotiation rejected api key", extra={"component": "upload", "status": response.status_code})
            raise InvalidApiKeyError(message)
        logger.error("upload negotiation failed", extra={"component": "upload", "error": message})
        raise UploadNegotiationError(message)
    if not response.is_success:
        raise HttpError(response.status_code, redact_url(response.request.url))
    if body is None:
        body = decode_json(response)

    upload = body.get("upload") if isinstance(body, dict) else None
    if not isinstance(upload, dict) or not upload.get("upload") or not upload.get("url"):
        raise MalformedTicketError("upload failed: ticket is missing the upload target or public url")
    return UploadTicket(upload_target_url=upload["upload"], public_url=upload["url"])


async def iter_file_chunks(f: BinaryIO, chunk_size: int) -> AsyncIterator[bytes]:
    while True:
        try:
            chunk = f.read(chunk_size)
        except OSError as e:
            raise LocalFileReadError(getattr(f, "name", "upload"), str(e)) from e
        if not chunk:
            break
        yield chunk


def open_local_file(local_path: str) -> Tuple[BinaryIO, int]:
    """Open the file before any request so a missing or unreadable file never spends a ticket."""
    try:
        f = open(local_path, "rb")
    except FileNotFoundError:
        raise LocalFileNotFoundError(local_path)
    except OSError as e:
        raise LocalFileReadError(local_path, str(e)) from e
    try:
        size = os.fstat(f.fileno()).st_size
    except OSError as e:
        f.close()
        raise LocalFileReadError(local_path, str(e)) from e
    return f, size


async def put_file(transport: ServiceTransport, ticket: UploadTicket, f: BinaryIO, size: int, content_type: str, chunk_size: int, timeout: float) -> None:
    headers = {
        "Content-Type": content_type,
        # Signed storage URLs reject chunked transfer encoding
        "Content-Length": str(size),
    }
    response = await transport.request(
        "PUT",
        ticket.upload_target_url,
        authenticated=False,
        headers=headers,
        content=iter_file_chunks(f, chunk_size),
        timeout=timeout,
    )
    if not response.is_success:
        logger.error("upload transfer failed", extra={"component": "upload", "status": response.status_code})
        raise UploadTransportError(response.status_code)


async def negotiate_upload(transport: ServiceTransport, local_path: str, chunk_size: int = 1024 * 1024, timeout: float = 600.0) -> str:
    """Upload a local file through a signed ticket and return its public URL.

    Negotiation and transfer are separate requests; a failure in between
    leaves an unused ticket that the service expires on its own.
    """
    if not Path(local_path).is_file():
        raise LocalFileNotFoundError(local_path)
    extension = content_type_hint(local_path)

    f, size = open_local_file(local_path)
    with f:
        ticket = await request_upload_ticket(transport, extension)
        logger.info("upload ticket issued", extra={"component": "upload", "extension": extension, "size": size})
        await put_file(transport, ticket, f, size, extension, chunk_size, timeout)

    logger.info("upload complete", extra={"component": "upload", "public_url": redact_url(ticket.public_url)})
    return ticket.public_url
