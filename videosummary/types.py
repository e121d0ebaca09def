from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .errors import VideoSummaryError


T = TypeVar("T")


class FileRecord(BaseModel):
    """Service-side state of a job. Unknown fields are kept as extras."""

    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    url: Optional[str] = None
    complete: Optional[bool] = None
    failed: Optional[bool] = None
    failed_reason: Optional[str] = None
    callback: Optional[str] = None
    chaptering: Optional[Any] = None
    final_summary: Optional[str] = None
    transcript: Optional[str] = None
    video: Optional[str] = None


class FileList(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(default=0, alias="totalCount")
    files: List[FileRecord] = Field(default_factory=list)


class UploadTicket(BaseModel):
    upload_target_url: str
    public_url: str


class JobRequest(BaseModel):
    url: str
    external_url: Optional[bool] = None
    id: Optional[str] = None
    callback: Optional[str] = None
    chapter: Optional[bool] = None
    summarize: Optional[bool] = None

    def to_payload(self) -> Dict[str, Any]:
        # id and callback are always sent, even as null; the flags only when set
        payload: Dict[str, Any] = {"url": self.url}
        if self.external_url is not None:
            payload["external_url"] = self.external_url
        payload["id"] = self.id
        payload["callback"] = self.callback
        if self.chapter is not None:
            payload["chapter"] = self.chapter
        if self.summarize is not None:
            payload["summarize"] = self.summarize
        return payload


class JobResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    transcript: Optional[Any] = None
    file_id: str = Field(alias="fileId")


class TranscriptResult(JobResult):
    pass


class ChapterResult(JobResult):
    chapters: Optional[Any] = None


class SummaryResult(JobResult):
    summary: Optional[str] = None


class SummaryChapterResult(JobResult):
    chapters: Optional[Any] = None
    summary: Optional[str] = None


class JobAccepted(BaseModel):
    """Returned for callback-driven jobs; the service will call ``callback`` itself."""

    model_config = ConfigDict(populate_by_name=True)

    file_id: str = Field(alias="fileId")
    callback: str
    response: Dict[str, Any] = Field(default_factory=dict)


@dataclass(frozen=True)
class Result(Generic[T]):
    value: Optional[T] = None
    error: Optional[VideoSummaryError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: VideoSummaryError) -> "Result[T]":
        return cls(error=error)
