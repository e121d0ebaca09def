from __future__ import annotations

import io
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any


class SourceKind(str, Enum):
    URL = "url"
    LOCAL_PATH = "path"
    FILE_HANDLE = "file"


@dataclass(frozen=True)
class Source:
    kind: SourceKind
    value: Any


def classify(value: Any) -> Source:
    """Decide whether ``value`` is a remote URL, an open file handle or a local path.

    Any string containing "http" counts as a URL, matching what the service
    accepts as an external link. Pure: no filesystem or network access.
    """
    if isinstance(value, str) and "http" in value:
        return Source(SourceKind.URL, value)
    if isinstance(value, io.IOBase):
        return Source(SourceKind.FILE_HANDLE, value)
    if isinstance(value, os.PathLike):
        return Source(SourceKind.LOCAL_PATH, os.fspath(value))
    return Source(SourceKind.LOCAL_PATH, value)
