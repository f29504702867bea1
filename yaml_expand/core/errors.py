from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ExpandError(Exception):
    """A coded failure while loading replacements or reading/writing documents.

    `file` is the offending file or directory, `path` the CLI option or
    document location involved. Both are optional.
    """

    code: str
    message: str
    file: Optional[str] = None
    path: Optional[str] = None

    def __str__(self) -> str:
        where = ":".join(part for part in (self.file, self.path) if part) or "<expand>"
        return f"{where}: {self.code}: {self.message}"


class ReplacementLoadError(ExpandError):
    pass


class NoReplacementsFoundError(ReplacementLoadError):
    pass


class DocumentLoadError(ExpandError):
    pass


class DocumentWriteError(ExpandError):
    pass
