from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from directupload.tracker.entries import LocalFile

TOO_MANY_FILES = "too-many-files"
FILE_TOO_LARGE = "file-too-large"
FILE_INVALID_TYPE = "file-invalid-type"


@dataclass(frozen=True)
class SelectionPolicy:
    max_files: int = 5
    max_file_size: int = 1024 * 1024 * 10
    accept: tuple[str, ...] = ("image/*",)

    @classmethod
    def from_settings(cls, settings) -> "SelectionPolicy":
        return cls(
            max_files=int(settings.max_files_per_drop),
            max_file_size=int(settings.max_file_size_bytes),
            accept=settings.accept(),
        )

    def accepts_type(self, content_type: str) -> bool:
        ct = (content_type or "").split(";", 1)[0].strip().lower()
        if not self.accept:
            return True
        for pattern in self.accept:
            if pattern.endswith("/*"):
                if ct.startswith(pattern[:-1]):
                    return True
            elif ct == pattern:
                return True
        return False

    def messages(self) -> dict[str, str]:
        return {
            TOO_MANY_FILES: f"Too many files selected, max is {self.max_files}",
            FILE_TOO_LARGE: f"File size exceeds {self.max_file_size // (1024 * 1024)}mb limit",
            FILE_INVALID_TYPE: "File type not accepted, only images are allowed",
        }


@dataclass(frozen=True)
class Rejection:
    file: LocalFile
    code: str


@dataclass(frozen=True)
class Selection:
    accepted: list[LocalFile] = field(default_factory=list)
    rejections: list[Rejection] = field(default_factory=list)

    def codes(self) -> list[str]:
        out: list[str] = []
        for r in self.rejections:
            if r.code not in out:
                out.append(r.code)
        return out


def validate_selection(files: Iterable[LocalFile], policy: SelectionPolicy) -> Selection:
    """
    Applies drop-time limits. Too many files rejects the whole batch; size and
    type limits reject individual files.
    """
    files = list(files)
    if len(files) > policy.max_files:
        return Selection(accepted=[], rejections=[Rejection(f, TOO_MANY_FILES) for f in files])

    accepted: list[LocalFile] = []
    rejections: list[Rejection] = []
    for f in files:
        if f.size > policy.max_file_size:
            rejections.append(Rejection(f, FILE_TOO_LARGE))
        elif not policy.accepts_type(f.content_type):
            rejections.append(Rejection(f, FILE_INVALID_TYPE))
        else:
            accepted.append(f)
    return Selection(accepted=accepted, rejections=rejections)
