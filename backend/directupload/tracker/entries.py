from __future__ import annotations

import asyncio
import mimetypes
import uuid
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import AsyncIterator, Callable, Iterator, Union


@dataclass(frozen=True)
class LocalFile:
    """
    Immutable reference to a user-selected file: metadata plus where its bytes live.
    Exactly one of `data` / `path` is set.
    """

    name: str
    size: int
    content_type: str
    data: bytes | None = field(default=None, repr=False)
    path: str | None = None

    @classmethod
    def from_bytes(cls, name: str, data: bytes, content_type: str | None = None) -> "LocalFile":
        return cls(name=name, size=len(data), content_type=content_type or _guess_type(name), data=data)

    @classmethod
    def from_path(cls, path: str | Path, content_type: str | None = None) -> "LocalFile":
        p = Path(path)
        return cls(name=p.name, size=p.stat().st_size, content_type=content_type or _guess_type(p.name), path=str(p))

    async def chunks(self, chunk_size: int) -> AsyncIterator[bytes]:
        if self.data is not None:
            for i in range(0, len(self.data), chunk_size):
                yield self.data[i : i + chunk_size]
            return
        # Disk reads run in a worker thread so large files don't stall the loop.
        f = await asyncio.to_thread(open, self.path or "", "rb")
        try:
            while True:
                chunk = await asyncio.to_thread(f.read, chunk_size)
                if not chunk:
                    break
                yield chunk
        finally:
            f.close()


def _guess_type(name: str) -> str:
    return mimetypes.guess_type(name)[0] or "application/octet-stream"


# Lifecycle states. Each variant carries only what is meaningful in that state.


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class RequestingCredential:
    pass


@dataclass(frozen=True)
class Transferring:
    storage_key: str
    progress: int = 0


@dataclass(frozen=True)
class Succeeded:
    storage_key: str


@dataclass(frozen=True)
class Failed:
    storage_key: str | None = None
    progress: int = 0


@dataclass(frozen=True)
class Deleting:
    storage_key: str | None = None
    progress: int = 0
    failed: bool = False


EntryState = Union[Idle, RequestingCredential, Transferring, Succeeded, Failed, Deleting]

UPLOAD_STATES = (RequestingCredential, Transferring)

_STATUS = {
    Idle: "idle",
    RequestingCredential: "requesting_credential",
    Transferring: "transferring",
    Succeeded: "succeeded",
    Failed: "failed",
    Deleting: "deleting",
}


def new_entry_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class PreviewHandle:
    url: str


@dataclass(frozen=True)
class FileEntry:
    id: str
    file: LocalFile
    state: EntryState = field(default_factory=Idle)
    preview: PreviewHandle | None = None

    @property
    def status(self) -> str:
        return _STATUS[type(self.state)]

    @property
    def uploading(self) -> bool:
        return isinstance(self.state, UPLOAD_STATES)

    @property
    def is_deleting(self) -> bool:
        return isinstance(self.state, Deleting)

    @property
    def error(self) -> bool:
        s = self.state
        return isinstance(s, Failed) or (isinstance(s, Deleting) and s.failed)

    @property
    def progress(self) -> int:
        s = self.state
        if isinstance(s, Succeeded):
            return 100
        if isinstance(s, (Transferring, Failed, Deleting)):
            return s.progress
        return 0

    @property
    def storage_key(self) -> str | None:
        s = self.state
        if isinstance(s, (Transferring, Succeeded, Failed, Deleting)):
            return s.storage_key
        return None

    def with_state(self, state: EntryState) -> "FileEntry":
        return replace(self, state=state)

    def without_preview(self) -> "FileEntry":
        return replace(self, preview=None)


class EntryCollection:
    """
    Immutable, insertion-ordered snapshot of entries. Every operation returns a
    new collection; the previous one is never touched.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: tuple[FileEntry, ...] = ()):
        self._entries = tuple(entries)

    def __iter__(self) -> Iterator[FileEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"EntryCollection({[e.id for e in self._entries]!r})"

    def get(self, entry_id: str) -> FileEntry | None:
        for e in self._entries:
            if e.id == entry_id:
                return e
        return None

    def extend(self, entries: list[FileEntry]) -> "EntryCollection":
        seen = {e.id for e in self._entries}
        for e in entries:
            if e.id in seen:
                raise ValueError(f"Duplicate entry id: {e.id}")
            seen.add(e.id)
        return EntryCollection(self._entries + tuple(entries))

    def replace(self, entry_id: str, fn: Callable[[FileEntry], FileEntry]) -> "EntryCollection":
        if self.get(entry_id) is None:
            return self
        return EntryCollection(tuple(fn(e) if e.id == entry_id else e for e in self._entries))

    def without(self, entry_id: str) -> "EntryCollection":
        if self.get(entry_id) is None:
            return self
        return EntryCollection(tuple(e for e in self._entries if e.id != entry_id))
