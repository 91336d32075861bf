from __future__ import annotations

import uuid

from directupload.tracker.entries import LocalFile, PreviewHandle


class PreviewRegistry:
    """
    Issues revocable local handles to a file's bytes (thumbnails). Each handle
    must be revoked exactly once; a second revoke is a bug and raises.
    """

    def __init__(self) -> None:
        self._live: dict[str, LocalFile] = {}

    @property
    def active(self) -> int:
        return len(self._live)

    def create(self, file: LocalFile) -> PreviewHandle:
        url = f"preview:{uuid.uuid4()}"
        self._live[url] = file
        return PreviewHandle(url=url)

    def resolve(self, url: str) -> LocalFile | None:
        return self._live.get(url)

    def revoke(self, handle: PreviewHandle) -> None:
        if self._live.pop(handle.url, None) is None:
            raise ValueError(f"Preview handle already released: {handle.url}")
