from __future__ import annotations

from typing import Protocol


class ObjectStorage(Protocol):
    bucket: str

    def presign_put(self, key: str, content_type: str, content_length: int, expires_in: int) -> str: ...
    def delete(self, key: str) -> None: ...
