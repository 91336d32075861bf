from __future__ import annotations

from dataclasses import dataclass
from typing import Any, AsyncIterator, Callable

import httpx

from directupload.tracker.entries import LocalFile
from directupload.tracker.progress import percent_complete

UPLOAD_OK_STATUSES = (200, 204)


class UploadClientError(Exception):
    pass


class CredentialDenied(UploadClientError):
    def __init__(self, status_code: int):
        super().__init__(f"Credential request failed with status: {status_code}")
        self.status_code = status_code


class TransferFailed(UploadClientError):
    def __init__(self, status_code: int):
        super().__init__(f"Upload failed with status: {status_code}")
        self.status_code = status_code


class DeleteFailed(UploadClientError):
    def __init__(self, status_code: int):
        super().__init__(f"Delete failed with status: {status_code}")
        self.status_code = status_code


@dataclass(frozen=True)
class Credential:
    signed_url: str
    key: str


class UploadApiClient:
    """
    Talks to the credential issuer and deletion proxy (api_base_url) and PUTs
    file bytes straight to the signed bucket URL.
    """

    def __init__(self, http: httpx.AsyncClient, api_base_url: str, chunk_size: int = 64 * 1024):
        self.http = http
        self.api_base_url = api_base_url.rstrip("/")
        self.chunk_size = int(chunk_size)

    async def request_credential(self, file: LocalFile) -> Credential:
        resp = await self.http.post(
            self.api_base_url + "/upload-credential",
            json={"filename": file.name, "contentType": file.content_type, "size": file.size},
        )
        if resp.status_code != 200:
            raise CredentialDenied(resp.status_code)
        try:
            data: Any = resp.json()
        except ValueError as e:
            raise CredentialDenied(resp.status_code) from e
        if not isinstance(data, dict) or not isinstance(data.get("signedUrl"), str) or not isinstance(data.get("key"), str):
            raise CredentialDenied(resp.status_code)
        return Credential(signed_url=data["signedUrl"], key=data["key"])

    async def put_object(
        self, signed_url: str, file: LocalFile, on_progress: Callable[[int], None] | None = None
    ) -> int:
        """
        Streams the file to the signed URL. `on_progress` receives the whole
        percentage after each chunk is handed to the transport.
        """

        async def body() -> AsyncIterator[bytes]:
            sent = 0
            async for chunk in file.chunks(self.chunk_size):
                yield chunk
                sent += len(chunk)
                pct = percent_complete(sent, file.size)
                if pct is not None and on_progress is not None:
                    on_progress(pct)

        headers = {"Content-Type": file.content_type, "Content-Length": str(file.size)}
        resp = await self.http.put(signed_url, content=body(), headers=headers)
        if resp.status_code not in UPLOAD_OK_STATUSES:
            raise TransferFailed(resp.status_code)
        return resp.status_code

    async def delete_object(self, key: str | None) -> None:
        # A missing key is sent as-is; the proxy rejects it with a 400.
        resp = await self.http.request("DELETE", self.api_base_url + "/object", json={"key": key})
        if not resp.is_success:
            raise DeleteFailed(resp.status_code)
