from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from directupload.deps import get_object_storage
from directupload.main import app


class FakeStorage:
    bucket = "uploads-locale"

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.presigned: list[tuple[str, str, int, int]] = []
        self.deleted: list[str] = []

    def presign_put(self, key: str, content_type: str, content_length: int, expires_in: int) -> str:
        if self.fail:
            raise RuntimeError("signer unavailable")
        self.presigned.append((key, content_type, content_length, expires_in))
        return f"https://bucket/{key}?X-Amz-Expires={expires_in}"

    def delete(self, key: str) -> None:
        if self.fail:
            raise RuntimeError("bucket unavailable")
        self.deleted.append(key)


@pytest.fixture
def storage():
    return FakeStorage()


@pytest.fixture
def client(storage):
    app.dependency_overrides[get_object_storage] = lambda: storage
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"ok": True}


def test_credential_key_prefixes_filename(client, storage):
    res = client.post("/upload-credential", json={"filename": "photo.jpg", "contentType": "image/jpeg", "size": 2_000_000})
    assert res.status_code == 200
    body = res.json()
    assert set(body) == {"signedUrl", "key"}
    assert body["key"] != "photo.jpg"
    assert body["key"].endswith("-photo.jpg")
    assert body["signedUrl"].startswith(f"https://bucket/{body['key']}?")
    assert storage.presigned == [(body["key"], "image/jpeg", 2_000_000, 360)]


def test_credential_keys_are_unique(client):
    payload = {"filename": "a.png", "contentType": "image/png", "size": 10}
    keys = {client.post("/upload-credential", json=payload).json()["key"] for _ in range(5)}
    assert len(keys) == 5


@pytest.mark.parametrize(
    "payload",
    [
        {"contentType": "image/png", "size": 10},
        {"filename": "a.png", "size": 10},
        {"filename": "a.png", "contentType": "image/png"},
        {"filename": 12, "contentType": "image/png", "size": 10},
        {"filename": "a.png", "contentType": "image/png", "size": "10"},
        {"filename": "a.png", "contentType": "image/png", "size": -1},
        {"filename": "a.png", "contentType": "image/png", "size": 10.5},
        {"filename": "a.png", "contentType": "image/png", "size": True},
        [],
    ],
)
def test_credential_rejects_malformed_body(client, storage, payload):
    res = client.post("/upload-credential", json=payload)
    assert res.status_code == 400
    assert res.json()["detail"] == "Invalid request body"
    assert storage.presigned == []


def test_credential_accepts_integral_float_size(client, storage):
    res = client.post("/upload-credential", json={"filename": "a.png", "contentType": "image/png", "size": 2048.0})
    assert res.status_code == 200
    assert storage.presigned[0][2] == 2048


def test_credential_rejects_non_json(client, storage):
    res = client.post("/upload-credential", content=b"not json", headers={"content-type": "application/json"})
    assert res.status_code == 400
    assert storage.presigned == []


def test_credential_signer_failure_is_500(client, storage):
    storage.fail = True
    res = client.post("/upload-credential", json={"filename": "a.png", "contentType": "image/png", "size": 10})
    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to generate upload URL"


def test_delete_unknown_key_succeeds(client, storage):
    res = client.request("DELETE", "/object", json={"key": "never-uploaded.png"})
    assert res.status_code == 200
    assert res.json() == {"message": "File deleted successfully"}
    assert storage.deleted == ["never-uploaded.png"]


@pytest.mark.parametrize("payload", [{}, {"key": None}, {"key": ""}, {"key": 42}])
def test_delete_rejects_missing_or_invalid_key(client, storage, payload):
    res = client.request("DELETE", "/object", json=payload)
    assert res.status_code == 400
    assert res.json()["detail"] == "Missing or invalid object key."
    assert storage.deleted == []


def test_delete_backend_failure_is_500(client, storage):
    storage.fail = True
    res = client.request("DELETE", "/object", json={"key": "abc-photo.jpg"})
    assert res.status_code == 500
    assert res.json()["detail"] == "Failed to delete file."


def test_request_id_is_echoed(client):
    res = client.get("/health", headers={"x-request-id": "rid-123"})
    assert res.headers["x-request-id"] == "rid-123"
    assert client.get("/health").headers["x-request-id"]
