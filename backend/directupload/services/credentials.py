from __future__ import annotations

import uuid

from directupload.schemas import UploadCredentialRequest, UploadCredentialResponse
from directupload.storage.base import ObjectStorage


def storage_key_for(filename: str) -> str:
    # uuid prefix keeps keys unique; no collision retry
    return f"{uuid.uuid4()}-{filename}"


def issue_upload_credential(
    storage: ObjectStorage, req: UploadCredentialRequest, expires_in: int
) -> UploadCredentialResponse:
    """
    Signs a single PUT for a fresh key, bound to the declared content type and length.
    Side-effect free: nothing is written to the bucket until the browser PUTs.
    """
    key = storage_key_for(req.filename)
    signed_url = storage.presign_put(key, req.content_type, req.size, expires_in)
    return UploadCredentialResponse(signed_url=signed_url, key=key)
