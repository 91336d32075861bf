from __future__ import annotations

from directupload.schemas import DeleteObjectResponse
from directupload.storage.base import ObjectStorage


def delete_object(storage: ObjectStorage, key: str) -> DeleteObjectResponse:
    # Deleting a key that was never written is not an error.
    storage.delete(key)
    return DeleteObjectResponse()
