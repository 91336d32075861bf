from __future__ import annotations

from functools import lru_cache

from directupload.config import get_settings
from directupload.storage.base import ObjectStorage
from directupload.storage.s3 import S3Storage


@lru_cache
def get_storage() -> ObjectStorage:
    return S3Storage.from_settings(get_settings())


__all__ = ["ObjectStorage", "S3Storage", "get_storage"]
