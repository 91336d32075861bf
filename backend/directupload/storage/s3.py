from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config


class S3Storage:
    """
    S3-compatible bucket (AWS S3, Cloudflare R2, MinIO...).
    Only signs write URLs and deletes keys; object bytes never pass through here.
    """

    def __init__(self, bucket: str, client: Any):
        self.bucket = bucket
        self.client = client

    @classmethod
    def from_settings(cls, settings) -> "S3Storage":
        client = boto3.client(
            "s3",
            endpoint_url=settings.s3_endpoint_url or None,
            aws_access_key_id=settings.aws_access_key_id,
            aws_secret_access_key=settings.aws_secret_access_key,
            region_name=settings.s3_region,
            config=Config(signature_version="s3v4", s3={"addressing_style": settings.s3_addressing_style}),
        )
        return cls(settings.s3_bucket, client)

    def presign_put(self, key: str, content_type: str, content_length: int, expires_in: int) -> str:
        # Signing is local; it does not reserve the key in the bucket.
        return self.client.generate_presigned_url(
            "put_object",
            Params={
                "Bucket": self.bucket,
                "Key": key,
                "ContentType": content_type,
                "ContentLength": int(content_length),
            },
            ExpiresIn=int(expires_in),
        )

    def delete(self, key: str) -> None:
        # S3 answers 204 for missing keys as well.
        self.client.delete_object(Bucket=self.bucket, Key=key)
