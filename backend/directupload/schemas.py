from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator


class UploadCredentialRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    filename: StrictStr
    content_type: StrictStr = Field(alias="contentType")
    size: int = Field(ge=0)

    @field_validator("size", mode="before")
    @classmethod
    def _size_is_number(cls, v: Any) -> Any:
        # JSON numbers only; integral floats (2048.0) coerce, 2048.5 and "2048" don't.
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ValueError("size must be a number")
        return v


class UploadCredentialResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    signed_url: str = Field(alias="signedUrl")
    key: str


class DeleteObjectRequest(BaseModel):
    key: StrictStr = Field(min_length=1)


class DeleteObjectResponse(BaseModel):
    message: str = "File deleted successfully"
