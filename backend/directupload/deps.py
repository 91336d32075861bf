from __future__ import annotations

from typing import Any, TypeVar

from fastapi import HTTPException, Request
from pydantic import BaseModel, ValidationError

from directupload.storage import ObjectStorage, get_storage

M = TypeVar("M", bound=BaseModel)


def get_object_storage() -> ObjectStorage:
    return get_storage()


async def parse_body(request: Request, model: type[M], detail: str) -> M:
    """
    Reads and validates a JSON body. Any malformed input (bad JSON, missing
    field, wrong type) becomes a 400 with a static message instead of FastAPI's 422.
    """
    try:
        body: Any = await request.json()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=detail) from e
    try:
        return model.model_validate(body)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=detail) from e
