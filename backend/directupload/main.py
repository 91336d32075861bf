from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.concurrency import run_in_threadpool

from directupload.config import get_settings
from directupload.deps import get_object_storage, parse_body
from directupload.middleware.logging_filter import install_request_id_filter
from directupload.middleware.request_id import RequestIdMiddleware, request_id_var
from directupload.schemas import (
    DeleteObjectRequest,
    DeleteObjectResponse,
    UploadCredentialRequest,
    UploadCredentialResponse,
)
from directupload.services.credentials import issue_upload_credential
from directupload.services.deletion import delete_object
from directupload.storage import ObjectStorage


settings = get_settings()
log = install_request_id_filter(logging.getLogger("directupload"))

app = FastAPI(title="Direct Upload API", version="0.1.0")

app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/upload-credential", response_model=UploadCredentialResponse)
async def upload_credential(request: Request, storage: ObjectStorage = Depends(get_object_storage)):
    req = await parse_body(request, UploadCredentialRequest, "Invalid request body")
    try:
        out = await run_in_threadpool(
            issue_upload_credential, storage, req, expires_in=int(settings.upload_url_expires_s)
        )
    except Exception as e:
        log.exception("request_id=%s credential_failed filename=%s", request_id_var.get() or "-", req.filename)
        raise HTTPException(status_code=500, detail="Failed to generate upload URL") from e

    log.info(
        "request_id=%s credential_issued key=%s content_type=%s size=%s",
        request_id_var.get() or "-",
        out.key,
        req.content_type,
        req.size,
    )
    return out


@app.delete("/object", response_model=DeleteObjectResponse)
async def remove_object(request: Request, storage: ObjectStorage = Depends(get_object_storage)):
    req = await parse_body(request, DeleteObjectRequest, "Missing or invalid object key.")
    try:
        out = await run_in_threadpool(delete_object, storage, req.key)
    except Exception as e:
        log.exception("request_id=%s delete_failed key=%s", request_id_var.get() or "-", req.key)
        raise HTTPException(status_code=500, detail="Failed to delete file.") from e

    log.info("request_id=%s object_deleted key=%s", request_id_var.get() or "-", req.key)
    return out
