from __future__ import annotations

from directupload.tracker.client import (
    Credential,
    CredentialDenied,
    DeleteFailed,
    TransferFailed,
    UploadApiClient,
    UploadClientError,
)
from directupload.tracker.entries import (
    Deleting,
    EntryCollection,
    EntryState,
    Failed,
    FileEntry,
    Idle,
    LocalFile,
    PreviewHandle,
    RequestingCredential,
    Succeeded,
    Transferring,
)
from directupload.tracker.notify import LogNotifier, Notifier
from directupload.tracker.previews import PreviewRegistry
from directupload.tracker.progress import percent_complete
from directupload.tracker.selection import Selection, SelectionPolicy, validate_selection
from directupload.tracker.tracker import UploadTracker

__all__ = [
    "Credential",
    "CredentialDenied",
    "DeleteFailed",
    "Deleting",
    "EntryCollection",
    "EntryState",
    "Failed",
    "FileEntry",
    "Idle",
    "LocalFile",
    "LogNotifier",
    "Notifier",
    "PreviewHandle",
    "PreviewRegistry",
    "RequestingCredential",
    "Selection",
    "SelectionPolicy",
    "Succeeded",
    "TransferFailed",
    "Transferring",
    "UploadApiClient",
    "UploadClientError",
    "UploadTracker",
    "percent_complete",
    "validate_selection",
]
