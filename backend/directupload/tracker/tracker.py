from __future__ import annotations

import asyncio
import logging
from typing import Callable, Iterable

import httpx

from directupload.config import get_settings
from directupload.tracker.client import UploadApiClient, UploadClientError
from directupload.tracker.entries import (
    Deleting,
    EntryCollection,
    Failed,
    FileEntry,
    Idle,
    LocalFile,
    RequestingCredential,
    Succeeded,
    Transferring,
    new_entry_id,
)
from directupload.tracker.notify import LogNotifier, Notifier
from directupload.tracker.previews import PreviewRegistry
from directupload.tracker.selection import SelectionPolicy, validate_selection

log = logging.getLogger("directupload.tracker")

Listener = Callable[[EntryCollection], None]


class UploadTracker:
    """
    Owns the entry collection and drives every entry through its upload/delete
    lifecycle on the running event loop.

    Each mutation swaps `entries` for a new snapshot derived from the previous
    one; listeners receive every snapshot. Entries are independent: a failure
    only ever touches the entry it belongs to.
    """

    def __init__(
        self,
        api: UploadApiClient,
        policy: SelectionPolicy | None = None,
        notifier: Notifier | None = None,
        previews: PreviewRegistry | None = None,
    ):
        self.api = api
        self.policy = policy or SelectionPolicy()
        self.notifier = notifier or LogNotifier()
        self.previews = previews or PreviewRegistry()
        self._entries = EntryCollection()
        self._listeners: list[Listener] = []
        self._tasks: set[asyncio.Task] = set()
        self._owned_http: httpx.AsyncClient | None = None
        self._closed = False

    @classmethod
    def from_settings(cls, settings=None, **kwargs) -> "UploadTracker":
        settings = settings or get_settings()
        http = httpx.AsyncClient(timeout=float(settings.http_timeout_s))
        api = UploadApiClient(http, settings.api_base_url, chunk_size=int(settings.upload_chunk_size))
        tracker = cls(api, policy=SelectionPolicy.from_settings(settings), **kwargs)
        tracker._owned_http = http
        return tracker

    async def __aenter__(self) -> "UploadTracker":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.aclose()

    @property
    def entries(self) -> EntryCollection:
        return self._entries

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---- operations ----

    def add_files(self, files: Iterable[LocalFile]) -> list[FileEntry]:
        """
        Validates the drop, appends one entry per accepted file and starts its
        upload right away. Rejected batches create nothing.
        """
        if self._closed:
            raise RuntimeError("Tracker is closed")
        loop = asyncio.get_running_loop()
        selection = validate_selection(files, self.policy)
        messages = self.policy.messages()
        for code in selection.codes():
            self.notifier.error(messages[code])
        if not selection.accepted:
            return []

        new = [FileEntry(id=new_entry_id(), file=f, state=Idle(), preview=self.previews.create(f)) for f in selection.accepted]
        self._commit(self._entries.extend(new))
        for entry in new:
            self._spawn(loop, self._upload(entry.id))
        log.info("files_added count=%s rejected=%s", len(new), len(selection.rejections))
        return new

    def remove_file(self, entry_id: str) -> None:
        """
        Releases the preview at once, marks the entry deleting and asks the
        proxy to delete its object. Unknown ids are ignored.
        Needs a running event loop; without one it raises before touching state.
        """
        entry = self._entries.get(entry_id)
        if entry is None or entry.is_deleting:
            return
        loop = asyncio.get_running_loop()
        self._release_preview(entry)
        self._commit(
            self._entries.replace(
                entry_id,
                lambda e: e.without_preview().with_state(
                    Deleting(storage_key=e.storage_key, progress=e.progress, failed=e.error)
                ),
            )
        )
        if entry.uploading:
            log.warning("remove_during_upload id=%s; transfer is not cancelled", entry_id)
        self._spawn(loop, self._delete(entry_id, entry.storage_key))

    async def wait_idle(self) -> None:
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    async def aclose(self) -> None:
        if self._closed:
            return
        self._closed = True
        await self.wait_idle()
        for entry in self._entries:
            self._release_preview(entry)
        self._commit(EntryCollection(tuple(e.without_preview() for e in self._entries)))
        if self._owned_http is not None:
            await self._owned_http.aclose()

    # ---- lifecycle ----

    async def _upload(self, entry_id: str) -> None:
        entry = self._entries.get(entry_id)
        if entry is None or not isinstance(entry.state, Idle):
            return
        self._set_state(entry_id, RequestingCredential())
        file = entry.file

        try:
            credential = await self.api.request_credential(file)
        except (UploadClientError, httpx.HTTPError) as e:
            log.warning("credential_failed id=%s file=%s error=%s", entry_id, file.name, e)
            if self._transition(entry_id, RequestingCredential, Failed(storage_key=None, progress=0)):
                self.notifier.error("Failed to get presigned URL")
            return

        if not self._transition(entry_id, RequestingCredential, Transferring(storage_key=credential.key)):
            return

        def on_progress(pct: int) -> None:
            current = self._entries.get(entry_id)
            if current is None or not isinstance(current.state, Transferring):
                return
            if pct > current.state.progress:
                self._set_state(entry_id, Transferring(storage_key=credential.key, progress=pct))

        try:
            await self.api.put_object(credential.signed_url, file, on_progress=on_progress)
        except (UploadClientError, httpx.HTTPError, OSError) as e:
            log.warning("upload_failed id=%s key=%s error=%s", entry_id, credential.key, e)
            if self._transition(entry_id, Transferring, Failed(storage_key=credential.key, progress=0)):
                self.notifier.error("Something went wrong")
            return

        if self._transition(entry_id, Transferring, Succeeded(storage_key=credential.key)):
            log.info("upload_succeeded id=%s key=%s size=%s", entry_id, credential.key, file.size)
            self.notifier.success("File uploaded successfully")

    async def _delete(self, entry_id: str, storage_key: str | None) -> None:
        try:
            await self.api.delete_object(storage_key)
        except (UploadClientError, httpx.HTTPError) as e:
            log.warning("delete_failed id=%s key=%s error=%s", entry_id, storage_key, e)
            current = self._entries.get(entry_id)
            if current is not None and isinstance(current.state, Deleting):
                self._set_state(entry_id, Failed(storage_key=current.storage_key, progress=current.progress))
            self.notifier.error("Failed to remove file from storage.")
            return

        self._commit(self._entries.without(entry_id))
        log.info("file_removed id=%s key=%s", entry_id, storage_key)
        self.notifier.success("File removed successfully")

    # ---- helpers ----

    def _transition(self, entry_id: str, expected: type, state) -> bool:
        # Drops events for entries that were removed or moved on (e.g. deleting).
        current = self._entries.get(entry_id)
        if current is None or not isinstance(current.state, expected):
            log.info("stale_event id=%s dropped=%s", entry_id, type(state).__name__)
            return False
        self._set_state(entry_id, state)
        return True

    def _set_state(self, entry_id: str, state) -> None:
        self._commit(self._entries.replace(entry_id, lambda e: e.with_state(state)))

    def _commit(self, entries: EntryCollection) -> None:
        if entries is self._entries:
            return
        self._entries = entries
        for listener in list(self._listeners):
            listener(entries)

    def _release_preview(self, entry: FileEntry) -> None:
        if entry.preview is not None:
            self.previews.revoke(entry.preview)

    def _spawn(self, loop: asyncio.AbstractEventLoop, coro) -> None:
        task = loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

