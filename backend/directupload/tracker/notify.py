from __future__ import annotations

import logging
from typing import Protocol

log = logging.getLogger("directupload.tracker")


class Notifier(Protocol):
    def success(self, message: str) -> None: ...
    def error(self, message: str) -> None: ...


class LogNotifier:
    """Default notifier: user-facing messages go to the log."""

    def success(self, message: str) -> None:
        log.info("notify level=success message=%s", message)

    def error(self, message: str) -> None:
        log.warning("notify level=error message=%s", message)
