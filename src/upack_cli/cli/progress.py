"""Rich progress bar for package downloads.

:class:`DownloadProgress` is the ``progress_callback`` handed to
:meth:`~upack_cli.infra.feed_client.FeedClient.download_package`.  The
feed client only reports raw byte counters; rendering lives here.

Design
------
* :meth:`__call__` receives dicts with a ``"status"`` key
  (``"downloading"`` or ``"finished"``).
* Shutdown-safe: calls after :meth:`stop` are silently ignored.
"""

from __future__ import annotations

from typing import Any

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TransferSpeedColumn,
)

from upack_cli.cli.console import err_console


class DownloadProgress:
    """Callable progress adapter, usable as a context manager::

        with DownloadProgress() as progress:
            await feed.download_package(pid, version, path, progress_callback=progress)
    """

    def __init__(self) -> None:
        self._progress: Progress = Progress(
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            DownloadColumn(),
            TransferSpeedColumn(),
            console=err_console,
            transient=True,
        )
        self._task_id: TaskID | None = None
        self._started: bool = False

    def __enter__(self) -> DownloadProgress:
        self.start()
        return self

    def __exit__(self, *_args: object) -> None:
        self.stop()

    def start(self) -> None:
        if not self._started:
            self._progress.start()
            self._started = True

    def stop(self) -> None:
        """Stop the display (idempotent)."""
        if self._started:
            self._progress.stop()
            self._started = False

    def __call__(self, event: dict[str, Any]) -> None:
        if not self._started:
            return

        status = event.get("status", "")
        if status == "downloading":
            self._advance(event)
        elif status == "finished":
            self._complete()

    def _advance(self, event: dict[str, Any]) -> None:
        total = _safe_int(event.get("total_bytes"))
        downloaded = _safe_int(event.get("downloaded_bytes")) or 0

        if self._task_id is None:
            self._task_id = self._progress.add_task(
                str(event.get("filename", "Downloading")),
                total=total,
            )
        self._progress.update(self._task_id, total=total, completed=downloaded)

    def _complete(self) -> None:
        if self._task_id is None:
            return
        task = self._progress.tasks[self._task_id]
        if task.total is not None:
            self._progress.update(self._task_id, completed=task.total)


def _safe_int(value: object) -> int | None:
    """Convert *value* to ``int`` or return ``None``."""
    if value is None:
        return None
    try:
        if isinstance(value, (int, float, str)):
            return int(value)
        return None
    except (TypeError, ValueError):
        return None
