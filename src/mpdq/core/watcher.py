"""MPD change watcher.

This module provides a Qt-integrated watcher that long-polls MPD with
the idle command and emits a signal whenever the queue or the player
changed, telling the owner to fetch a new snapshot.
"""

from __future__ import annotations

import asyncio
import logging
import threading

from PySide6.QtCore import QObject, Signal

from mpdq.api.mpd.client import MpdClient
from mpdq.api.mpd.protocol import MpdClientError, is_relevant_change

logger = logging.getLogger(__name__)

DEFAULT_JOIN_TIMEOUT = 5.0  # seconds


class MpdWatcher(QObject):
    """Watch MPD for queue and player changes.

    Runs an asyncio event loop in a background thread that issues idle
    commands back to back. The watcher does not reconnect: the first
    error ends it, and the owner decides whether to start a new one.

    Example:
        watcher = MpdWatcher(MpdClient(ServerAddress("localhost")))
        watcher.changed.connect(refresh_snapshot)
        watcher.stopped.connect(lambda err: print(f"Watcher ended: {err}"))
        watcher.start()
    """

    # Emitted when an idle response mentions the queue or the player
    changed = Signal()

    # Emitted when the watch loop ends
    # Parameter: Exception | None (None when stopped on request)
    stopped = Signal(object)

    def __init__(self, client: MpdClient, parent: QObject | None = None) -> None:
        """Initialize the watcher.

        Args:
            client: Client used for the idle commands.
            parent: Optional parent QObject.
        """
        super().__init__(parent)
        self._client = client
        self._thread: threading.Thread | None = None
        # Guards _loop, _task and _stop_requested across the two threads
        self._lock = threading.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._task: asyncio.Task[None] | None = None
        self._stop_requested = False

    @property
    def client(self) -> MpdClient:
        """Return the client used for idle commands."""
        return self._client

    @property
    def is_running(self) -> bool:
        """Return True while the watch thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        """Start watching in a background thread."""
        if self.is_running:
            return
        with self._lock:
            self._stop_requested = False
        self._thread = threading.Thread(target=self._run_loop, daemon=True)
        self._thread.start()
        logger.info("MpdWatcher started for %s", self._client.address)

    def stop(self) -> None:
        """Cancel the pending idle command and wait for the thread to end.

        Safe to call right after start(): a thread that has not created
        its task yet cancels it as soon as it does.
        """
        with self._lock:
            self._stop_requested = True
            if self._loop is not None and self._task is not None:
                self._loop.call_soon_threadsafe(self._task.cancel)

        if self._thread is None:
            return
        self._thread.join(timeout=DEFAULT_JOIN_TIMEOUT)
        if self._thread.is_alive():
            logger.warning("MpdWatcher thread did not stop within %.1fs", DEFAULT_JOIN_TIMEOUT)
            return
        self._thread = None
        logger.info("MpdWatcher stopped")

    def _run_loop(self) -> None:
        """Background thread: run the watch loop on a private event loop."""
        loop = asyncio.new_event_loop()
        try:
            with self._lock:
                task = loop.create_task(self.watch())
                self._loop, self._task = loop, task
                if self._stop_requested:
                    task.cancel()
            loop.run_until_complete(task)
        except asyncio.CancelledError:
            self.stopped.emit(None)
        except Exception as e:  # noqa: BLE001
            logger.exception("Unexpected error in MPD watcher: %s", e)
            self.stopped.emit(e)
        finally:
            with self._lock:
                self._task = None
                self._loop = None
            loop.close()

    async def watch(self) -> None:
        """Issue idle commands until one fails.

        Emits ``changed`` at most once per idle response and ``stopped``
        with the error that ended the loop.
        """
        while True:
            try:
                payload = await self._client.idle()
            except MpdClientError as e:
                logger.warning("MPD watcher stopped: %s", e)
                self.stopped.emit(e)
                return

            if is_relevant_change(payload):
                self.changed.emit()
