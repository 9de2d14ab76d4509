"""Background execution of blends for interactive front ends.

`BlendRunner` owns one output slot. At most one blend computes at a time:
submitting a new request cancels the previous one at its next level boundary,
waits for it to stop, and only the newest request's outcome is delivered.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Optional

from app.multiband_blending.errors import BlendCancelled
from app.multiband_blending.fusion import BlendResult, multiband_blend
from app.multiband_blending.raster import Raster

logger = logging.getLogger(__name__)

ResultCallback = Callable[[int, BlendResult], None]
ErrorCallback = Callable[[int, BaseException], None]


class BlendRunner:
    """Latest-request-wins runner for `multiband_blend`.

    Callbacks run on the worker thread; GUI callers should hand them over to
    their event loop (e.g. ``root.after(0, ...)``). Staleness is checked just
    before a callback fires, so a request superseded between that check and
    the call can still be delivered once; receivers re-check `is_current` before applying it.
    """

    def __init__(self, on_result: Optional[ResultCallback] = None, on_error: Optional[ErrorCallback] = None) -> None:
        self.on_result = on_result
        self.on_error = on_error
        self._lock = threading.Lock()
        self._req_id = 0
        self._cancel_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    def is_current(self, req_id: int) -> bool:
        with self._lock:
            return req_id == self._req_id

    def is_busy(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def submit(self, image_a: Raster, image_b: Raster, mask: Raster, levels: int, **options: Any) -> int:
        """Start a blend, superseding any unfinished one. Returns the request id."""
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
            self._req_id += 1
            req_id = self._req_id
            cancel_event = threading.Event()
            self._cancel_event = cancel_event
            previous = self._thread

            thread = threading.Thread(
                target=self._run,
                args=(req_id, cancel_event, previous, image_a, image_b, mask, levels, options),
                daemon=True,
            )
            self._thread = thread

        thread.start()
        return req_id

    def cancel(self) -> None:
        """Ask the running blend (if any) to stop; its outcome is dropped."""
        with self._lock:
            if self._cancel_event is not None:
                self._cancel_event.set()
            self._req_id += 1

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the latest submitted blend finishes. Returns False on timeout."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    def _run(
        self,
        req_id: int,
        cancel_event: threading.Event,
        previous: Optional[threading.Thread],
        image_a: Raster,
        image_b: Raster,
        mask: Raster,
        levels: int,
        options: dict,
    ) -> None:
        # Never compute concurrently with the superseded job.
        if previous is not None:
            previous.join()
        if cancel_event.is_set():
            logger.debug("Request %d superseded before start", req_id)
            return

        try:
            result = multiband_blend(image_a, image_b, mask, levels, should_cancel=cancel_event.is_set, **options)
        except BlendCancelled:
            logger.debug("Request %d cancelled", req_id)
            return
        except Exception as exc:
            if self.is_current(req_id) and self.on_error is not None:
                self.on_error(req_id, exc)
            elif not self.is_current(req_id):
                logger.debug("Dropping error of stale request %d: %s", req_id, exc)
            else:
                raise
            return

        if not self.is_current(req_id):
            logger.debug("Dropping result of stale request %d", req_id)
            return
        if self.on_result is not None:
            # May race with a newer submit; see the class docstring.
            self.on_result(req_id, result)
