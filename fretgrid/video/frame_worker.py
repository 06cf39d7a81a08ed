"""
Background worker that processes the newest frame only
"""
import logging
import threading
import numpy as np
from typing import Callable, Optional

from fretgrid.pipeline import FretboardPipeline, GuitarResult

logger = logging.getLogger(__name__)


class FrameWorker(threading.Thread):
    """
    Single processing thread with a one-frame mailbox

    Submitting a frame while another is still waiting replaces it, so the
    pipeline always works on the freshest frame and never queues stale ones.
    """

    def __init__(self,
                 pipeline: FretboardPipeline,
                 on_result: Optional[Callable[[GuitarResult], None]] = None):
        """
        Args:
            pipeline: Pipeline run for every accepted frame
            on_result: Optional callback invoked on the worker thread with
                each result
        """
        super().__init__(daemon=True, name="fretgrid-worker")
        self.pipeline = pipeline
        self.on_result = on_result

        self._condition = threading.Condition()
        self._pending: Optional[np.ndarray] = None
        self._stopped = False
        self._latest: Optional[GuitarResult] = None

        self.frames_processed = 0
        self.frames_dropped = 0

    def submit(self, frame: np.ndarray):
        """Hand a frame to the worker, replacing any frame still waiting"""
        with self._condition:
            if self._pending is not None:
                self.frames_dropped += 1
                logger.debug("Dropping stale frame")
            self._pending = frame
            self._condition.notify()

    def latest(self) -> Optional[GuitarResult]:
        """Most recent result, or None before the first frame finishes"""
        return self._latest

    def run(self):
        while True:
            with self._condition:
                while self._pending is None and not self._stopped:
                    self._condition.wait()
                if self._pending is None:
                    break
                frame = self._pending
                self._pending = None

            try:
                result = self.pipeline.process_frame(frame)
            except Exception:
                logger.exception("Frame processing failed, skipping frame")
                continue

            self._latest = result
            self.frames_processed += 1

            if self.on_result is not None:
                try:
                    self.on_result(result)
                except Exception:
                    logger.exception("Result callback failed")

        logger.info(
            f"Worker stopped: {self.frames_processed} processed, {self.frames_dropped} dropped"
        )

    def stop(self, timeout: Optional[float] = None):
        """
        Finish the waiting frame (if any) and stop the thread

        Args:
            timeout: Seconds to wait for the thread to exit
        """
        with self._condition:
            self._stopped = True
            self._condition.notify()
        if self.is_alive():
            self.join(timeout)
