"""
Start / progress / end reporting for a single filter run.
"""
from __future__ import annotations

import logging
import time
from typing import Optional


logger = logging.getLogger(__name__)


class FilterWatcher:
    """
    Logs when a filter starts and ends, how long it took, and its progress.

    Only usable as a context manager. Pass :meth:`progress` as the ``progress``
    callback of a top-hat function::

        with FilterWatcher("white_top_hat") as watcher:
            result = white_top_hat(image, element, progress=watcher.progress)
    """

    def __init__(self, name: str, log: Optional[logging.Logger] = None) -> None:
        self.name = name
        self.log = log or logger
        self.start_time: Optional[float] = None
        self.elapsed: Optional[float] = None
        self.last_progress = 0.0
        self.steps = 0

    def __enter__(self) -> "FilterWatcher":
        self.start_time = time.perf_counter()
        self.elapsed = None
        self.last_progress = 0.0
        self.steps = 0
        self.log.info("%s: start", self.name)
        return self

    def progress(self, fraction: float) -> None:
        self.steps += 1
        self.last_progress = min(1.0, max(0.0, float(fraction)))
        self.log.debug("%s: progress %.0f%%", self.name, self.last_progress * 100)

    def __exit__(self, exc_type, exc, tb) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        if exc_type is None:
            self.log.info("%s: end, took %.3f seconds", self.name, self.elapsed)
        else:
            self.log.info("%s: aborted after %.3f seconds", self.name, self.elapsed)
