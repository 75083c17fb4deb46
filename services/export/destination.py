"""
Export Destination Selection
A one-shot request for an output folder that may be cancelled
"""

from concurrent.futures import CancelledError, Future, InvalidStateError
from pathlib import Path
from typing import Optional, Union

import structlog

logger = structlog.get_logger()


class DestinationRequest:
    """
    Single-resolution handle for a folder chosen elsewhere (dialog, prompt, API).

    The first call to resolve() or cancel() wins; later calls are ignored.
    wait() blocks until then and returns the folder, or None on cancellation.
    """

    def __init__(self):
        self._future: Future = Future()

    @property
    def done(self) -> bool:
        return self._future.done()

    def resolve(self, path: Optional[Union[str, Path]]) -> bool:
        """Provide the folder; None is treated as a cancellation"""
        if path is None:
            return self.cancel()
        try:
            self._future.set_result(Path(path))
        except InvalidStateError:
            return False
        return True

    def cancel(self) -> bool:
        if self._future.done():
            return False
        cancelled = self._future.cancel()
        if cancelled:
            logger.info("Destination selection cancelled")
        return cancelled

    def wait(self, timeout: Optional[float] = None) -> Optional[Path]:
        """
        Block until resolved.

        Raises:
            concurrent.futures.TimeoutError: if timeout elapses first
        """
        try:
            return self._future.result(timeout=timeout)
        except CancelledError:
            return None
