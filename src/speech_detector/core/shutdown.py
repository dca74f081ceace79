import threading
from typing import Optional, Protocol


class StopSignal(Protocol):
    """Protocol for shutdown signals polled by capture and worker threads."""

    def is_set(self) -> bool: ...


class GracefulShutdown:
    def __init__(self):
        self.stop_event = threading.Event()

    def stop(self):
        self.stop_event.set()

    def is_set(self) -> bool:
        return self.stop_event.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until stop() is called or the timeout expires."""
        return self.stop_event.wait(timeout)
