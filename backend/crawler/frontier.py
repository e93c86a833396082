"""Per-site crawl frontier: visited-URL set plus the run's stop signal."""

from __future__ import annotations

import threading


class Frontier:
    """Shared state of one site's crawl within one run.

    ``stop_event`` is shared by every frontier of the run; setting it cancels
    the whole run cooperatively.
    """

    def __init__(self, root_url: str, stop_event: threading.Event) -> None:
        self.root_url = root_url
        self._stop_event = stop_event
        self._visited: set[str] = set()
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return not self._stop_event.is_set()

    def try_visit(self, url: str) -> bool:
        """Mark *url* as visited.  ``False`` means it was already seen."""
        with self._lock:
            if url in self._visited:
                return False
            self._visited.add(url)
            return True

    def pause(self, seconds: float) -> bool:
        """Sleep for *seconds*; return ``False`` early if the run is cancelled."""
        if seconds <= 0:
            return self.is_running
        return not self._stop_event.wait(seconds)

    def __len__(self) -> int:
        with self._lock:
            return len(self._visited)

    def __contains__(self, url: str) -> bool:
        with self._lock:
            return url in self._visited
