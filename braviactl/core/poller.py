"""Fixed-delay recurring poll timer."""

from __future__ import annotations

import logging
import threading

from braviactl.core.session import BraviaSession

LOGGER = logging.getLogger(__name__)

POLL_INTERVAL_S = 30.0
START_UP_DELAY_S = 5.0


class Poller:
    """Run ``session.poll()`` every ``interval_s`` seconds on a daemon thread.

    The delay is measured from the end of one tick to the start of the next,
    so ticks never overlap and a failed tick does not change the schedule.
    """

    def __init__(
        self,
        session: BraviaSession,
        *,
        interval_s: float = POLL_INTERVAL_S,
        start_delay_s: float = START_UP_DELAY_S,
    ) -> None:
        self.session = session
        self.interval_s = interval_s
        self.start_delay_s = start_delay_s
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self.run_forever, name="braviactl-poller", daemon=True)
        self._thread.start()

    def stop(self, timeout_s: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout_s)
            self._thread = None

    def tick(self) -> None:
        try:
            self.session.poll()
        except Exception:  # pylint: disable=broad-exception-caught
            LOGGER.exception("Poll tick failed unexpectedly")

    def run_forever(self) -> None:
        if self._stop.wait(self.start_delay_s):
            return
        while not self._stop.is_set():
            self.tick()
            if self._stop.wait(self.interval_s):
                return
