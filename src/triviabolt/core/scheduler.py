"""Fixed-interval capture scheduler with an in-flight guard.

One timer thread produces ticks; passes run on a single worker thread so the
timer keeps its cadence while OCR is busy. A tick that arrives while a pass
is still running is dropped rather than queued.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as PassTimeoutError
from typing import Callable, Optional

from ..utils.performance import PassTimer

logger = logging.getLogger(__name__)


class CaptureScheduler:
    """Drives ``run_pass`` every ``interval`` seconds, never two at once.

    The in-flight flag is only set by the tick producer and only cleared by
    the pass itself, in a ``finally`` block, so a failing pass cannot leave
    the loop blocked.
    """

    def __init__(
        self,
        run_pass: Callable[[], None],
        interval: float,
        is_busy: Optional[Callable[[], bool]] = None,
    ):
        if interval <= 0:
            raise ValueError("Scheduler interval must be positive")
        self.run_pass = run_pass
        self.interval = interval
        self.is_busy = is_busy
        self.ticks = 0
        self.skipped_ticks = 0
        self.last_pass_duration = 0.0
        self._in_flight = False
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._executor: Optional[ThreadPoolExecutor] = None
        self._future: Optional[Future] = None
        self._pass_thread: Optional[threading.Thread] = None

    @property
    def active(self) -> bool:
        """False once the owning session has been torn down."""
        return not self._stop.is_set()

    @property
    def in_flight(self) -> bool:
        return self._in_flight

    def _should_skip(self) -> bool:
        if not self.active:
            return True
        if self._in_flight or (self.is_busy is not None and self.is_busy()):
            self.skipped_ticks += 1
            return True
        return False

    def _run_guarded(self) -> None:
        self._pass_thread = threading.current_thread()
        try:
            with PassTimer("Capture pass", budget=self.interval) as timer:
                self.run_pass()
            self.last_pass_duration = timer.duration
        except Exception as e:
            logger.error(f"Capture pass failed: {e}")
        finally:
            self._pass_thread = None
            self._in_flight = False

    def on_tick(self) -> bool:
        """Start one pass on the worker thread. Returns False if skipped."""
        if self._should_skip():
            return False
        self.ticks += 1
        self._in_flight = True
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="triviabolt-pass"
            )
        self._future = self._executor.submit(self._run_guarded)
        return True

    def run_pass_now(self) -> bool:
        """Run one pass on the calling thread, under the same guard."""
        if self._should_skip():
            return False
        self.ticks += 1
        self._in_flight = True
        self._run_guarded()
        return True

    def wait_idle(self, timeout: Optional[float] = None) -> bool:
        """Block until the current pass (if any) finishes."""
        future = self._future
        if future is None:
            return True
        try:
            future.result(timeout=timeout)
        except PassTimeoutError:
            return False
        return True

    def _loop(self) -> None:
        logger.debug(f"Scan loop started ({self.interval * 1000:.0f} ms interval)")
        while not self._stop.is_set():
            try:
                self.on_tick()
            except Exception as e:
                logger.error(f"Scan tick failed: {e}")
            self._stop.wait(self.interval)
        logger.debug(
            f"Scan loop stopped after {self.ticks} passes ({self.skipped_ticks} ticks skipped)"
        )

    def start(self) -> None:
        """Start the timer thread."""
        if self._thread and self._thread.is_alive():
            return
        if not self.active:
            raise RuntimeError("Scheduler has been stopped")
        self._thread = threading.Thread(
            target=self._loop, name="triviabolt-scheduler", daemon=True
        )
        self._thread.start()

    def cancel(self) -> None:
        """Stop issuing ticks without waiting for anything."""
        self._stop.set()

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Stop issuing ticks and wait for a running pass to finish.

        Returns False if ``timeout`` expired with the pass still running.
        Called from inside a pass, the pass is not waited for.
        """
        self.cancel()
        current = threading.current_thread()
        if self._thread is not None and self._thread is not current:
            self._thread.join(timeout)
        self._thread = None

        idle = True
        if self._pass_thread is not current:
            idle = self.wait_idle(timeout)
            if not idle:
                logger.warning("Capture pass still running after stop timeout")
        if self._executor is not None:
            self._executor.shutdown(wait=False)
        return idle
