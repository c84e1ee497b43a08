import logging
import threading

log = logging.getLogger(__name__)


class DeferredRecompute:
    """
    At most one pending delayed call; scheduling again replaces it.
    The call's result or exception is handed back to the caller by wait().
    """

    def __init__(self, delay: float):
        self.delay = float(delay)
        self._timer = None
        self._outcome = None  # (result, error) of the last completed call
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive() and not self._timer.finished.is_set()

    def _run(self, fn, args, kwargs):
        try:
            outcome = (fn(*args, **kwargs), None)
        except Exception as e:
            log.warning("deferred recompute failed: %s", e)
            outcome = (None, e)
        with self._lock:
            self._outcome = outcome

    def schedule(self, fn, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._outcome = None
            self._timer = threading.Timer(self.delay, self._run, args=(fn, args, kwargs))
            self._timer.daemon = True
            self._timer.start()
        log.debug("recompute scheduled in %.2fs", self.delay)

    def cancel(self):
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()
            log.debug("pending recompute dropped")

    def wait(self, timeout=None):
        """
        Join the pending call and return its result (None if it was cancelled
        or is still running). An exception raised by the call is re-raised here.
        """
        with self._lock:
            timer = self._timer
        if timer is not None:
            timer.join(timeout)
        with self._lock:
            outcome = self._outcome
        if outcome is None:
            return None
        result, error = outcome
        if error is not None:
            raise error
        return result
