import logging
import queue
import threading
from typing import Any, Callable

from database import QueryError, SourceError

log = logging.getLogger(__name__)


class TaskRunner:
    """Run blocking data-source calls off the UI thread.

    Curses is not thread-safe, so tasks never touch UI state: each one posts
    exactly one message to a queue and the UI thread applies messages in order
    via drain(). With synchronous=True the work runs inline at submit time but
    its message still goes through the queue.
    """

    def __init__(self, synchronous: bool = False):
        self.synchronous = synchronous
        self._q: "queue.Queue[Any]" = queue.Queue()
        self._inflight = 0
        self._lock = threading.Lock()

    def submit(
        self,
        label: str,
        work: Callable[[], Any],
        on_ok: Callable[[Any], Any],
        on_err: Callable[[str], Any],
    ) -> None:
        with self._lock:
            self._inflight += 1

        def _run() -> None:
            try:
                result = work()
            except (QueryError, SourceError) as e:
                log.info("%s failed: %s", label, e)
                msg = on_err(str(e))
            except Exception as e:
                log.exception("%s crashed", label)
                msg = on_err(str(e) or e.__class__.__name__)
            else:
                msg = on_ok(result)
            finally:
                with self._lock:
                    self._inflight -= 1
            self._q.put(msg)

        if self.synchronous:
            _run()
        else:
            threading.Thread(target=_run, name=f"task:{label}", daemon=True).start()

    def in_flight(self) -> int:
        with self._lock:
            return self._inflight

    def drain(self, *, max_items: int = 50) -> list[Any]:
        out: list[Any] = []
        for _ in range(max_items):
            try:
                out.append(self._q.get_nowait())
            except queue.Empty:
                break
        return out
