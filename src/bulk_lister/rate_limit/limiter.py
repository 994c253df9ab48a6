import logging
import time
from contextlib import contextmanager
from typing import Callable, Optional

from bulk_lister.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class BatchPacer:
    """
    Fixed pause between consecutive calls: the first call goes out
    immediately, every later one waits ``interval_sec`` first. Nothing
    waits after the last call.
    """

    def __init__(self, interval_sec: float, sleep: Callable[[float], None] = time.sleep):
        self.interval = interval_sec
        self.sleep = sleep
        self.calls = 0

    @contextmanager
    def __call__(self):
        if self.calls and self.interval > 0:
            logger.debug("Pacing: waiting %.1fs before call #%d", self.interval, self.calls + 1)
            self.sleep(self.interval)
        self.calls += 1
        yield

    def reset(self) -> None:
        """Start a new run: the next call goes out without waiting."""
        self.calls = 0


def get_pacer(
    settings: Optional[Settings] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchPacer:
    cfg = (settings or get_settings()).catalog
    return BatchPacer(cfg.batch_interval_sec, sleep=sleep)
