"""Run callables in background threads, restarting them after failures."""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable

logger = logging.getLogger(__name__)


def _run(callback: Callable[..., Any], recover_num: int, args: tuple) -> None:
    while True:
        try:
            callback(*args)
            return
        except Exception as exc:
            logger.exception("Core information is %r", exc)
            if recover_num > 0:
                recover_num -= 1
            if recover_num == -1 or recover_num > 0:
                continue
            return


def go_recover(callback: Callable[..., Any], recover_num: int, *args: Any) -> threading.Thread:
    """Run ``callback(*args)`` in a daemon thread and return the thread.

    On an exception it is logged and the callback restarted while the
    counter allows: -1 means always; otherwise the counter is decremented
    first and the callback restarts only if it is still positive.
    """
    if not callable(callback):
        raise TypeError("not a function")
    thread = threading.Thread(target=_run, args=(callback, recover_num, args), daemon=True)
    thread.start()
    return thread


def go(callback: Callable[..., Any], *args: Any) -> threading.Thread:
    """Run ``callback(*args)`` once in a daemon thread, logging any exception."""
    return go_recover(callback, 0, *args)