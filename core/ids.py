"""ID generation utility."""

import itertools
import threading
import time

_counter = itertools.count(1)
_lock = threading.Lock()


def gen_id(prefix: str) -> str:
    """Generate a unique, monotonically increasing ID: perm_<epoch-ms>_<n>"""
    with _lock:
        seq = next(_counter)
    return f"{prefix}{int(time.time() * 1000)}_{seq}"

