"""Per-student serialization point shared by submissions and the daily batch."""
import threading
from contextlib import contextmanager


class StudentLockRegistry:
    """One lock per student id. Different students never contend."""

    def __init__(self):
        self._guard = threading.Lock()
        self._locks: dict[int, threading.Lock] = {}

    def lock_for(self, student_id: int) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(student_id)
            if lock is None:
                lock = self._locks[student_id] = threading.Lock()
            return lock

    @contextmanager
    def hold(self, student_id: int):
        lock = self.lock_for(student_id)
        with lock:
            yield


student_locks = StudentLockRegistry()
