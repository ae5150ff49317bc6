import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Generic, TypeVar

from .types import RequestHook, ResponseHook

T = TypeVar("T")


class RWLock:
    """Many readers or a single writer. Writers are preferred once waiting."""

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    def acquire_read(self) -> None:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._cond:
            self._readers -= 1
            if self._readers == 0:
                self._cond.notify_all()

    def acquire_write(self) -> None:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._cond:
            self._writer = False
            self._cond.notify_all()

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()


class HookRegistry(Generic[T]):
    """Ordered hook list. Readers get an immutable snapshot of the whole list."""

    def __init__(self, lock: RWLock | None = None):
        self.lock = lock or RWLock()
        self._hooks: list[T] = []

    def register(self, hook: T) -> None:
        with self.lock.write_locked():
            self._hooks.append(hook)

    def snapshot(self) -> tuple[T, ...]:
        with self.lock.read_locked():
            return self.unlocked_snapshot()

    def unlocked_snapshot(self) -> tuple[T, ...]:
        # caller must hold the read lock
        return tuple(self._hooks)

    def __len__(self) -> int:
        with self.lock.read_locked():
            return len(self._hooks)


class Middlewares:
    """The three hook lists of a Client.

    User-defined and built-in pre-request hooks share one lock so that a single
    read acquisition sees both lists consistently; post-response hooks have
    their own.
    """

    def __init__(self):
        pre_request_lock = RWLock()
        self.user_request_hooks: HookRegistry[RequestHook] = HookRegistry(pre_request_lock)
        self.builtin_request_hooks: HookRegistry[RequestHook] = HookRegistry(pre_request_lock)
        self.response_hooks: HookRegistry[ResponseHook] = HookRegistry()

    def snapshot(
        self,
    ) -> tuple[tuple[RequestHook, ...], tuple[RequestHook, ...], tuple[ResponseHook, ...]]:
        with self.user_request_hooks.lock.read_locked():
            user = self.user_request_hooks.unlocked_snapshot()
            builtin = self.builtin_request_hooks.unlocked_snapshot()
        return user, builtin, self.response_hooks.snapshot()
