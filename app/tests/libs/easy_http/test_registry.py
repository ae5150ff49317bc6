import threading
import time

from libs.easy_http.registry import HookRegistry, Middlewares, RWLock


class TestRWLock:
    def test_readers_share(self):
        lock = RWLock()
        lock.acquire_read()
        acquired = threading.Event()

        def reader():
            with lock.read_locked():
                acquired.set()

        thread = threading.Thread(target=reader)
        thread.start()
        assert acquired.wait(1)
        thread.join()
        lock.release_read()

    def test_writer_waits_for_readers(self):
        lock = RWLock()
        lock.acquire_read()
        written = threading.Event()

        def writer():
            with lock.write_locked():
                written.set()

        thread = threading.Thread(target=writer)
        thread.start()
        time.sleep(0.05)
        assert not written.is_set()
        lock.release_read()
        assert written.wait(1)
        thread.join()

    def test_waiting_writer_blocks_new_readers(self):
        lock = RWLock()
        lock.acquire_read()
        order = []

        def writer():
            with lock.write_locked():
                order.append("writer")

        def reader():
            with lock.read_locked():
                order.append("reader")

        writer_thread = threading.Thread(target=writer)
        writer_thread.start()
        time.sleep(0.05)
        reader_thread = threading.Thread(target=reader)
        reader_thread.start()
        time.sleep(0.05)
        assert order == []
        lock.release_read()
        writer_thread.join(1)
        reader_thread.join(1)
        assert order == ["writer", "reader"]


class TestHookRegistry:
    def test_snapshot_is_immutable_copy(self):
        registry = HookRegistry()
        registry.register("a")
        snapshot = registry.snapshot()
        registry.register("b")
        assert snapshot == ("a",)
        assert registry.snapshot() == ("a", "b")
        assert len(registry) == 2


class TestMiddlewares:
    def test_pre_request_lists_share_a_lock(self):
        middlewares = Middlewares()
        assert middlewares.user_request_hooks.lock is middlewares.builtin_request_hooks.lock
        assert middlewares.response_hooks.lock is not middlewares.user_request_hooks.lock

    def test_snapshot_order(self):
        middlewares = Middlewares()
        middlewares.builtin_request_hooks.register("builtin")
        middlewares.user_request_hooks.register("user")
        middlewares.response_hooks.register("post")
        assert middlewares.snapshot() == (("user",), ("builtin",), ("post",))
