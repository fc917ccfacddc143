"""
Tests for executor.py
Logic testing: State Transition, Path coverage, Concurrency
"""
import asyncio
import threading
from collections import Counter
from unittest.mock import MagicMock

import httpx
import pytest

from fetch_resource.errors import RequestConstructionError
from fetch_resource.executor import AsyncExecutor, OneShot
from fetch_resource.types import RequestDescriptor, TransportResponse

from conftest import StubTransport


def make_descriptor(**segments) -> RequestDescriptor:
    return RequestDescriptor(
        method="GET",
        path_template="Accounts/{AccountSid}/Applications.json",
        url_segments=segments or {"AccountSid": "AC1"},
    )


class TestOneShot:
    """Tests for OneShot wrapper."""

    def test_fires_once(self):
        callback = MagicMock()
        once = OneShot(callback)
        response = TransportResponse(status_code=200)

        assert once(response) is True
        assert once(response) is False
        callback.assert_called_once_with(response)
        assert once.fired is True

    # Error Path: callback exception is logged, not raised
    def test_swallows_callback_error(self):
        once = OneShot(MagicMock(side_effect=ValueError("boom")))
        assert once(TransportResponse(status_code=200)) is True


class TestAsyncExecutor:
    """Tests for AsyncExecutor class."""

    # Happy Path: response delivered to continuation and future
    def test_execute_async_delivers_response(self, executor):
        transport = StubTransport(lambda d: TransportResponse(status_code=200, body=b"{}"))
        received = []

        future = executor.execute_async(make_descriptor(), transport, received.append)
        response = future.result(timeout=5)

        assert response.status_code == 200
        assert received == [response]
        assert len(transport.sent) == 1

    # Path: caller is not blocked by transport latency
    def test_returns_before_transport_completes(self, executor):
        release = threading.Event()

        class BlockingTransport(StubTransport):
            async def send(self, descriptor):
                while not release.is_set():
                    await asyncio.sleep(0.01)
                return TransportResponse(status_code=200)

        future = executor.execute_async(make_descriptor(), BlockingTransport())
        assert future.done() is False
        assert executor.in_flight == 1

        release.set()
        assert future.result(timeout=5).status_code == 200

    # Path: continuation runs on the executor thread, not the caller's
    def test_continuation_runs_on_executor_thread(self, executor):
        threads = []
        future = executor.execute_async(
            make_descriptor(),
            StubTransport(lambda d: TransportResponse(status_code=200)),
            lambda response: threads.append(threading.current_thread()),
        )
        future.result(timeout=5)
        assert threads and threads[0] is not threading.current_thread()

    # Error Path: transport raises
    def test_transport_exception_becomes_failed_response(self, executor):
        cause = httpx.ConnectError("connection refused")
        received = []

        future = executor.execute_async(make_descriptor(), StubTransport(lambda d: cause), received.append)
        response = future.result(timeout=5)

        assert response.failed is True
        assert response.error is cause
        assert received == [response]

    # Error Path: continuation raises, future still resolves
    def test_continuation_error_does_not_break_future(self, executor):
        future = executor.execute_async(
            make_descriptor(),
            StubTransport(lambda d: TransportResponse(status_code=200)),
            MagicMock(side_effect=RuntimeError("callback bug")),
        )
        assert future.result(timeout=5).status_code == 200

    # Error Path: incomplete descriptor never reaches the transport
    def test_incomplete_descriptor_fails_fast(self, executor):
        transport = StubTransport()
        callback = MagicMock()
        descriptor = RequestDescriptor(method="GET", path_template="Accounts/{AccountSid}.json")

        with pytest.raises(RequestConstructionError):
            executor.execute_async(descriptor, transport, callback)

        assert transport.sent == []
        callback.assert_not_called()

    # State: closed executor rejects work
    def test_closed_executor_rejects(self):
        executor = AsyncExecutor()
        executor.close()
        assert executor.closed is True
        with pytest.raises(RuntimeError, match="Executor has been closed"):
            executor.execute_async(make_descriptor(), StubTransport())

    def test_close_is_idempotent(self):
        executor = AsyncExecutor()
        executor.close()
        executor.close()

    # State: close drains in-flight calls before stopping
    def test_close_waits_for_in_flight(self):
        executor = AsyncExecutor()
        received = []
        transport = StubTransport(
            lambda d: TransportResponse(status_code=200), min_latency=0.05, max_latency=0.1
        )
        futures = [executor.execute_async(make_descriptor(), transport, received.append) for _ in range(5)]

        executor.close(wait=True)

        assert all(f.done() for f in futures)
        assert len(received) == 5

    # State: close without waiting settles every pending call once
    def test_close_without_wait_settles_pending(self):
        executor = AsyncExecutor()
        received = []
        transport = StubTransport(
            lambda d: TransportResponse(status_code=200), min_latency=0.3, max_latency=0.3
        )
        future = executor.execute_async(make_descriptor(), transport, received.append)

        executor.close(wait=False)

        response = future.result(timeout=1)
        assert response.failed is True
        assert isinstance(response.error, RuntimeError)
        assert received == [response]
        assert executor.in_flight == 0

    # Boundary: drain timeout elapses before the call completes
    def test_close_after_drain_timeout_settles_pending(self):
        executor = AsyncExecutor()
        callback = MagicMock()
        transport = StubTransport(
            lambda d: TransportResponse(status_code=200), min_latency=0.5, max_latency=0.5
        )
        futures = [executor.execute_async(make_descriptor(), transport, callback) for _ in range(3)]

        executor.close(wait=True, timeout=0.05)

        responses = [future.result(timeout=1) for future in futures]
        assert all(isinstance(response.error, RuntimeError) for response in responses)
        assert callback.call_count == 3

    # State: supplied loop, close while a call is pending
    @pytest.mark.asyncio
    async def test_close_on_supplied_loop_settles_pending(self):
        executor = AsyncExecutor(loop=asyncio.get_running_loop())
        received = []
        transport = StubTransport(
            lambda d: TransportResponse(status_code=200), min_latency=0.2, max_latency=0.2
        )
        future = executor.execute_async(make_descriptor(), transport, received.append)
        await asyncio.sleep(0)

        executor.close()

        response = await asyncio.wrap_future(future)
        assert isinstance(response.error, RuntimeError)
        await asyncio.sleep(0.3)
        assert received == [response]

    def test_drain_returns_true_when_idle(self, executor):
        assert executor.drain() is True

    def test_run_executes_on_loop(self, executor):
        async def which_loop():
            return asyncio.get_running_loop()

        assert executor.run(which_loop(), timeout=5) is executor.loop

    def test_context_manager(self):
        with AsyncExecutor() as executor:
            future = executor.execute_async(
                make_descriptor(), StubTransport(lambda d: TransportResponse(status_code=204))
            )
            assert future.result(timeout=5).status_code == 204
        assert executor.closed is True

    # Path: caller-supplied running loop
    @pytest.mark.asyncio
    async def test_uses_supplied_loop(self):
        loop = asyncio.get_running_loop()
        executor = AsyncExecutor(loop=loop)
        received = []

        future = executor.execute_async(
            make_descriptor(),
            StubTransport(lambda d: TransportResponse(status_code=200)),
            received.append,
        )
        response = await asyncio.wrap_future(future)

        assert response.status_code == 200
        assert len(received) == 1
        executor.close()
        assert loop.is_running()


class TestConcurrency:
    """Concurrent dispatch against a randomized-latency transport."""

    @pytest.mark.parametrize("count", [1, 25, 100])
    def test_every_continuation_fires_exactly_once(self, executor, count):
        transport = StubTransport(
            lambda d: TransportResponse(status_code=200, body=d.parameters["Index"].encode()),
            min_latency=0.0,
            max_latency=0.03,
        )
        calls = Counter()
        lock = threading.Lock()

        def on_complete(response):
            with lock:
                calls[response.body.decode()] += 1

        futures = []
        for index in range(count):
            descriptor = make_descriptor()
            descriptor.parameters["Index"] = str(index)
            futures.append(executor.execute_async(descriptor, transport, on_complete))

        for future in futures:
            future.result(timeout=10)

        assert executor.drain(timeout=5) is True
        assert len(calls) == count
        assert set(calls.values()) == {1}

    def test_issue_from_many_threads(self, executor):
        transport = StubTransport(
            lambda d: TransportResponse(status_code=200), max_latency=0.01
        )
        received = []
        lock = threading.Lock()

        def on_complete(response):
            with lock:
                received.append(response)

        futures = []
        futures_lock = threading.Lock()

        def issue():
            for _ in range(10):
                future = executor.execute_async(make_descriptor(), transport, on_complete)
                with futures_lock:
                    futures.append(future)

        threads = [threading.Thread(target=issue) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        for future in futures:
            future.result(timeout=10)

        assert len(received) == 80
