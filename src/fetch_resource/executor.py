"""
Asynchronous dispatch of request descriptors.

The executor runs transport calls on an asyncio event loop, owned on a
background thread by default, and hands each result to a one-shot
continuation. Callers never block: execute_async returns a
concurrent.futures.Future as soon as the call is scheduled.
"""
import asyncio
import concurrent.futures
import logging
import threading
import time
from typing import Awaitable, Dict, Optional, Tuple, TypeVar

from .types import RawContinuation, RequestDescriptor, Transport, TransportResponse

logger = logging.getLogger("fetch_resource.executor")

T = TypeVar("T")


class OneShot:
    """Wrap a continuation so that it runs at most once."""

    def __init__(self, callback: RawContinuation):
        self._callback = callback
        self._lock = threading.Lock()
        self._fired = False

    @property
    def fired(self) -> bool:
        return self._fired

    def __call__(self, response: TransportResponse) -> bool:
        """Invoke the callback; returns False if it already ran."""
        with self._lock:
            if self._fired:
                return False
            self._fired = True
        try:
            self._callback(response)
        except Exception:
            logger.exception("Continuation raised; outcome was still delivered once")
        return True


class AsyncExecutor:
    """
    Async executor

    Provides:
    - Non-blocking dispatch of descriptors to a transport
    - Exactly-once continuation delivery
    - Draining of in-flight calls on close

    Calls still pending when the executor closes are completed with a
    TransportResponse carrying a RuntimeError, so no continuation is lost.

    Example:
        executor = AsyncExecutor()
        future = executor.execute_async(descriptor, transport, on_complete=print)
        response = future.result()
        executor.close()
    """

    def __init__(
        self,
        loop: Optional[asyncio.AbstractEventLoop] = None,
        name: Optional[str] = None,
    ):
        """
        Create a new AsyncExecutor.

        Args:
            loop: Running event loop to schedule on. When omitted, the
                executor starts its own loop on a daemon thread.
            name: Thread name for the owned loop.
        """
        self._id = name or f"fetch-resource-executor-{int(time.time() * 1000)}"
        self._owns_loop = loop is None
        # result future -> (task future, one-shot completion)
        self._in_flight: Dict[concurrent.futures.Future, Tuple[concurrent.futures.Future, OneShot]] = {}
        self._lock = threading.Lock()
        self._closed = False

        if loop is None:
            self._loop = asyncio.new_event_loop()
            started = threading.Event()
            self._thread: Optional[threading.Thread] = threading.Thread(
                target=self._run_loop,
                args=(started,),
                name=self._id,
                daemon=True,
            )
            self._thread.start()
            started.wait()
        else:
            self._loop = loop
            self._thread = None

    def _run_loop(self, started: threading.Event) -> None:
        asyncio.set_event_loop(self._loop)
        self._loop.call_soon(started.set)
        try:
            self._loop.run_forever()
        finally:
            remaining = asyncio.all_tasks(self._loop)
            for task in remaining:
                task.cancel()
            if remaining:
                self._loop.run_until_complete(asyncio.gather(*remaining, return_exceptions=True))
            self._loop.close()

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def in_flight(self) -> int:
        """Number of dispatched calls that have not completed."""
        with self._lock:
            return len(self._in_flight)

    async def _dispatch(
        self,
        descriptor: RequestDescriptor,
        transport: Transport,
        completion: OneShot,
    ) -> None:
        try:
            response = await transport.send(descriptor)
        except Exception as e:
            # Anything escaping the transport is a transport-level failure
            logger.warning(
                f"AsyncExecutor._dispatch: transport raised for "
                f"{descriptor.method} {descriptor.path_template}: {e!r}"
            )
            response = TransportResponse(error=e)

        completion(response)

    @staticmethod
    def _completion(
        result: concurrent.futures.Future,
        on_complete: Optional[RawContinuation],
    ) -> RawContinuation:
        def complete(response: TransportResponse) -> None:
            try:
                if on_complete is not None:
                    on_complete(response)
            finally:
                result.set_result(response)

        return complete

    def execute_async(
        self,
        descriptor: RequestDescriptor,
        transport: Transport,
        on_complete: Optional[RawContinuation] = None,
    ) -> "concurrent.futures.Future[TransportResponse]":
        """
        Dispatch a descriptor and return immediately.

        Args:
            descriptor: Request to send; must have every url segment
            transport: Transport performing the I/O
            on_complete: Called exactly once with the raw response, a
                response carrying the transport error, or a response
                carrying a RuntimeError if the executor closed first

        Returns:
            Future resolving to the TransportResponse after on_complete ran

        Raises:
            RequestConstructionError: descriptor has unfilled placeholders
            RuntimeError: executor has been closed
        """
        descriptor.ensure_complete()

        result: "concurrent.futures.Future[TransportResponse]" = concurrent.futures.Future()
        result.set_running_or_notify_cancel()
        completion = OneShot(self._completion(result, on_complete))

        # close() either rejects this call or settles it
        with self._lock:
            if self._closed:
                raise RuntimeError("Executor has been closed")
            task = asyncio.run_coroutine_threadsafe(
                self._dispatch(descriptor, transport, completion),
                self._loop,
            )
            self._in_flight[result] = (task, completion)
        result.add_done_callback(self._forget)

        logger.debug(
            f"AsyncExecutor.execute_async: scheduled {descriptor.method} {descriptor.path_template}"
        )
        return result

    def _forget(self, future: concurrent.futures.Future) -> None:
        with self._lock:
            self._in_flight.pop(future, None)

    def is_loop_thread(self) -> bool:
        """True when called from inside the executor's event loop."""
        try:
            return asyncio.get_running_loop() is self._loop
        except RuntimeError:
            return False

    def run(self, coro: Awaitable[T], timeout: Optional[float] = None) -> T:
        """Run a coroutine on the executor loop and wait for its result.

        Must not be called from the loop thread itself.
        """
        if self.is_loop_thread():
            raise RuntimeError("AsyncExecutor.run cannot be called from the executor loop")
        return asyncio.run_coroutine_threadsafe(coro, self._loop).result(timeout)

    async def arun(self, coro: Awaitable[T]) -> T:
        """Await a coroutine on the executor loop from any event loop."""
        if self.is_loop_thread():
            return await coro
        return await asyncio.wrap_future(asyncio.run_coroutine_threadsafe(coro, self._loop))

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for in-flight calls; returns True if none remain."""
        with self._lock:
            pending = list(self._in_flight)
        if pending:
            logger.debug(f"AsyncExecutor.drain: waiting for {len(pending)} in-flight call(s)")
            _, not_done = concurrent.futures.wait(pending, timeout=timeout)
            return not not_done
        return True

    async def adrain(self, timeout: Optional[float] = None) -> bool:
        """Await in-flight calls without blocking the running loop."""
        with self._lock:
            pending = list(self._in_flight)
        if pending:
            logger.debug(f"AsyncExecutor.adrain: waiting for {len(pending)} in-flight call(s)")
            _, not_done = await asyncio.wait(
                [asyncio.wrap_future(future) for future in pending], timeout=timeout
            )
            return not not_done
        return True

    def _abandon_pending(self) -> int:
        with self._lock:
            pending = list(self._in_flight.values())
        for task, completion in pending:
            completion(TransportResponse(error=RuntimeError("Executor closed before the call completed")))
            task.cancel()
        if pending:
            logger.warning(f"AsyncExecutor.close: abandoned {len(pending)} in-flight call(s)")
        return len(pending)

    def close(self, wait: bool = True, timeout: Optional[float] = None) -> None:
        """
        Stop accepting work and shut down.

        Calls still in flight after the optional wait are completed with a
        TransportResponse whose error is a RuntimeError.

        Args:
            wait: Wait for in-flight calls to complete first
            timeout: Maximum seconds to wait for in-flight calls
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True

        # Never drain from the loop thread itself
        if wait and not self.is_loop_thread():
            self.drain(timeout)
        self._abandon_pending()

        if self._owns_loop:
            self._loop.call_soon_threadsafe(self._loop.stop)
            if self._thread is not None and threading.current_thread() is not self._thread:
                self._thread.join()

    def __enter__(self) -> "AsyncExecutor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
