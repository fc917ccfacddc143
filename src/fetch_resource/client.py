"""
Resource client wiring config, transport, executor and response mapping.
"""
import concurrent.futures
import logging
from typing import Any, Optional

from .config import ClientConfig, resolve_config
from .executor import AsyncExecutor
from .operation import ResourceOperation
from .transport import HttpxTransport
from .types import Continuation, Outcome, Transport, TransportResponse

logger = logging.getLogger("fetch_resource.client")


class ResourceClient:
    """Client for a resource-oriented HTTP API.

    Every operation validates and builds its request on the calling
    thread, then returns a future immediately. The optional callback and
    the future both receive the same Outcome, exactly once.
    """

    def __init__(
        self,
        config: ClientConfig,
        transport: Optional[Transport] = None,
        executor: Optional[AsyncExecutor] = None,
    ):
        self._config = resolve_config(config)
        self._transport = transport if transport is not None else HttpxTransport(self._config)
        self._owns_executor = executor is None
        self._executor = executor if executor is not None else AsyncExecutor()
        self._closed = False
        self._applications = None

    @property
    def config(self):
        return self._config

    @property
    def executor(self) -> AsyncExecutor:
        return self._executor

    @property
    def applications(self):
        """Applications resource bound to this client."""
        if self._applications is None:
            from .resources.applications import ApplicationsResource

            self._applications = ApplicationsResource(self)
        return self._applications

    def invoke(
        self,
        operation: ResourceOperation,
        options: Optional[Any] = None,
        callback: Optional[Continuation] = None,
        **arguments: Any,
    ) -> "concurrent.futures.Future[Outcome]":
        """
        Run a resource operation without blocking.

        Args:
            operation: Declarative operation to run
            options: Option set for the operation's optional fields
            callback: Continuation receiving the Outcome
            **arguments: Values for the operation's segments and params

        Returns:
            Future resolving to the Outcome

        Raises:
            ValidationError: an argument is invalid; nothing was sent
            RequestConstructionError: a url segment is missing; nothing was sent
        """
        if self._closed:
            raise RuntimeError("Client has been closed")

        descriptor = operation.prepare(arguments, options, self._config.default_segments)
        outcome_future: "concurrent.futures.Future[Outcome]" = concurrent.futures.Future()
        outcome_future.set_running_or_notify_cancel()

        def on_complete(response: TransportResponse) -> None:
            try:
                outcome = operation.map(response)
            except Exception as e:
                outcome_future.set_exception(e)
                raise
            if not outcome.ok:
                logger.debug(f"{operation.name}: {type(outcome.error).__name__}: {outcome.error}")
            # The future resolves only after the callback has run
            try:
                if callback is not None:
                    callback(outcome)
            finally:
                outcome_future.set_result(outcome)

        self._executor.execute_async(descriptor, self._transport, on_complete)
        return outcome_future

    def close(self) -> None:
        """Drain in-flight calls and release the transport and executor.

        Raises:
            RuntimeError: called from the executor's own event loop; use
                ``await client.aclose()`` there
        """
        if self._closed:
            return
        if self._executor.is_loop_thread():
            raise RuntimeError(
                "ResourceClient.close() cannot block the executor loop; use 'await client.aclose()'"
            )
        self._closed = True
        self._executor.drain()
        # The transport's connections belong to the executor loop
        self._executor.run(self._transport.aclose())
        if self._owns_executor:
            self._executor.close(wait=False)

    async def aclose(self) -> None:
        """Await in-flight calls, then release the transport and executor."""
        if self._closed:
            return
        self._closed = True
        await self._executor.adrain()
        await self._executor.arun(self._transport.aclose())
        if self._owns_executor:
            self._executor.close(wait=False)

    def __enter__(self) -> "ResourceClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> "ResourceClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()
