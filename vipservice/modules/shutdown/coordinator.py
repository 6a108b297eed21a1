"""Shutdown coordinator for running cleanup handlers once on SIGINT/SIGTERM."""

import asyncio
import inspect
from asyncio import AbstractEventLoop, Task
import signal
from dataclasses import dataclass
from typing import Callable, List, Optional, TypeVar, Any, Coroutine, cast, Generic, Union
import types

from ..logging import BaseLogger

T = TypeVar('T')

# Type for signal handlers
SignalHandlerType = Union[Callable[[int, Optional[types.FrameType]], Any], int, None]

HANDLED_SIGNALS = (signal.SIGINT, signal.SIGTERM)


@dataclass
class ShutdownHandler:
    """Handler for shutdown operations."""
    name: str
    handler: Callable
    priority: int = 0


class ShutdownCoordinator(Generic[T]):
    """Coordinates the graceful shutdown of service resources.

    A termination signal sets ``stop_event``, which the serving loop observes,
    and schedules :meth:`shutdown` as its own task. Handlers run at most once
    no matter how many signals arrive or how many callers ask for shutdown.
    """

    def __init__(self, logger: BaseLogger, shutdown_timeout: float = 5.0):
        """
        Initialize the shutdown coordinator.

        Args:
            logger: Logger instance for logging shutdown events
            shutdown_timeout: Timeout in seconds to wait for async handlers
        """
        self._handlers: List[ShutdownHandler] = []
        self._is_shutting_down = False
        self.logger = logger
        self.shutdown_timeout = shutdown_timeout
        self.received_signal: Optional[signal.Signals] = None
        self._stop_event: Optional[asyncio.Event] = None
        self._completed: Optional[asyncio.Event] = None
        self._shutdown_task: Optional[Task] = None
        self._failure: Optional[BaseException] = None
        self._active_loop: Optional[AbstractEventLoop] = None
        self._original_sigint: SignalHandlerType = None
        self._original_sigterm: SignalHandlerType = None

    @property
    def stop_event(self) -> asyncio.Event:
        """Event set as soon as shutdown has been requested."""
        if self._stop_event is None:
            self._stop_event = asyncio.Event()
        return self._stop_event

    @property
    def _completed_event(self) -> asyncio.Event:
        if self._completed is None:
            self._completed = asyncio.Event()
        return self._completed

    @property
    def is_shutting_down(self) -> bool:
        """Check if shutdown is in progress."""
        return self._is_shutting_down

    def setup_signal_handlers(self, loop: Optional[AbstractEventLoop] = None) -> None:
        """
        Register SIGINT and SIGTERM for the given (or running) event loop.
        This must be called from the main thread.
        """
        self._active_loop = loop or asyncio.get_running_loop()

        # Store original signal handlers to restore later
        self._original_sigint = signal.getsignal(signal.SIGINT)
        self._original_sigterm = signal.getsignal(signal.SIGTERM)

        for sig in HANDLED_SIGNALS:
            signal.signal(sig, self._handle_signal)

    def restore_signal_handlers(self) -> None:
        """Restore original signal handlers."""
        if self._original_sigint is not None:
            signal.signal(signal.SIGINT, self._original_sigint)
        if self._original_sigterm is not None:
            signal.signal(signal.SIGTERM, self._original_sigterm)
        self._original_sigint = None
        self._original_sigterm = None

    def _handle_signal(self, sig_num: int, frame: Optional[types.FrameType]) -> None:
        """
        OS-level signal callback. Hands the signal over to the event loop.

        Args:
            sig_num: The signal number that was received
            frame: The current stack frame
        """
        if self._active_loop is not None and not self._active_loop.is_closed():
            self._active_loop.call_soon_threadsafe(self.handle_signal, sig_num)

    def handle_signal(self, sig_num: int) -> None:
        """Request shutdown in response to a signal. Runs on the event loop."""
        sig = signal.Signals(sig_num)
        if self.received_signal is None:
            self.received_signal = sig
        self.logger.log_info(f"Received {sig.name} signal, initiating graceful shutdown...")
        self.stop_event.set()
        if self._shutdown_task is None:
            self._shutdown_task = asyncio.get_running_loop().create_task(self._run_shutdown_task())

    async def _run_shutdown_task(self) -> None:
        try:
            await self.shutdown()
        except Exception:
            # Logged by shutdown() and re-raised to every later caller of it.
            pass

    def register_handler(self, name: str, handler: Callable, priority: int = 0) -> None:
        """Register a shutdown handler.

        Args:
            name: Name of the handler
            handler: Callable to execute during shutdown
            priority: Priority of the handler (lower numbers execute first)
        """
        for existing in self._handlers:
            if existing.name == name:
                existing.handler = handler
                existing.priority = priority
                self._handlers.sort(key=lambda h: h.priority)
                return

        self._handlers.append(ShutdownHandler(name, handler, priority))
        self._handlers.sort(key=lambda h: h.priority)

    async def shutdown(self) -> None:
        """
        Execute all registered shutdown handlers in order of priority.

        Only the first call runs the handlers; later or concurrent calls wait
        for that run to finish. An exception raised by a handler is logged
        and re-raised after the remaining handlers have run.

        Raises:
            Exception: The first exception raised by a handler
        """
        self.stop_event.set()
        if self._is_shutting_down:
            await self._completed_event.wait()
            if self._failure is not None:
                raise self._failure
            return

        self._is_shutting_down = True
        self._failure = None
        self.logger.log_info("Starting graceful shutdown...")

        try:
            tasks = []
            for handler in self._handlers:
                try:
                    self.logger.log_info(f"Executing shutdown handler: {handler.name}")
                    if inspect.iscoroutinefunction(handler.handler):
                        tasks.append(asyncio.create_task(handler.handler()))
                    else:
                        result = handler.handler()
                        if asyncio.iscoroutine(result):
                            tasks.append(asyncio.create_task(result))
                except Exception as e:
                    self.logger.log_error(f"Error in shutdown handler {handler.name}: {str(e)}")
                    if self._failure is None:
                        self._failure = e

            if tasks:
                try:
                    results = await asyncio.wait_for(
                        asyncio.gather(*tasks, return_exceptions=True),
                        timeout=self.shutdown_timeout
                    )
                    for result in results:
                        if isinstance(result, Exception):
                            self.logger.log_error(f"Error in shutdown handler: {str(result)}")
                            if self._failure is None:
                                self._failure = result
                except asyncio.TimeoutError:
                    self.logger.log_warning(
                        f"Shutdown timed out after {self.shutdown_timeout} seconds. "
                        "Some handlers may not have completed gracefully."
                    )

            self.logger.log_info("Graceful shutdown completed")
        finally:
            self._completed_event.set()

        if self._failure is not None:
            raise self._failure

    async def wait_for_shutdown(self) -> None:
        """Wait until the shutdown handlers have finished running."""
        await self._completed_event.wait()
        if self._failure is not None:
            raise self._failure

    def run(self, coroutine: Coroutine[Any, Any, T]) -> T:
        """
        Run an async coroutine on a new event loop with guaranteed cleanup.

        The coroutine installs the signal handlers itself with
        :meth:`setup_signal_handlers` once it has something to clean up, and is
        expected to return after ``stop_event`` is set. Whichever way it ends,
        the shutdown handlers run before the loop is closed and the original
        signal handlers are restored. A coroutine that is still pending when
        the loop is interrupted is cancelled before the handlers run.

        Args:
            coroutine: The coroutine to execute

        Returns:
            The result of the coroutine

        Raises:
            Any exception raised by the coroutine or by a shutdown handler
        """
        loop = asyncio.new_event_loop()
        asyncio.set_event_loop(loop)
        self._active_loop = loop

        try:
            main_task = loop.create_task(coroutine)
            try:
                result = loop.run_until_complete(main_task)
            except BaseException:
                # An interrupt can leave the coroutine pending; stop it before cleanup
                if not main_task.done():
                    main_task.cancel()
                    loop.run_until_complete(
                        asyncio.gather(main_task, return_exceptions=True)
                    )
                try:
                    loop.run_until_complete(self.shutdown())
                except Exception as cleanup_err:
                    self.logger.log_error(f"Error during cleanup: {str(cleanup_err)}")
                raise
            loop.run_until_complete(self.shutdown())
            return cast(T, result)

        finally:
            self._active_loop = None
            self.restore_signal_handlers()

            try:
                pending = asyncio.all_tasks(loop)
                for task in pending:
                    task.cancel()
                if pending:
                    loop.run_until_complete(
                        asyncio.gather(*pending, return_exceptions=True)
                    )
            except Exception as e:
                self.logger.log_warning(f"Error cleaning up pending tasks: {str(e)}")

            try:
                loop.run_until_complete(loop.shutdown_asyncgens())
                loop.close()
            except Exception as e:
                self.logger.log_warning(f"Error closing event loop: {str(e)}")
            asyncio.set_event_loop(None)
