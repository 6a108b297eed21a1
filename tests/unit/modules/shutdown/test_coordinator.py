"""Tests for the shutdown coordinator module."""

import asyncio
import os
import signal
import pytest

from vipservice.modules.shutdown.coordinator import ShutdownCoordinator


@pytest.mark.asyncio
async def test_shutdown_coordinator(mock_logger):
    """Test basic shutdown coordinator functionality."""
    coordinator = ShutdownCoordinator(mock_logger)

    # Track execution order
    execution_order = []

    coordinator.register_handler(
        "low_priority",
        lambda: execution_order.append("low"),
        priority=2
    )
    coordinator.register_handler(
        "high_priority",
        lambda: execution_order.append("high"),
        priority=0
    )
    coordinator.register_handler(
        "medium_priority",
        lambda: execution_order.append("medium"),
        priority=1
    )

    await coordinator.shutdown()

    assert execution_order == ["high", "medium", "low"]
    assert coordinator.is_shutting_down is True
    assert coordinator.stop_event.is_set()

    mock_logger.log_info.assert_any_call("Starting graceful shutdown...")
    mock_logger.log_info.assert_any_call("Executing shutdown handler: high_priority")
    mock_logger.log_info.assert_any_call("Executing shutdown handler: medium_priority")
    mock_logger.log_info.assert_any_call("Executing shutdown handler: low_priority")
    mock_logger.log_info.assert_any_call("Graceful shutdown completed")


@pytest.mark.asyncio
async def test_register_handler_replaces_same_name(mock_logger):
    coordinator = ShutdownCoordinator(mock_logger)
    calls = []

    coordinator.register_handler("messaging", lambda: calls.append("first"))
    coordinator.register_handler("messaging", lambda: calls.append("second"))

    await coordinator.shutdown()

    assert calls == ["second"]


@pytest.mark.asyncio
async def test_shutdown_without_handlers(mock_logger):
    """A coordinator with nothing to clean up still completes shutdown."""
    coordinator = ShutdownCoordinator(mock_logger)

    await coordinator.shutdown()
    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1)

    mock_logger.log_info.assert_any_call("Graceful shutdown completed")


@pytest.mark.asyncio
async def test_shutdown_event(mock_logger):
    """Test shutdown event signaling."""
    coordinator = ShutdownCoordinator(mock_logger)

    async def wait_for_shutdown():
        await coordinator.wait_for_shutdown()
        return True

    task = asyncio.create_task(wait_for_shutdown())

    await asyncio.sleep(0.1)
    assert not task.done()

    await coordinator.shutdown()

    assert await task is True


@pytest.mark.asyncio
async def test_double_shutdown(mock_logger):
    """Test that shutdown can only be executed once."""
    coordinator = ShutdownCoordinator(mock_logger)

    execution_count = 0
    def increment_count():
        nonlocal execution_count
        execution_count += 1

    coordinator.register_handler(
        "test_handler",
        increment_count
    )

    await coordinator.shutdown()
    await coordinator.shutdown()

    assert execution_count == 1
    assert mock_logger.log_info.call_count == 3  # Start, handler, complete


@pytest.mark.asyncio
async def test_error_handling(mock_logger):
    """A failing handler is logged, the rest still run, and the error propagates."""
    coordinator = ShutdownCoordinator(mock_logger)
    calls = []

    def raise_error():
        raise ValueError("Test error")

    coordinator.register_handler("error_handler", raise_error, priority=0)
    coordinator.register_handler("after_error", lambda: calls.append("ran"), priority=1)

    with pytest.raises(ValueError, match="Test error"):
        await coordinator.shutdown()

    assert calls == ["ran"]
    mock_logger.log_error.assert_called_once_with("Error in shutdown handler error_handler: Test error")

    # Later callers see the same failure without re-running handlers
    with pytest.raises(ValueError, match="Test error"):
        await coordinator.wait_for_shutdown()
    assert calls == ["ran"]


@pytest.mark.asyncio
async def test_async_handler_error_propagates(mock_logger):
    coordinator = ShutdownCoordinator(mock_logger)

    async def failing_close():
        raise ConnectionError("broker gone")

    coordinator.register_handler("messaging", failing_close)

    with pytest.raises(ConnectionError, match="broker gone"):
        await coordinator.shutdown()
    mock_logger.log_error.assert_called_once_with("Error in shutdown handler: broker gone")


@pytest.mark.asyncio
async def test_shutdown_timeout(mock_logger):
    """Test shutdown timeout functionality."""
    coordinator = ShutdownCoordinator(mock_logger, shutdown_timeout=0.1)

    async def slow_handler():
        await asyncio.sleep(0.5)  # Longer than timeout

    coordinator.register_handler(
        "slow_handler",
        slow_handler
    )

    start_time = asyncio.get_running_loop().time()
    await coordinator.shutdown()
    end_time = asyncio.get_running_loop().time()

    assert end_time - start_time < 0.5  # Should timeout before handler completes
    mock_logger.log_warning.assert_called_once_with(
        "Shutdown timed out after 0.1 seconds. Some handlers may not have completed gracefully."
    )


@pytest.mark.asyncio
async def test_async_handlers_completion(mock_logger):
    """Test that async handlers complete within timeout."""
    coordinator = ShutdownCoordinator(mock_logger, shutdown_timeout=1.0)
    completed = []

    async def fast_handler():
        await asyncio.sleep(0.05)
        completed.append(True)

    coordinator.register_handler(
        "fast_handler",
        fast_handler
    )

    await coordinator.shutdown()

    assert completed == [True]
    mock_logger.log_warning.assert_not_called()


@pytest.mark.asyncio
async def test_repeated_signal_during_cleanup_runs_handler_once(mock_logger):
    """A second signal while cleanup is running must not run it again."""
    coordinator = ShutdownCoordinator(mock_logger)
    started = asyncio.Event()
    release = asyncio.Event()
    calls = []

    async def slow_close():
        calls.append("close")
        started.set()
        await release.wait()

    coordinator.register_handler("messaging", slow_close)

    coordinator.handle_signal(signal.SIGTERM)
    await started.wait()
    coordinator.handle_signal(signal.SIGINT)
    release.set()

    await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=1)

    assert calls == ["close"]
    assert coordinator.received_signal == signal.SIGTERM
    assert coordinator.stop_event.is_set()


@pytest.mark.asyncio
@pytest.mark.parametrize("sig", [signal.SIGINT, signal.SIGTERM])
async def test_os_signal_triggers_cleanup_once(mock_logger, sig):
    coordinator = ShutdownCoordinator(mock_logger)
    calls = []
    coordinator.register_handler("messaging", lambda: calls.append(sig))

    original = signal.getsignal(sig)
    coordinator.setup_signal_handlers()
    try:
        os.kill(os.getpid(), sig)
        await asyncio.wait_for(coordinator.wait_for_shutdown(), timeout=2)
    finally:
        coordinator.restore_signal_handlers()

    assert calls == [sig]
    assert coordinator.received_signal == sig
    assert signal.getsignal(sig) == original


def test_run_returns_result_and_cleans_up(mock_logger):
    coordinator = ShutdownCoordinator(mock_logger)
    calls = []
    coordinator.register_handler("messaging", lambda: calls.append("close"))

    async def main():
        return 42

    assert coordinator.run(main()) == 42
    assert calls == ["close"]


def test_run_cleans_up_when_coroutine_fails(mock_logger):
    coordinator = ShutdownCoordinator(mock_logger)
    calls = []

    async def main():
        coordinator.register_handler("messaging", lambda: calls.append("close"))
        raise RuntimeError("subscription failed")

    with pytest.raises(RuntimeError, match="subscription failed"):
        coordinator.run(main())
    assert calls == ["close"]


def test_run_stops_on_signal(mock_logger):
    """The serving coroutine returns once a signal sets the stop event."""
    coordinator = ShutdownCoordinator(mock_logger)
    calls = []
    original_sigterm = signal.getsignal(signal.SIGTERM)

    async def main():
        coordinator.register_handler("messaging", lambda: calls.append("close"))
        coordinator.setup_signal_handlers()
        asyncio.get_running_loop().call_later(0.05, os.kill, os.getpid(), signal.SIGTERM)
        await coordinator.stop_event.wait()
        return 1

    assert coordinator.run(main()) == 1
    assert calls == ["close"]
    assert coordinator.received_signal == signal.SIGTERM
    assert signal.getsignal(signal.SIGTERM) == original_sigterm


def test_run_cancels_interrupted_coroutine_before_cleanup(mock_logger):
    """Ctrl-C before signal handlers exist stops the coroutine, then cleans up."""
    coordinator = ShutdownCoordinator(mock_logger)
    calls = []

    def interrupt():
        raise KeyboardInterrupt

    async def main():
        coordinator.register_handler("messaging", lambda: calls.append("close"))
        asyncio.get_running_loop().call_soon(interrupt)
        try:
            await asyncio.sleep(1)
            calls.append("connected")
        except asyncio.CancelledError:
            calls.append("cancelled")
            raise

    with pytest.raises(KeyboardInterrupt):
        coordinator.run(main())
    assert calls == ["cancelled", "close"]
