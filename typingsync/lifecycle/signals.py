"""
Signal Handling - Graceful stop for `typings-sync watch`.

The first SIGTERM/SIGINT asks the watch loop to stop; the registered stop
hooks (deactivating the sync service) then run in registration order.
Another signal while stopping exits the process at once.
"""

import asyncio
import signal
from collections.abc import Awaitable, Callable

import structlog

__all__ = ["SignalHandler"]

logger = structlog.get_logger(__name__)

StopHook = Callable[[], Awaitable[None]]

HANDLED_SIGNALS = (signal.SIGTERM, signal.SIGINT)


class SignalHandler:
    """Bridges OS signals to the watch command's stop sequence.

    Example:
        handler = SignalHandler()
        handler.register_async(service.deactivate)
        handler.setup()
        await handler.wait_for_shutdown()
    """

    def __init__(self) -> None:
        self._stop_hooks: list[StopHook] = []
        self._stop_requested: asyncio.Event | None = None
        self._received = 0

    @property
    def shutdown_event(self) -> asyncio.Event:
        # Created lazily so it binds to the running loop
        if self._stop_requested is None:
            self._stop_requested = asyncio.Event()
        return self._stop_requested

    @property
    def should_shutdown(self) -> bool:
        return self._stop_requested is not None and self._stop_requested.is_set()

    def setup(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        loop = loop or asyncio.get_running_loop()
        for sig in HANDLED_SIGNALS:
            loop.add_signal_handler(sig, self._handle_signal, sig)
        logger.debug("signal_handlers_registered", signals=[s.name for s in HANDLED_SIGNALS])

    def register_async(self, hook: StopHook) -> None:
        self._stop_hooks.append(hook)

    def _handle_signal(self, sig: signal.Signals) -> None:
        self._received += 1
        if self._received > 1:
            logger.warning("watch_forced_exit", signal=sig.name)
            raise SystemExit(128 + sig.value)

        logger.info("watch_stop_requested", signal=sig.name)
        self.shutdown_event.set()

    def trigger_shutdown(self) -> None:
        """Stop without waiting for a signal."""
        self.shutdown_event.set()

    async def wait_for_shutdown(self) -> None:
        """Block until a stop is requested, then run every stop hook.

        A failing hook is logged; the remaining hooks still run.
        """
        await self.shutdown_event.wait()

        for hook in self._stop_hooks:
            try:
                await hook()
            except Exception as e:
                logger.error("stop_hook_failed", hook=getattr(hook, "__qualname__", repr(hook)), error=str(e))

        logger.info("watch_stopped")
