"""
Source polling - re-fetch a resource until it leaves the pending state
"""

import asyncio
import concurrent.futures
import logging
import threading
from enum import Enum
from typing import Awaitable, Callable, Optional

from stpapi.config import APIConfig
from stpapi.dispatch import CompletionDispatcher
from stpapi.exceptions import PollingTimeoutError, StripeError
from stpapi.types import Source, SourceStatus

logger = logging.getLogger(__name__)

SourceCompletion = Callable[[Optional[Source], Optional[Exception]], None]


class PollerState(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    RESOLVED = "resolved"
    TIMED_OUT = "timed_out"
    ERRORED = "errored"
    STOPPED = "stopped"


TERMINAL_STATES = frozenset(
    {PollerState.RESOLVED, PollerState.TIMED_OUT, PollerState.ERRORED, PollerState.STOPPED}
)


def clamp_timeout(timeout: float) -> float:
    """Timeouts are capped at APIConfig.MAX_POLL_TIMEOUT"""
    return max(0.0, min(timeout, APIConfig.MAX_POLL_TIMEOUT))


def _running_loop() -> Optional[asyncio.AbstractEventLoop]:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


class SourcePoller:
    """
    Polls one source on a fixed interval.

    Each fetch completes and is evaluated before the next is scheduled. The
    completion fires exactly once: with the source once its status is no
    longer pending, with the last source and a PollingTimeoutError at the
    deadline, or with the last source and the error if a fetch fails. It
    never fires after ``stop()``.
    """

    def __init__(
        self,
        identifier: str,
        fetch: Callable[[], Awaitable[Source]],
        timeout: float,
        completion: SourceCompletion,
        dispatcher: CompletionDispatcher,
        interval: float = APIConfig.DEFAULT_POLL_INTERVAL,
        on_finish: Callable[[str, "SourcePoller"], None] | None = None,
    ) -> None:
        self.identifier = identifier
        self.timeout = clamp_timeout(timeout)
        self.interval = interval
        self.state = PollerState.IDLE
        self.latest_source: Optional[Source] = None
        self._fetch = fetch
        self._completion = completion
        self._dispatcher = dispatcher
        self._on_finish = on_finish
        self._task: "asyncio.Future[None] | concurrent.futures.Future[None] | None" = None

    def start(self) -> None:
        """Begin polling on the dispatcher's loop"""
        if self.state is not PollerState.IDLE:
            return
        loop = self._dispatcher.loop
        self.state = PollerState.POLLING
        logger.info(
            f"Start polling source {self.identifier} "
            f"(timeout={self.timeout}s, interval={self.interval}s)"
        )
        if _running_loop() is loop:
            self._task = loop.create_task(self._run())
        else:
            self._task = asyncio.run_coroutine_threadsafe(self._run(), loop)

    def stop(self) -> None:
        """Stop polling; the completion will not be invoked"""
        if self.state in TERMINAL_STATES:
            return
        self.state = PollerState.STOPPED
        logger.info(f"Stopped polling source {self.identifier}")
        task = self._task
        if task is None:
            return
        if isinstance(task, asyncio.Future) and _running_loop() is not task.get_loop():
            task.get_loop().call_soon_threadsafe(task.cancel)
        else:
            task.cancel()

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        while self.state is PollerState.POLLING:
            try:
                source = await self._fetch()
            except StripeError as e:
                logger.warning(f"Polling source {self.identifier} failed: {e}")
                self._finish(PollerState.ERRORED, e)
                return

            self.latest_source = source
            if source.status is not SourceStatus.PENDING:
                logger.info(f"Source {self.identifier} resolved with status={source.status.value}")
                self._finish(PollerState.RESOLVED, None)
                return

            remaining = deadline - loop.time()
            if remaining <= 0:
                self._finish(
                    PollerState.TIMED_OUT, PollingTimeoutError(self.identifier, self.timeout)
                )
                return
            await asyncio.sleep(min(self.interval, remaining))

    def _finish(self, state: PollerState, error: Optional[StripeError]) -> None:
        if self.state is not PollerState.POLLING:
            return
        self.state = state
        if self._on_finish is not None:
            self._on_finish(self.identifier, self)
        self._dispatcher.deliver(self._completion, self.latest_source, error)


class PollerRegistry:
    """
    At most one active poller per source identifier.

    All access goes through one lock so that concurrent ``start`` calls for
    the same identifier cannot both register.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pollers: dict[str, SourcePoller] = {}

    def start(self, identifier: str, factory: Callable[[], SourcePoller]) -> bool:
        """
        Register and start a poller unless one is already active for ``identifier``.

        Args:
            identifier: Source identifier
            factory: Builds the poller; only called when registration succeeds

        Returns:
            True if a new poller was started, False if the call was a no-op
        """
        with self._lock:
            if identifier in self._pollers:
                logger.info(f"Already polling source {identifier}; ignoring new request")
                return False
            poller = factory()
            self._pollers[identifier] = poller
        try:
            poller.start()
        except Exception:
            self.discard(identifier, poller)
            raise
        return True

    def stop(self, identifier: str) -> bool:
        """Stop and remove the poller for ``identifier``; False if none was active"""
        with self._lock:
            poller = self._pollers.pop(identifier, None)
        if poller is None:
            return False
        poller.stop()
        return True

    def discard(self, identifier: str, poller: SourcePoller) -> None:
        """Remove ``poller`` if it is still the one registered for ``identifier``"""
        with self._lock:
            if self._pollers.get(identifier) is poller:
                del self._pollers[identifier]

    def stop_all(self) -> None:
        with self._lock:
            pollers = list(self._pollers.values())
            self._pollers.clear()
        for poller in pollers:
            poller.stop()

    def is_polling(self, identifier: str) -> bool:
        with self._lock:
            return identifier in self._pollers

    def __len__(self) -> int:
        with self._lock:
            return len(self._pollers)
