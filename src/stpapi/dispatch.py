"""
Completion delivery on a designated event loop
"""

import asyncio
import concurrent.futures
import logging
from typing import Any, Awaitable, Callable, Optional, TypeVar

from stpapi.exceptions import StripeError, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Completion = Callable[[Optional[T], Optional[Exception]], None]


class CompletionDispatcher:
    """
    Delivers completion callbacks on one designated event loop.

    If no loop is given, the loop running when the dispatcher is first used
    becomes the designated one.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _on_designated_loop(self) -> bool:
        try:
            return asyncio.get_running_loop() is self.loop
        except RuntimeError:
            return False

    def deliver(self, callback: Callable[..., Any], *args: Any) -> None:
        """Invoke ``callback(*args)`` on the designated loop"""
        if self._on_designated_loop():
            callback(*args)
        else:
            self.loop.call_soon_threadsafe(callback, *args)

    def run_with_completion(
        self, operation: Awaitable[T], completion: Completion[T]
    ) -> "asyncio.Future[None] | concurrent.futures.Future[None]":
        """
        Run ``operation`` and report its outcome through ``completion``.

        ``completion`` receives ``(result, None)`` on success or
        ``(None, error)`` on a StripeError, on the designated loop. ValidationErrors
        and exceptions that are not StripeErrors propagate through the returned
        future without reaching ``completion``.

        Args:
            operation: Awaitable producing the result
            completion: Callback taking (result, error)

        Returns:
            Future that resolves once the completion has been scheduled; a
            concurrent.futures.Future when called from outside the designated loop
        """

        async def runner() -> None:
            try:
                result = await operation
            except ValidationError:
                raise
            except StripeError as e:
                logger.debug(f"Operation failed with {e.kind.value} error: {e}")
                self.deliver(completion, None, e)
                return
            self.deliver(completion, result, None)

        if self._on_designated_loop():
            return asyncio.ensure_future(runner())
        return asyncio.run_coroutine_threadsafe(runner(), self.loop)
