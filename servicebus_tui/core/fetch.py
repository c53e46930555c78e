"""Background fetch requests and their resolution.

State owners never call the provider directly. They submit a FetchRequest
to a FetchDispatcher; the dispatcher runs it off the event loop and feeds
the resulting event back into the serial stream. resolve_fetch() is the
async boundary: every provider failure, including a timeout, is converted
here into a FetchFailed event.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from ..errors import ProviderError
from .events import Event, FetchFailed, FetchTarget

logger = logging.getLogger(__name__)

DEFAULT_FETCH_TIMEOUT = 30.0


@dataclass(frozen=True)
class FetchRequest:
    """A deferred provider call.

    Attributes:
        target: Which pane or node the result populates
        call: Blocking provider call, run in a worker thread
        on_success: Maps the call's result to a completion event
        key: Node id the request belongs to, if any
        description: Short text for logs
    """

    target: FetchTarget
    call: Callable[[], Any]
    on_success: Callable[[Any], Event]
    key: Optional[str] = None
    description: str = ""

    def failed(self, error: str) -> FetchFailed:
        return FetchFailed(target=self.target, error=error, key=self.key)


class FetchDispatcher(Protocol):
    """Runs fetch requests without blocking the event loop."""

    def submit(self, request: FetchRequest) -> None:
        ...


def describe_error(exc: BaseException) -> str:
    """Text shown inline for a failed fetch."""
    if isinstance(exc, ProviderError):
        return exc.message
    message = str(exc)
    return message or type(exc).__name__


def _log_failure(label: str, exc: BaseException) -> None:
    # ProviderError text already names the operation.
    if isinstance(exc, ProviderError):
        logger.error(f"Fetch failed: {exc.message}")
    else:
        logger.error(f"Fetch failed: {label}: {describe_error(exc)}")


async def resolve_fetch(request: FetchRequest, timeout: float = DEFAULT_FETCH_TIMEOUT) -> Event:
    """Run a request in a worker thread and convert the outcome to an event."""
    label = request.description or request.target.value
    try:
        result = await asyncio.wait_for(asyncio.to_thread(request.call), timeout)
    except asyncio.TimeoutError:
        logger.warning(f"Fetch timed out after {timeout:g}s: {label}")
        return request.failed(f"{label}: timed out after {timeout:g}s")
    except Exception as e:
        _log_failure(label, e)
        return request.failed(describe_error(e))

    logger.debug(f"Fetch completed: {label}")
    return request.on_success(result)


def resolve_fetch_sync(request: FetchRequest) -> Event:
    """Run a request on the calling thread without a timeout.

    Used by non-interactive commands where nothing else competes for the
    loop.
    """
    try:
        result = request.call()
    except Exception as e:
        _log_failure(request.description or request.target.value, e)
        return request.failed(describe_error(e))
    return request.on_success(result)
