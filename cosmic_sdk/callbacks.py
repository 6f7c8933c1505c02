"""Callback-style access to the client.

Every coroutine operation of :class:`~cosmic_sdk.client.CosmicClient` is also
available in a callback form. The callback form does not duplicate any
request logic: it schedules the coroutine and forwards its outcome.

Example:
    def on_done(outcome):
        if outcome.ok:
            print(len(outcome.value.objects))
        else:
            print("failed:", outcome.error)

    callbacks = CallbackClient(cosmic)
    callbacks.find("posts", limit=5, callback=on_done)
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar

from .client import CosmicClient
from .endpoints import Operation
from .exceptions import CosmicException

T = TypeVar("T")

log = logging.getLogger(__name__)

# Public coroutine methods that get a callback twin
CALLBACK_OPERATIONS = frozenset(op.value for op in Operation) | {"insert_draft"}


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Success value or failure of one operation."""

    value: Optional[T] = None
    error: Optional[Exception] = None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome[T]":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


# Scheduled tasks are held here until they finish
_pending: Set["asyncio.Task[None]"] = set()


async def _forward(awaitable: Awaitable[T], callback: Callable[[Outcome[T]], Any]) -> None:
    try:
        value = await awaitable
    except Exception as e:
        if isinstance(e, CosmicException):
            log.debug(f"Operation failed, forwarding to callback: {e}")
        else:
            log.warning(f"Operation raised {type(e).__name__}, forwarding to callback: {e}")
        callback(Outcome.failure(e))
        return
    callback(Outcome.success(value))


def dispatch(awaitable: Awaitable[T], callback: Callable[[Outcome[T]], Any]) -> "asyncio.Task[None]":
    """Run ``awaitable`` on the running loop and hand its outcome to ``callback``.

    Every failure, not only ``CosmicException``, reaches the callback as a
    failed :class:`Outcome`.

    Raises:
        RuntimeError: If called without a running event loop
    """
    loop = asyncio.get_running_loop()
    task = loop.create_task(_forward(awaitable, callback))
    _pending.add(task)
    task.add_done_callback(_pending.discard)
    return task


class CallbackClient:
    """Exposes each client operation as ``op(*args, callback=fn, **kwargs)``.

    Calls return the scheduled :class:`asyncio.Task`; the callback receives
    exactly one :class:`Outcome`.
    """

    def __init__(self, client: CosmicClient):
        self.client = client

    def __getattr__(self, name: str) -> Callable[..., "asyncio.Task[None]"]:
        if name not in CALLBACK_OPERATIONS:
            raise AttributeError(f"{type(self).__name__!s} has no operation {name!r}")
        operation = getattr(self.client, name)

        def invoke(*args: Any, callback: Callable[[Outcome[Any]], Any], **kwargs: Any) -> "asyncio.Task[None]":
            return dispatch(operation(*args, **kwargs), callback)

        invoke.__name__ = name
        invoke.__doc__ = operation.__doc__
        return invoke
