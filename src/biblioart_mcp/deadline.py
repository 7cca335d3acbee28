"""Race an operation against its deadline; the deadline always wins ties after it fires.

The operation is not cancelled when the deadline fires, nor when the caller
itself is cancelled. Whatever it eventually produces, value or exception, is
logged and dropped; the lifecycle discards it by epoch.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import TypeVar

from .errors import OperationTimeout

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Ticket:
    """One in-flight lifecycle operation."""

    operation: str
    epoch: int


def _discard_late(ticket: Ticket, task: asyncio.Task) -> None:
    if task.cancelled():
        return
    exc = task.exception()
    if exc is not None:
        logger.warning("Discarding late failure of %s (epoch %d): %s", ticket.operation, ticket.epoch, exc)
    else:
        logger.warning("Discarding late result of %s (epoch %d)", ticket.operation, ticket.epoch)


async def race(ticket: Ticket, operation: Awaitable[T], timeout: float) -> T:
    """Return the operation's result, or raise OperationTimeout once *timeout* elapses.

    Raises:
        OperationTimeout: The deadline fired first.
        Exception: Whatever the operation raised, if it finished in time.
    """
    task = asyncio.ensure_future(operation)
    try:
        done, _ = await asyncio.wait({task}, timeout=timeout)
    except asyncio.CancelledError:
        task.add_done_callback(lambda t: _discard_late(ticket, t))
        raise
    if task in done:
        return task.result()
    task.add_done_callback(lambda t: _discard_late(ticket, t))
    logger.warning("%s exceeded its %gs deadline", ticket.operation, timeout)
    raise OperationTimeout(ticket.operation, timeout)
