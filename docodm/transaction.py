"""Transaction context propagation.

The active transaction lives in a `ContextVar`, so it follows the logical
flow of execution: asyncio tasks and continuations inherit it, and so do
worker threads started through `run_in_worker`. Nothing here is tied to the
physical thread that opened the transaction.
"""
import asyncio
import datetime
import functools
import logging
import uuid
from concurrent.futures import Executor
from contextlib import contextmanager
from contextvars import ContextVar, copy_context
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional, TypeVar

from docodm.exceptions import (
    OperationNotAllowedInTransactionError,
    TransactionContextMismatchError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _new_transaction_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class TransactionContext:
    attachment: Any = None
    transaction_id: str = field(default_factory=_new_transaction_id)
    started_at: datetime.datetime = field(default_factory=_utcnow)


_current_transaction: ContextVar[Optional[TransactionContext]] = ContextVar("docodm_transaction", default=None)


def current_transaction() -> Optional[TransactionContext]:
    return _current_transaction.get()


def is_in_transaction() -> bool:
    return _current_transaction.get() is not None


async def check_for_transaction() -> Optional[TransactionContext]:
    """Awaitable lookup of the active transaction.

    Completes without suspending, so a cancelled caller is never left waiting
    on it.
    """
    return _current_transaction.get()


@contextmanager
def bind_transaction(context: TransactionContext) -> Iterator[TransactionContext]:
    outer = _current_transaction.get()
    if outer is not None:
        # nested blocks keep running inside the outer transaction
        yield outer
        return

    token = _current_transaction.set(context)
    logger.debug("entered transaction", extra={"transaction_id": context.transaction_id})
    try:
        yield context
    finally:
        _current_transaction.reset(token)
        logger.debug("left transaction", extra={"transaction_id": context.transaction_id})


async def run_in_worker(func: Callable[..., T], *args: Any, executor: Optional[Executor] = None) -> T:
    if executor is None:
        return await asyncio.to_thread(func, *args)

    context = copy_context()
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, functools.partial(context.run, func, *args))


def verify_not_in_transaction(operation: str) -> None:
    context = _current_transaction.get()
    if context is not None:
        raise OperationNotAllowedInTransactionError(
            f"{operation} can not be used inside a transaction (transaction {context.transaction_id})"
        )


async def with_transaction_check(expect_present: bool, value: T) -> T:
    context = await check_for_transaction()
    present = context is not None
    if present != expect_present:
        expected = "inside" if expect_present else "outside"
        actual = "inside" if present else "outside"
        raise TransactionContextMismatchError(f"expected to run {expected} a transaction but running {actual} one")
    return value
