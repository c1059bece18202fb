"""Shared repository plumbing."""

import functools
from typing import Awaitable, Callable, ParamSpec, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from ticketdesk.core.exceptions import StoreOperationFailed
from ticketdesk.core.logging import get_logger

logger = get_logger(__name__)

P = ParamSpec("P")
T = TypeVar("T")


def store_operation(operation: str) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """
    Translate database errors raised by a repository method.

    Any SQLAlchemyError other than an IntegrityError becomes
    StoreOperationFailed, after rolling back the session. IntegrityError is
    re-raised unchanged so callers can react to unique-constraint races.
    """

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            try:
                return await func(*args, **kwargs)
            except IntegrityError:
                await args[0].db.rollback()
                raise
            except SQLAlchemyError as exc:
                logger.error("store_operation_failed", operation=operation, error=str(exc))
                await args[0].db.rollback()
                raise StoreOperationFailed(operation, exc) from exc

        return wrapper

    return decorator
