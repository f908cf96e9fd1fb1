"""Ok/Err results for callers that prefer values over exceptions.

An ``Ok`` from an API call usually holds a :class:`ScopedResult`. The helpers
here release that scope whenever they consume it, so chaining never leaks a
live result.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

from .errors import SDKError
from .scoped import ScopedResult

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: SDKError


Result = Union[Ok[T], Err]


def capture(call: Callable[[], T]) -> Result[T]:
    """Run ``call`` and turn an SDKError into Err. Anything else propagates."""
    try:
        return Ok(call())
    except SDKError as e:
        return Err(e)


def _release(value: object) -> None:
    if isinstance(value, ScopedResult):
        value.release()


def extract(result: Result[ScopedResult[T]], f: Callable[[T], U]) -> Result[U]:
    """Apply ``f`` to the scoped value and release the scope.

    ``f`` sees the decoded value while it is live; what it returns must not
    depend on the scope staying open.
    """
    if isinstance(result, Err):
        return result
    scoped = result.value
    try:
        return capture(lambda: f(scoped.value))
    finally:
        scoped.release()


def and_then(result: Result[T], f: Callable[[T], Result[U]]) -> Result[U]:
    """Chain another call on Ok. A scoped input is released if the chain fails."""
    if isinstance(result, Err):
        return result
    try:
        chained = f(result.value)
    except SDKError as e:
        chained = Err(e)
    except Exception:
        _release(result.value)
        raise
    if isinstance(chained, Err):
        _release(result.value)
    return chained


def recover(result: Result[T], f: Callable[[SDKError], Result[T]]) -> Result[T]:
    """Give ``f`` a chance to replace an Err, e.g. NotFound with a default."""
    if isinstance(result, Ok):
        return result
    return f(result.error)


def unwrap(result: Result[T]) -> T:
    """Return the Ok value or raise the Err's error."""
    if isinstance(result, Ok):
        return result.value
    raise result.error
