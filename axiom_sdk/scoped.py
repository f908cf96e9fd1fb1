from __future__ import annotations
from typing import Generic, Optional, TypeVar

from .errors import ReleasedResultError

T = TypeVar("T")


class ScopedResult(Generic[T]):
    """A decoded response value that lives until the caller releases it.

    Releasing is idempotent and independent of the client that produced the
    value: closing the client leaves earlier results usable, and releasing a
    result leaves the client open.
    """

    __slots__ = ("_value", "_released", "_label")

    def __init__(self, value: T, label: str = "") -> None:
        self._value: Optional[T] = value
        self._released = False
        self._label = label

    @property
    def value(self) -> T:
        if self._released:
            raise ReleasedResultError(f"result {self._label or '<anonymous>'} was already released")
        return self._value  # type: ignore[return-value]

    @property
    def released(self) -> bool:
        return self._released

    def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._value = None

    def __enter__(self) -> T:
        return self.value

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    def __repr__(self) -> str:
        state = "released" if self._released else "live"
        return f"ScopedResult({self._label}, {state})"
