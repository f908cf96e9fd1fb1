from __future__ import annotations
from dataclasses import dataclass
from typing import Optional

@dataclass(eq=False)
class SDKError(Exception):
    message: str
    code: Optional[int] = None

    def __str__(self) -> str:
        if self.code is None:
            return f"{type(self).__name__}: {self.message}"
        return f"{type(self).__name__}(code={self.code}): {self.message}"

@dataclass(eq=False)
class ConfigurationError(SDKError):
    pass

@dataclass(eq=False)
class TransportError(SDKError):
    """Connection, send or receive failure. Partial bodies land here too."""

@dataclass(eq=False)
class ResponseTooLargeError(TransportError):
    limit: int = 0

@dataclass(eq=False)
class HTTPStatusError(SDKError):
    body: str = ""

@dataclass(eq=False)
class AuthError(HTTPStatusError):
    pass

@dataclass(eq=False)
class NotFound(HTTPStatusError):
    pass

@dataclass(eq=False)
class DecodeError(SDKError):
    """Body is not JSON or does not match the expected shape."""

@dataclass(eq=False)
class ReleasedResultError(SDKError):
    pass


def status_error(status: int, body: str) -> HTTPStatusError:
    snippet = body[:512]
    if status in (401, 403):
        return AuthError("unauthorized", code=status, body=body)
    if status == 404:
        return NotFound(f"not found: {snippet}" if snippet else "not found", code=status, body=body)
    return HTTPStatusError(f"unexpected status {status}: {snippet}", code=status, body=body)
