from __future__ import annotations
import threading
from typing import Any, Dict, List, Optional, Union

import orjson
import requests
from loguru import logger
from pydantic import TypeAdapter, ValidationError

from .config import (
    DEFAULT_MAX_RESPONSE_BYTES,
    DEFAULT_URL,
    DEFAULT_USER_PATH,
    SDK_VERSION,
    ClientSettings,
    get_settings,
)
from .errors import (
    ConfigurationError,
    DecodeError,
    ResponseTooLargeError,
    SDKError,
    TransportError,
    status_error,
)
from .models import ContentEncoding, ContentType, Dataset, IngestOptions, IngestStatus, User
from .scoped import ScopedResult

Body = Union[bytes, bytearray, memoryview, str]

_CHUNK_SIZE = 64 * 1024

_USER = TypeAdapter(User)
_DATASET = TypeAdapter(Dataset)
_DATASETS = TypeAdapter(List[Dataset])
_INGEST_STATUS = TypeAdapter(IngestStatus)


class AxiomClient:
    """Client for the Axiom HTTP API.

    Every operation sends one request, reads the whole response (up to
    ``max_response_bytes``), decodes it and returns a :class:`ScopedResult`.
    Requests on one instance are serialised, so an instance may be shared
    between threads.
    """

    def __init__(
        self,
        token: str,
        *,
        url: str = DEFAULT_URL,
        user_path: str = DEFAULT_USER_PATH,
        max_response_bytes: int = DEFAULT_MAX_RESPONSE_BYTES,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not token:
            raise ConfigurationError("api token must not be empty")
        if max_response_bytes <= 0:
            raise ConfigurationError("max_response_bytes must be positive")
        self.url = url.rstrip("/")
        self.user_path = user_path
        self.max_response_bytes = max_response_bytes
        self.timeout = timeout
        self._token = token
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_settings(cls, settings: Optional[ClientSettings] = None) -> "AxiomClient":
        settings = settings or get_settings()
        if settings.token is None:
            raise ConfigurationError("AXIOM_TOKEN is not set")
        return cls(
            settings.token.get_secret_value(),
            url=settings.url,
            user_path=settings.user_path,
            max_response_bytes=settings.max_response_bytes,
            timeout=settings.timeout,
        )

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        # a caller-supplied session stays open for its owner
        if self._owns_session:
            self._session.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "AxiomClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"AxiomClient(url={self.url!r})"

    # Operations

    def current_user(self) -> ScopedResult[User]:
        """Get the user the token belongs to."""
        return self._request("GET", self.user_path, _USER)

    def list_datasets(self) -> ScopedResult[List[Dataset]]:
        """Get all datasets the token has access to."""
        return self._request("GET", "/v2/datasets", _DATASETS)

    def get_dataset(self, name: str) -> ScopedResult[Dataset]:
        """Get one dataset. ``name`` goes into the path as is, without escaping."""
        return self._request("GET", f"/v2/datasets/{name}", _DATASET)

    def ingest(
        self,
        dataset: str,
        data: Body,
        options: Optional[IngestOptions] = None,
    ) -> ScopedResult[IngestStatus]:
        """Ingest a buffer of events (a JSON array or NDJSON) into ``dataset``.

        With ``ContentEncoding.GZIP`` the caller must pass already-compressed
        bytes; the client only sets the header.
        """
        opts = options or IngestOptions()
        return self._request(
            "POST",
            f"/v1/datasets/{dataset}/ingest",
            _INGEST_STATUS,
            body=data,
            content_type=opts.content_type,
            content_encoding=opts.content_encoding,
        )

    # Transport

    def _headers(
        self,
        content_type: Optional[ContentType] = None,
        content_encoding: Optional[ContentEncoding] = None,
    ) -> Dict[str, str]:
        h = {
            "Authorization": f"Bearer {self._token}",
            "Accept": "application/json",
            "User-Agent": f"axiom-sdk-python/{SDK_VERSION}",
        }
        if content_type is not None:
            h["Content-Type"] = ContentType(content_type).value
        if content_encoding is not None and ContentEncoding(content_encoding) is ContentEncoding.GZIP:
            h["Content-Encoding"] = ContentEncoding.GZIP.value
        return h

    def _request(
        self,
        method: str,
        path: str,
        shape: TypeAdapter,
        *,
        body: Optional[Body] = None,
        content_type: Optional[ContentType] = None,
        content_encoding: Optional[ContentEncoding] = None,
    ) -> ScopedResult[Any]:
        url = f"{self.url}{path}"
        if body is not None:
            content_type = content_type or ContentType.JSON
            if isinstance(body, str):
                payload: Optional[bytes] = body.encode("utf-8")
            elif isinstance(body, (bytes, bytearray, memoryview)):
                payload = bytes(body)
            else:
                raise TypeError(f"body must be str, bytes, bytearray or memoryview, not {type(body).__name__}")
        else:
            content_type = None
            content_encoding = None
            payload = None
        headers = self._headers(content_type, content_encoding)

        with self._lock:
            if self._closed:
                raise TransportError("client is closed")
            try:
                status, raw = self._send(method, url, headers, payload)
            except SDKError as e:
                logger.warning("Axiom request failed", method=method, path=path, error=str(e))
                raise

        logger.debug("Axiom request completed", method=method, path=path, status=status, size=len(raw))

        if not 200 <= status < 300:
            err = status_error(status, raw.decode("utf-8", errors="replace"))
            logger.warning("Axiom request rejected", method=method, path=path, status=status)
            raise err

        value = self._decode(raw, shape, path)
        return ScopedResult(value, label=f"{method} {path}")

    def _send(self, method: str, url: str, headers: Dict[str, str], payload: Optional[bytes]):
        try:
            resp = self._session.request(
                method, url, headers=headers, data=payload, timeout=self.timeout, stream=True
            )
        except requests.RequestException as ex:
            raise TransportError(f"{method} {url} failed: {ex}") from ex

        try:
            return resp.status_code, self._read_body(resp)
        except requests.RequestException as ex:
            raise TransportError(f"reading response from {url} failed: {ex}") from ex
        finally:
            resp.close()

    def _read_body(self, resp: requests.Response) -> bytes:
        limit = self.max_response_bytes
        declared = resp.headers.get("Content-Length")
        if declared is not None and declared.isdigit() and int(declared) > limit:
            raise ResponseTooLargeError(
                f"response declares {declared} bytes, limit is {limit}", code=resp.status_code, limit=limit
            )
        buf = bytearray()
        for chunk in resp.iter_content(chunk_size=_CHUNK_SIZE):
            buf.extend(chunk)
            if len(buf) > limit:
                raise ResponseTooLargeError(
                    f"response exceeds {limit} bytes", code=resp.status_code, limit=limit
                )
        encoding = resp.headers.get("Content-Encoding", "identity").lower()
        if declared is not None and declared.isdigit() and encoding == "identity" and len(buf) != int(declared):
            raise TransportError(
                f"response body ended after {len(buf)} of {declared} bytes", code=resp.status_code
            )
        return bytes(buf)

    @staticmethod
    def _decode(raw: bytes, shape: TypeAdapter, path: str) -> Any:
        try:
            data = orjson.loads(raw)
        except orjson.JSONDecodeError as ex:
            raise DecodeError(f"invalid json from {path}: {ex}") from ex
        try:
            return shape.validate_python(data)
        except ValidationError as ex:
            raise DecodeError(f"unexpected response shape from {path}: {ex}") from ex
