"""Axiom SDK (minimal, blocking)

Public surface:
- AxiomClient: current_user, list_datasets, get_dataset, ingest
- ScopedResult: decoded value with an explicit, idempotent release
- models: Dataset, User, Role, IngestStatus, Failure, IngestOptions
- Result, Ok, Err and Result-returning functional operations
- errors: SDKError and its subclasses

Logging goes through loguru and is disabled until the application calls
``logger.enable("axiom_sdk")``.
"""

from loguru import logger

from .config import SDK_VERSION as __version__, ClientSettings, get_settings
from .errors import (
    SDKError,
    ConfigurationError,
    TransportError,
    ResponseTooLargeError,
    HTTPStatusError,
    AuthError,
    NotFound,
    DecodeError,
    ReleasedResultError,
)
from .models import (
    Dataset,
    Role,
    User,
    Failure,
    IngestStatus,
    ContentType,
    ContentEncoding,
    IngestOptions,
)
from .scoped import ScopedResult
from .client import AxiomClient
from .result import Result, Ok, Err
from . import functional

logger.disable("axiom_sdk")

__all__ = [
    "__version__",
    "AxiomClient",
    "ClientSettings",
    "get_settings",
    "ScopedResult",
    "Dataset",
    "Role",
    "User",
    "Failure",
    "IngestStatus",
    "ContentType",
    "ContentEncoding",
    "IngestOptions",
    "Result",
    "Ok",
    "Err",
    "functional",
    "SDKError",
    "ConfigurationError",
    "TransportError",
    "ResponseTooLargeError",
    "HTTPStatusError",
    "AuthError",
    "NotFound",
    "DecodeError",
    "ReleasedResultError",
]
