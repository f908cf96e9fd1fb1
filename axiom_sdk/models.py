"""Response shapes returned by the Axiom API and the options accepted by ingest."""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import ConfigurationError


class _Snapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


class Dataset(_Snapshot):
    id: str
    name: str
    description: str
    who: str
    created: str


class Role(_Snapshot):
    id: str
    name: str


class User(_Snapshot):
    id: str
    name: str
    email: str
    role: Role
    emails: List[str] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _primary_email(cls, data: Any) -> Any:
        # The API sends a list of addresses; the first one is the primary.
        if isinstance(data, dict) and "email" not in data:
            emails = data.get("emails")
            if isinstance(emails, list) and emails:
                return {**data, "email": emails[0]}
        return data


class Failure(_Snapshot):
    error: str
    timestamp: str


class IngestStatus(_Snapshot):
    ingested: int
    failed: int
    failures: List[Failure] = Field(default_factory=list)
    processed_bytes: int = Field(alias="processedBytes")
    blocks_created: int = Field(alias="blocksCreated")
    wal_length: int = Field(alias="walLength")


class ContentType(str, Enum):
    JSON = "application/json"
    NDJSON = "application/x-ndjson"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ContentType"]:
        # short names: "json", "ndjson"
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


class ContentEncoding(str, Enum):
    IDENTITY = "identity"
    GZIP = "gzip"

    @classmethod
    def _missing_(cls, value: object) -> Optional["ContentEncoding"]:
        if isinstance(value, str):
            return cls.__members__.get(value.upper())
        return None


@dataclass(frozen=True)
class IngestOptions:
    """Header selection for ingest. GZIP only labels the body, it does not compress it.

    Both fields take the enum members, their header values, or the short names
    ``json``/``ndjson`` and ``identity``/``gzip``.
    """

    content_type: ContentType = ContentType.JSON
    content_encoding: ContentEncoding = ContentEncoding.IDENTITY

    def __post_init__(self) -> None:
        try:
            object.__setattr__(self, "content_type", ContentType(self.content_type))
        except ValueError as e:
            raise ConfigurationError(f"unsupported content type {self.content_type!r}") from e
        try:
            object.__setattr__(self, "content_encoding", ContentEncoding(self.content_encoding))
        except ValueError as e:
            raise ConfigurationError(f"unsupported content encoding {self.content_encoding!r}") from e
