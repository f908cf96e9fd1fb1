from __future__ import annotations
from typing import List, Optional

from .client import AxiomClient, Body
from .models import Dataset, IngestOptions, IngestStatus, User
from .result import Result, capture
from .scoped import ScopedResult


def current_user(client: AxiomClient) -> Result[ScopedResult[User]]:
    return capture(client.current_user)


def list_datasets(client: AxiomClient) -> Result[ScopedResult[List[Dataset]]]:
    return capture(client.list_datasets)


def get_dataset(client: AxiomClient, name: str) -> Result[ScopedResult[Dataset]]:
    return capture(lambda: client.get_dataset(name))


def ingest(
    client: AxiomClient,
    dataset: str,
    data: Body,
    options: Optional[IngestOptions] = None,
) -> Result[ScopedResult[IngestStatus]]:
    return capture(lambda: client.ingest(dataset, data, options))
