from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Protocol


class TransactionManager(Protocol):
    """Unidad de trabajo: las escrituras dentro de start() se confirman juntas."""

    @asynccontextmanager
    async def start(self) -> AsyncIterator[None]:
        yield
