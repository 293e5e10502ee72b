"""Resource loader contract."""

from __future__ import annotations

from abc import ABC, abstractmethod

from overlaysync.contracts.engine import EngineHost


class ResourceLoader(ABC):
    """Fetches one resource by URL and installs its namespace into *host*.

    Implementations raise on failure; the bootstrap wraps whatever they raise
    in :class:`~overlaysync.contracts.exceptions.ResourceLoadFailure`.
    """

    @abstractmethod
    async def load(self, url: str, host: EngineHost) -> None: ...  # pragma: no cover
