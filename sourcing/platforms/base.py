"""Abstract base class for candidate provider adapters."""

from abc import ABC, abstractmethod

from sourcing.core.schemas import ProviderQuery, RawCandidate


class ProviderAdapter(ABC):
    """Base class that every provider adapter must implement.

    ``search`` returns an empty list when the provider simply has no matches
    and raises ProviderError only on configuration or transport failure.
    """

    @property
    @abstractmethod
    def source_id(self) -> str:
        """Source tag stamped on every candidate (e.g. 'linkedin')."""

    @abstractmethod
    def is_configured(self) -> bool:
        """True when the credentials this provider needs are present."""

    @abstractmethod
    async def search(self, query: ProviderQuery) -> list[RawCandidate]:
        """Run a search and return raw (unvalidated, unscored) candidates."""
