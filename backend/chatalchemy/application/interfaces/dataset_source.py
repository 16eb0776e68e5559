"""Abstract interface (port) for reading backend-hosted datasets."""

from abc import ABC, abstractmethod


class DatasetSource(ABC):
    """Port for fetching the raw bytes of a named backend dataset."""

    @abstractmethod
    async def read(self, name: str) -> bytes:
        """Return the dataset's bytes.

        Raises:
            SourceUnavailableError: If the dataset cannot be read.
        """
        ...
