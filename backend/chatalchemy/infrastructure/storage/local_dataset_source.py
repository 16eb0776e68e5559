"""Local filesystem source for backend datasets.

Layout:
    <data_dir>/<dataset name>      — e.g. data/ttd_drug_disease.csv
"""

import asyncio
import logging
from pathlib import Path

from chatalchemy.application.interfaces.dataset_source import DatasetSource
from chatalchemy.domain.exceptions import SourceUnavailableError

logger = logging.getLogger(__name__)


class LocalDatasetSource(DatasetSource):
    """Infrastructure adapter reading datasets from a fixed directory."""

    def __init__(self, data_dir: str):
        self._data_dir = Path(data_dir)

    async def read(self, name: str) -> bytes:
        path = self._resolve(name)
        try:
            content = await asyncio.to_thread(path.read_bytes)
        except OSError as exc:
            raise SourceUnavailableError(
                name, f"File {name} not found or inaccessible"
            ) from exc
        logger.info("Read dataset %s (%d bytes)", path, len(content))
        return content

    def _resolve(self, name: str) -> Path:
        """Resolve ``name`` inside data_dir, refusing paths that escape it."""
        base = self._data_dir.resolve()
        path = (base / name).resolve()
        if base not in path.parents:
            raise SourceUnavailableError(name, "Dataset path escapes the data directory")
        return path
