from __future__ import annotations

import logging
import os
from pathlib import Path

from cargo_add.manifest import Manifest, find_file
from cargo_add.models import DependencySpec

logger = logging.getLogger(__name__)


class DependencyService:
    def __init__(self, manifest_path: str | os.PathLike[str] | None = None) -> None:
        self._manifest_path = manifest_path

    def load_manifest(self) -> Manifest:
        return Manifest.open(self._manifest_path)

    def add_dependencies(self, table: str, specs: list[DependencySpec]) -> Path:
        """Insert ``specs`` into ``table`` and save the manifest in place.

        Returns the path of the manifest that was rewritten. Nothing is written
        when an insertion fails.
        """
        with find_file(self._manifest_path) as handle:
            path = Path(handle.name)
            logger.debug("Using manifest %s", path)

            manifest = Manifest.from_handle(handle)
            manifest.add_deps(table, [spec.to_dependency() for spec in specs])
            manifest.write_to_file(handle)

        logger.info("Added %s to [%s] in %s", ", ".join(spec.name for spec in specs), table, path)
        return path
