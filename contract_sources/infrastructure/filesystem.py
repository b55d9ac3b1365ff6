"""Filesystem implementation of the Materializer port."""

import asyncio
import logging
from pathlib import Path
from typing import Dict, List, Mapping

from ..application.domain import Materializer, SourceFile
from ..application.exceptions import FilesystemError
from ..application.paths import plan_destinations


class FileSystemMaterializer(Materializer):
    """An adapter that writes decoded sources as a plain directory tree."""

    def __init__(self):
        """Initializes the materializer."""
        self.logger = logging.getLogger(self.__class__.__name__)

    def _write_file(self, destination: Path, content: str):
        """Perform the blocking I/O work of writing one file."""
        try:
            # Encode before opening so unencodable text never truncates a file.
            data = content.encode("utf-8")
            destination.parent.mkdir(parents=True, exist_ok=True)
            with open(destination, "wb") as f:
                f.write(data)
        except (OSError, UnicodeError) as e:
            raise FilesystemError(destination, e) from e

    def _write_all(self, plan: Dict[Path, SourceFile]) -> List[Path]:
        written = []
        for destination, source in plan.items():
            self._write_file(destination, source.content)
            written.append(destination)
        return written

    async def materialize(
        self, root: Path, sources: Mapping[str, SourceFile]
    ) -> List[Path]:
        """
        Write every source file under root, overwriting existing files.

        This public method fulfills the Materializer port contract. All
        paths are validated first, so an unsafe or colliding path aborts
        before any write. A write failure aborts the remaining writes but
        leaves files already written in place.

        Args:
            root: The per-contract destination directory.
            sources: Mapping of relative path to file content.

        Returns:
            The paths that were written.

        Raises:
            UnsafePathError: If a source path could escape root.
            PathCollisionError: If two source paths share a destination.
            FilesystemError: If a directory or file cannot be written.
        """

        plan = plan_destinations(root, sources)

        self.logger.info(f"Writing {len(plan)} files under {root}...")
        written = await asyncio.to_thread(self._write_all, plan)
        self.logger.info(f"Finished writing {len(written)} files under {root}")

        return written
