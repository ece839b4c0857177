from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import StoreError


@dataclass(frozen=True, slots=True)
class FileStore:
    """Reads and writes files under one base directory.

    Filenames are appended to the base as-is; traversal sequences are not filtered.
    """

    base: Path

    @classmethod
    def at(cls, directory: str | os.PathLike[str]) -> "FileStore":
        return cls(Path(directory).resolve())

    def resolve(self, filename: str) -> Path:
        return Path(f"{self.base}{os.sep}{filename}")

    def exists(self, path: Path) -> bool:
        try:
            return path.exists()
        except (OSError, ValueError) as e:
            logging.debug("cannot stat %s: %s", path, e)
            return False

    def read_file(self, path: Path) -> bytes:
        logging.info("loading %s", path)
        try:
            with open(path, "rb") as f:
                size = os.fstat(f.fileno()).st_size
                data = f.read(size)
        except (OSError, ValueError) as e:
            raise StoreError(f"cannot read {path}: {e}") from e

        if len(data) != size:
            raise StoreError(f"short read on {path}: {len(data)} of {size} bytes")
        logging.debug("loaded %s (%d bytes)", path, size)
        return data

    def write_file(self, path: Path, data: bytes) -> None:
        logging.info("storing %s (%d bytes)", path, len(data))
        try:
            with open(path, "wb") as f:
                f.write(data)
        except (OSError, ValueError) as e:
            raise StoreError(f"cannot write {path}: {e}") from e

    def list_entries(self, directory: Optional[Path] = None) -> List[str]:
        target = self.base if directory is None else directory
        try:
            names = os.listdir(target)
        except OSError as e:
            raise StoreError(f"{target} is not a readable directory: {e}") from e
        return sorted(names)
