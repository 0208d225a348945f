"""Abstract store interface.

A store persists exactly one ExtractionResult: the single artifact produced
per run.
"""

from __future__ import annotations

import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from revex_core.models import ExtractionResult


class BaseStore(ABC):
    """File-backed persistence for one extraction result."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)

    @abstractmethod
    def save(self, result: ExtractionResult) -> None:
        """Write the result, replacing any previous file at ``path``."""

    @abstractmethod
    def load(self) -> ExtractionResult:
        """Read a result previously written by save().

        Raises FileNotFoundError if nothing was written.
        """

    def close(self) -> None:
        """Release any resources held by the store.

        Default is a no-op so callers can always call close() safely.
        """

    def _write_atomic(self, text: str) -> None:
        """Write ``text`` to ``path`` via a temporary file and rename.

        Readers never observe a half-written document, and a failed write
        leaves any previous file untouched.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(text)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
