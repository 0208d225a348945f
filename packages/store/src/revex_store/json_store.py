"""JSONStore: the default output format.

Indented so successive extractions diff cleanly under version control.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING

from revex_store.base import BaseStore
from revex_store.serialize import result_from_dict, result_to_dict

if TYPE_CHECKING:
    from revex_core.models import ExtractionResult

logger = logging.getLogger(__name__)


class JSONStore(BaseStore):
    def save(self, result: ExtractionResult) -> None:
        self._write_atomic(json.dumps(result_to_dict(result), indent=2, ensure_ascii=False) + "\n")
        logger.debug("Wrote %d review(s) to %s", result.total_comments, self.path)

    def load(self) -> ExtractionResult:
        with open(self.path, encoding="utf-8") as f:
            return result_from_dict(json.load(f))
