"""YAMLStore: block-style YAML output, selected by a .yml/.yaml output path."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import yaml

from revex_store.base import BaseStore
from revex_store.serialize import result_from_dict, result_to_dict

if TYPE_CHECKING:
    from revex_core.models import ExtractionResult

logger = logging.getLogger(__name__)


class YAMLStore(BaseStore):
    def save(self, result: ExtractionResult) -> None:
        text = yaml.safe_dump(
            result_to_dict(result),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )
        self._write_atomic(text)
        logger.debug("Wrote %d review(s) to %s", result.total_comments, self.path)

    def load(self) -> ExtractionResult:
        with open(self.path, encoding="utf-8") as f:
            return result_from_dict(yaml.safe_load(f) or {})
