"""Per-file classification of function changes."""

import logging
from dataclasses import dataclass, field
from typing import Set

from .extractor import FunctionInventory

logger = logging.getLogger(__name__)


@dataclass
class FileClassification:
    """Added, deleted and changed function keys of one file."""

    path: str
    added: Set[str] = field(default_factory=set)
    deleted: Set[str] = field(default_factory=set)
    changed: Set[str] = field(default_factory=set)

    def qualified(self, keys: Set[str]) -> Set[str]:
        """Prefix function keys with the file path as ``<path>::<key>``."""
        return {f"{self.path}::{key}" for key in keys}

    @property
    def is_empty(self) -> bool:
        return not (self.added or self.deleted or self.changed)


class ChangeClassifier:
    """Compares two inventories of the same file."""

    def classify(
        self, path: str, old_inv: FunctionInventory, new_inv: FunctionInventory
    ) -> FileClassification:
        """Split keys into added, deleted and changed.

        A key present on both sides is changed when its signature set differs;
        only when signatures match are the body sets compared.
        """
        old_keys = old_inv.keys()
        new_keys = new_inv.keys()

        result = FileClassification(
            path=path,
            added=new_keys - old_keys,
            deleted=old_keys - new_keys,
        )

        for key in old_keys & new_keys:
            if old_inv[key].signatures != new_inv[key].signatures:
                logger.debug("Function signature changed", extra={"path": path, "function": key})
                result.changed.add(key)
            elif old_inv[key].bodies != new_inv[key].bodies:
                logger.debug("Function body changed", extra={"path": path, "function": key})
                result.changed.add(key)

        return result
