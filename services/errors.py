# services/errors.py
from __future__ import annotations

from typing import Dict


class NotFoundError(ValueError):
    pass


class ConflictError(ValueError):
    pass


class TaxonomyInUseError(ConflictError):
    def __init__(self, references: Dict[str, int]):
        self.references = references
        total = sum(references.values())
        super().__init__(f"Cannot delete: {total} position(s) still reference this taxonomy item")
