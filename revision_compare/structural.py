"""
Structural Equality Predicates
==============================
Table and image equality checks. Missing blocks or missing structure
compare as unequal; these predicates never raise.
"""

from typing import Callable, Dict, Optional

from .models import BlockKind, ContentBlock

StructuralPredicate = Callable[[Optional[ContentBlock], Optional[ContentBlock]], bool]


def tables_equal(a: Optional[ContentBlock], b: Optional[ContentBlock]) -> bool:
    """
    Compare two tables row by row and cell by cell on trimmed cell text.

    Structure is a sequence of rows, each a sequence of cell texts.
    """
    if a is None or b is None:
        return False
    if not isinstance(a.structure, (tuple, list)) or not isinstance(b.structure, (tuple, list)):
        return False

    rows_a = list(a.structure)
    rows_b = list(b.structure)
    if len(rows_a) != len(rows_b):
        return False

    for cells_a, cells_b in zip(rows_a, rows_b):
        if not isinstance(cells_a, (tuple, list)) or not isinstance(cells_b, (tuple, list)):
            return False
        if len(cells_a) != len(cells_b):
            return False
        for text_a, text_b in zip(cells_a, cells_b):
            if (text_a or '').strip() != (text_b or '').strip():
                return False

    return True


def images_equal(a: Optional[ContentBlock], b: Optional[ContentBlock]) -> bool:
    """Compare two images on src and alt."""
    if a is None or b is None:
        return False
    if not isinstance(a.structure, dict) or not isinstance(b.structure, dict):
        return False

    return (
        a.structure.get('src', '') == b.structure.get('src', '')
        and a.structure.get('alt', '') == b.structure.get('alt', '')
    )


DEFAULT_PREDICATES: Dict[BlockKind, StructuralPredicate] = {
    BlockKind.TABLE: tables_equal,
    BlockKind.IMAGE: images_equal,
}
