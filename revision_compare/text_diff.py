"""
Text Diff Oracle v1.0.0
=======================
Thin adapter around diff-match-patch producing an ordered edit script
(equal / insert / delete spans) between two plain strings.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

import diff_match_patch as dmp_module

from .config_logging import get_logger, get_config, CompareConfig, DiffOracleError

logger = get_logger('revision_compare.text_diff')


class DiffOp(Enum):
    """Edit script operation, valued as diff-match-patch encodes it."""
    DELETE = -1
    EQUAL = 0
    INSERT = 1


@dataclass(frozen=True)
class DiffSpan:
    """One span of an edit script."""
    op: DiffOp
    text: str


class TextDiffOracle:
    """
    Computes edit scripts between two strings.

    Concatenating the EQUAL and DELETE spans reconstructs the first
    string, the EQUAL and INSERT spans the second.

    With a positive diff_timeout diff-match-patch may stop early on long
    inputs, so scores (and alignments) can vary between runs. The
    default of 0 always runs to completion.
    """

    def __init__(self, config: Optional[CompareConfig] = None):
        config = config or get_config()
        self.dmp = dmp_module.diff_match_patch()
        self.dmp.Diff_Timeout = config.diff_timeout
        self.dmp.Diff_EditCost = config.diff_edit_cost

    def diff(self, a: str, b: str, cleanup: bool = False) -> List[DiffSpan]:
        """
        Diff two strings.

        Args:
            a: Original text
            b: Modified text
            cleanup: Apply semantic cleanup to merge trivial fragments

        Returns:
            Ordered list of DiffSpan

        Raises:
            DiffOracleError: if diff-match-patch fails on the input
        """
        try:
            diffs = self.dmp.diff_main(a or "", b or "")
            if cleanup:
                self.dmp.diff_cleanupSemantic(diffs)
        except Exception as e:
            logger.error(f"diff-match-patch failed: {e}", exc_info=True,
                         left_length=len(a or ""), right_length=len(b or ""))
            raise DiffOracleError(f"Text diff failed: {type(e).__name__}") from e

        return [DiffSpan(DiffOp(op), text) for op, text in diffs]

    def diff_semantic(self, a: str, b: str) -> List[DiffSpan]:
        """Diff with semantic cleanup, for word-level highlighting."""
        return self.diff(a, b, cleanup=True)


_default_oracle: Optional[TextDiffOracle] = None


def get_default_oracle() -> TextDiffOracle:
    """Get or create the shared oracle built from the global configuration."""
    global _default_oracle
    if _default_oracle is None:
        _default_oracle = TextDiffOracle()
    return _default_oracle


def reset_default_oracle():
    """Reset the shared oracle (for testing)."""
    global _default_oracle
    _default_oracle = None
