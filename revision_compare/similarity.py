"""
Text Similarity v1.0.0
======================
Similarity scoring, normalized equality and bounded lookahead matching
used by the block aligner.
"""

import re
from dataclasses import dataclass
from typing import Optional, Sequence

from .models import ContentBlock
from .text_diff import DiffOp, TextDiffOracle, get_default_oracle

_WHITESPACE_RE = re.compile(r'\s+')


def normalize_text(text: str) -> str:
    """Trim, collapse whitespace runs to one space and lower-case."""
    return _WHITESPACE_RE.sub(' ', (text or '').strip()).lower()


def texts_equal(a: str, b: str) -> bool:
    """Whitespace- and case-insensitive equality."""
    return normalize_text(a) == normalize_text(b)


def similarity(a: str, b: str, oracle: Optional[TextDiffOracle] = None) -> float:
    """
    Score how similar two strings are, in [0, 1].

    The score is the total length of the spans the oracle marks equal,
    divided by the length of the longer string.

    Args:
        a: First text
        b: Second text
        oracle: Diff oracle (shared default when omitted)

    Returns:
        1.0 when both are empty, 0.0 when exactly one is empty
    """
    if not a and not b:
        return 1.0
    if not a or not b:
        return 0.0

    oracle = oracle or get_default_oracle()
    unchanged = sum(len(span.text) for span in oracle.diff(a, b) if span.op is DiffOp.EQUAL)
    return unchanged / max(len(a), len(b))


@dataclass(frozen=True)
class LookaheadMatch:
    """Best candidate found in a lookahead window."""
    score: float = 0.0
    index: Optional[int] = None


def find_best_match(
    target: ContentBlock,
    candidates: Sequence[ContentBlock],
    oracle: Optional[TextDiffOracle] = None
) -> LookaheadMatch:
    """
    Find the candidate most similar to target.

    Only a strictly higher score replaces the current best, so ties keep
    the lowest index. A candidate scoring 0 is never selected.

    Args:
        target: Block to match
        candidates: Window of upcoming blocks from the other document
        oracle: Diff oracle (shared default when omitted)

    Returns:
        LookaheadMatch with the best score and its index in candidates
    """
    best = LookaheadMatch()
    for index, candidate in enumerate(candidates):
        score = similarity(target.plain_text, candidate.plain_text, oracle)
        if score > best.score:
            best = LookaheadMatch(score=score, index=index)
    return best
