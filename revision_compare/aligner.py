"""
Block Aligner v1.0.0
====================
Greedy forward alignment of two block sequences with bounded lookahead.

Two cursors walk the original (left) and modified (right) block lists.
A confident pair is matched directly; otherwise each current block is
scored against a small window ahead on the opposite side to decide
whether the other block is a pure insertion or deletion. When neither
window holds a strong match the pair is matched anyway, so at least
one cursor advances on every step.
"""

from typing import List, Optional, Sequence

from .config_logging import get_logger, get_config
from .models import AlignmentDecision, ContentBlock
from .similarity import find_best_match, similarity, texts_equal
from .text_diff import TextDiffOracle

logger = get_logger('revision_compare.aligner')


class BlockAligner:
    """Aligns original and modified block lists for comparison."""

    def __init__(
        self,
        match_threshold: Optional[float] = None,
        lookahead_window: Optional[int] = None,
        oracle: Optional[TextDiffOracle] = None
    ):
        """
        Initialize the aligner.

        Args:
            match_threshold: Similarity a pair must exceed to count as a
                             confident correspondence (0.0 to 1.0)
            lookahead_window: Number of upcoming blocks examined on the
                              opposite side when the current pair is not confident
            oracle: Diff oracle used for similarity scoring
        """
        config = get_config()
        self.match_threshold = config.match_threshold if match_threshold is None else match_threshold
        self.lookahead_window = config.lookahead_window if lookahead_window is None else lookahead_window
        self.oracle = oracle

    def align(
        self,
        left: Sequence[ContentBlock],
        right: Sequence[ContentBlock]
    ) -> List[AlignmentDecision]:
        """
        Align two block lists.

        Every left index and every right index appears in exactly one
        decision, in increasing order on each side.

        Args:
            left: Blocks of the original document
            right: Blocks of the modified document

        Returns:
            Ordered list of AlignmentDecision
        """
        decisions: List[AlignmentDecision] = []
        i = 0
        j = 0

        while i < len(left) or j < len(right):
            if i >= len(left):
                decisions.append(AlignmentDecision.insertion(j))
                j += 1
                continue
            if j >= len(right):
                decisions.append(AlignmentDecision.deletion(i))
                i += 1
                continue

            left_block = left[i]
            right_block = right[j]

            if self._is_confident(left_block, right_block):
                decisions.append(AlignmentDecision.match(i, j))
                i += 1
                j += 1
                continue

            window_end = self.lookahead_window + 1
            left_ahead = find_best_match(left_block, right[j + 1:j + window_end], self.oracle)
            right_ahead = find_best_match(right_block, left[i + 1:i + window_end], self.oracle)

            if left_ahead.score > right_ahead.score and left_ahead.score > self.match_threshold:
                # left_block matches further right; right_block is new
                logger.debug(f"Insertion at right[{j}], left[{i}] matches "
                             f"right[{j + 1 + left_ahead.index}] ({left_ahead.score:.2f})")
                decisions.append(AlignmentDecision.insertion(j))
                j += 1
            elif right_ahead.score > self.match_threshold:
                logger.debug(f"Deletion at left[{i}], right[{j}] matches "
                             f"left[{i + 1 + right_ahead.index}] ({right_ahead.score:.2f})")
                decisions.append(AlignmentDecision.deletion(i))
                i += 1
            else:
                # Best-effort pairing, classified downstream
                decisions.append(AlignmentDecision.match(i, j))
                i += 1
                j += 1

        logger.debug(f"Aligned {len(left)} vs {len(right)} blocks into {len(decisions)} decisions")
        return decisions

    def _is_confident(self, left_block: ContentBlock, right_block: ContentBlock) -> bool:
        """Check whether a pair corresponds without looking ahead."""
        if texts_equal(left_block.plain_text, right_block.plain_text):
            return True
        score = similarity(left_block.plain_text, right_block.plain_text, self.oracle)
        return score > self.match_threshold


def align_blocks(
    left: Sequence[ContentBlock],
    right: Sequence[ContentBlock],
    **kwargs
) -> List[AlignmentDecision]:
    """
    Align two block lists with a default-configured aligner.

    Args:
        left: Original blocks
        right: Modified blocks
        **kwargs: Passed to BlockAligner

    Returns:
        Ordered list of AlignmentDecision
    """
    return BlockAligner(**kwargs).align(left, right)
