"""
Placeholder Synthesizer
=======================
Builds the annotation pair for blocks that exist on one side only:
the block itself, highlighted, and a placeholder of the same kind on
the opposite side so both columns keep the same row structure.
"""

from typing import Optional, Tuple

from .classifier import truncate_preview
from .config_logging import get_config
from .models import AnnotatedBlock, ComparisonSummary, ContentBlock, Highlight


class PlaceholderSynthesizer:
    """Emits (left, right) annotations for insertions and deletions."""

    def __init__(self, preview_length: Optional[int] = None):
        self.preview_length = get_config().preview_length if preview_length is None else preview_length

    def insertion(
        self,
        block: ContentBlock,
        summary: ComparisonSummary
    ) -> Tuple[AnnotatedBlock, AnnotatedBlock]:
        """Right block was added: placeholder on the left, ADDED on the right."""
        summary.record_addition()
        placeholder = AnnotatedBlock.placeholder_for(
            block, Highlight.PLACEHOLDER_ADDED, truncate_preview(block.plain_text, self.preview_length)
        )
        return placeholder, AnnotatedBlock.wrap(block, Highlight.ADDED)

    def deletion(
        self,
        block: ContentBlock,
        summary: ComparisonSummary
    ) -> Tuple[AnnotatedBlock, AnnotatedBlock]:
        """Left block was removed: REMOVED on the left, placeholder on the right."""
        summary.record_deletion()
        placeholder = AnnotatedBlock.placeholder_for(
            block, Highlight.PLACEHOLDER_REMOVED, truncate_preview(block.plain_text, self.preview_length)
        )
        return AnnotatedBlock.wrap(block, Highlight.REMOVED), placeholder
