"""
Pair Classifier v1.0.0
======================
Decides whether a matched block pair is unchanged or modified and,
for modified text, renders word-level highlighting for each side.

Each side shows its own changes as direct highlights and the other
side's exclusive text as a short, de-emphasized inline placeholder.
"""

import html
from typing import Dict, List, NamedTuple, Optional

from .config_logging import get_logger, get_config
from .models import AnnotatedBlock, BlockKind, ComparisonSummary, ContentBlock, Highlight
from .similarity import texts_equal
from .structural import DEFAULT_PREDICATES, StructuralPredicate
from .text_diff import DiffOp, DiffSpan, TextDiffOracle, get_default_oracle

logger = get_logger('revision_compare.classifier')

LEFT = 'left'
RIGHT = 'right'

INLINE_ADDED_CLASS = 'git-inline-added'
INLINE_REMOVED_CLASS = 'git-inline-removed'
INLINE_PLACEHOLDER_CLASS = 'git-inline-placeholder'


def truncate_preview(text: str, length: int) -> str:
    """Trim text to at most length characters, marking the cut with '...'."""
    text = (text or '').strip()
    if len(text) <= length:
        return text
    return text[:length] + '...'


def render_inline(spans: List[DiffSpan]) -> str:
    """Render an edit script as a single inline diff showing both sides."""
    parts = []
    for span in spans:
        escaped = html.escape(span.text)
        if span.op is DiffOp.INSERT:
            parts.append(f'<span class="{INLINE_ADDED_CLASS}">{escaped}</span>')
        elif span.op is DiffOp.DELETE:
            parts.append(f'<span class="{INLINE_REMOVED_CLASS}">{escaped}</span>')
        else:
            parts.append(escaped)
    return ''.join(parts)


def render_side(spans: List[DiffSpan], side: str, inline_preview_length: int) -> str:
    """
    Render an edit script as markup for one side of the view.

    Args:
        spans: Edit script from the oracle (semantic cleanup applied)
        side: LEFT (original) or RIGHT (modified)
        inline_preview_length: Maximum characters of the other side's
                               text shown in an inline placeholder

    Returns:
        Markup with equal text escaped and changes wrapped in spans
    """
    parts = []
    for span in spans:
        if span.op is DiffOp.EQUAL:
            parts.append(html.escape(span.text))
        elif span.op is DiffOp.INSERT:
            if side == RIGHT:
                parts.append(f'<span class="{INLINE_ADDED_CLASS}">{html.escape(span.text)}</span>')
            else:
                preview = html.escape(truncate_preview(span.text, inline_preview_length))
                parts.append(
                    f'<span class="{INLINE_PLACEHOLDER_CLASS} placeholder-added">[+{preview}]</span>'
                )
        elif span.op is DiffOp.DELETE:
            if side == LEFT:
                parts.append(f'<span class="{INLINE_REMOVED_CLASS}">{html.escape(span.text)}</span>')
            else:
                preview = html.escape(truncate_preview(span.text, inline_preview_length))
                parts.append(
                    f'<span class="{INLINE_PLACEHOLDER_CLASS} placeholder-removed">[-{preview}]</span>'
                )
    return ''.join(parts)


class ClassifiedPair(NamedTuple):
    """Annotations for both sides of a matched pair."""
    left: AnnotatedBlock
    right: AnnotatedBlock
    inline_html: Optional[str] = None


class PairClassifier:
    """
    Classifies matched block pairs and records modifications in the summary.
    """

    def __init__(
        self,
        oracle: Optional[TextDiffOracle] = None,
        predicates: Optional[Dict[BlockKind, StructuralPredicate]] = None,
        inline_preview_length: Optional[int] = None
    ):
        """
        Initialize the classifier.

        Args:
            oracle: Diff oracle for word-level diffs
            predicates: Structural equality predicate per block kind,
                        overriding the table/image defaults
            inline_preview_length: Characters shown in inline placeholders
        """
        self.oracle = oracle or get_default_oracle()
        self.predicates = dict(DEFAULT_PREDICATES)
        if predicates:
            self.predicates.update(predicates)
        if inline_preview_length is None:
            inline_preview_length = get_config().inline_preview_length
        self.inline_preview_length = inline_preview_length

    def classify(
        self,
        left: ContentBlock,
        right: ContentBlock,
        summary: ComparisonSummary
    ) -> ClassifiedPair:
        """
        Classify a matched pair.

        Args:
            left: Original block
            right: Modified block
            summary: Totals to update when the pair is modified

        Returns:
            ClassifiedPair; inline_html is set for modified text pairs

        Raises:
            DiffOracleError: if the word-level diff fails; the summary is
                             left untouched in that case
        """
        if left.kind is not right.kind:
            logger.debug(f"Kind mismatch {left.kind.value}/{right.kind.value} "
                         f"at left[{left.position}], right[{right.position}]")
            return self.mark_modified(left, right, summary)

        if left.kind is not BlockKind.TEXT:
            predicate = self.predicates[left.kind]
            if predicate(left, right):
                return self._unchanged(left, right)
            return self.mark_modified(left, right, summary)

        if texts_equal(left.plain_text, right.plain_text):
            return self._unchanged(left, right)

        spans = self.oracle.diff_semantic(left.plain_text, right.plain_text)
        summary.record_modification()
        return ClassifiedPair(
            AnnotatedBlock.wrap(left, Highlight.MODIFIED,
                                render_side(spans, LEFT, self.inline_preview_length)),
            AnnotatedBlock.wrap(right, Highlight.MODIFIED,
                                render_side(spans, RIGHT, self.inline_preview_length)),
            render_inline(spans),
        )

    def mark_modified(
        self,
        left: ContentBlock,
        right: ContentBlock,
        summary: ComparisonSummary
    ) -> ClassifiedPair:
        """Tag both sides modified without an inline payload."""
        summary.record_modification()
        return ClassifiedPair(
            AnnotatedBlock.wrap(left, Highlight.MODIFIED),
            AnnotatedBlock.wrap(right, Highlight.MODIFIED),
        )

    def _unchanged(self, left: ContentBlock, right: ContentBlock) -> ClassifiedPair:
        return ClassifiedPair(
            AnnotatedBlock.wrap(left, Highlight.NONE),
            AnnotatedBlock.wrap(right, Highlight.NONE),
        )
