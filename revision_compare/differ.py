"""
Document Differ v1.0.0
======================
Block-aligned document comparison with word-level diff highlighting.

Pipeline: blocks -> BlockAligner -> alignment decisions ->
PairClassifier (matches) / PlaceholderSynthesizer (insertions and
deletions) -> two parallel annotated sequences and a summary.

Uses diff-match-patch for similarity scoring and word-level diffs.
"""

import html
from typing import List, Optional, Sequence

from .aligner import BlockAligner
from .classifier import PairClassifier, INLINE_ADDED_CLASS, INLINE_REMOVED_CLASS
from .config_logging import (
    get_logger, get_config, handle_errors, CompareConfig,
    DiffOracleError, StructuredLogger, ValidationError
)
from .extractor import extract_blocks, extract_plain_text
from .models import (
    AlignmentDecision, AnnotatedBlock, BlockKind, ComparisonResult, ComparisonSummary,
    ContentBlock, DecisionKind, DetailedLine, DetailedReport, Highlight,
    HtmlComparison, TextComparison, TextSpan
)
from .placeholders import PlaceholderSynthesizer
from .renderer import render_blocks
from .text_diff import DiffOp, TextDiffOracle

logger = get_logger('revision_compare.differ')

KIND_LABELS = {
    BlockKind.TEXT: 'Line',
    BlockKind.TABLE: 'Table',
    BlockKind.IMAGE: 'Image',
}


class DocumentDiffer:
    """
    Document comparison engine with block alignment
    and word-level diff highlighting.
    """

    def __init__(self, config: Optional[CompareConfig] = None):
        """
        Initialize the differ.

        Args:
            config: Comparison settings (global configuration when omitted)
        """
        self.config = config or get_config()
        self.oracle = TextDiffOracle(self.config)
        self.aligner = BlockAligner(
            match_threshold=self.config.match_threshold,
            lookahead_window=self.config.lookahead_window,
            oracle=self.oracle
        )
        self.classifier = PairClassifier(
            oracle=self.oracle,
            inline_preview_length=self.config.inline_preview_length
        )
        self.placeholders = PlaceholderSynthesizer(self.config.preview_length)

    def compare_blocks(
        self,
        left: Sequence[ContentBlock],
        right: Sequence[ContentBlock]
    ) -> ComparisonResult:
        """
        Compare two block sequences.

        Args:
            left: Blocks of the original document
            right: Blocks of the modified document

        Returns:
            ComparisonResult with decisions, annotated sides and summary
        """
        decisions = self.aligner.align(left, right)
        result = ComparisonResult(decisions=decisions)
        summary = result.summary

        for decision in decisions:
            if decision.kind is DecisionKind.MATCH:
                left_block = left[decision.left_index]
                right_block = right[decision.right_index]
                pair = self._classify(left_block, right_block, summary)
                result.left.append(pair.left)
                result.right.append(pair.right)
                self._report_match(result.detailed, decision, pair.left, pair.inline_html)
            elif decision.kind is DecisionKind.INSERTION:
                block = right[decision.right_index]
                left_ann, right_ann = self.placeholders.insertion(block, summary)
                result.left.append(left_ann)
                result.right.append(right_ann)
                self._report_single(result.detailed, decision, block)
            else:
                block = left[decision.left_index]
                left_ann, right_ann = self.placeholders.deletion(block, summary)
                result.left.append(left_ann)
                result.right.append(right_ann)
                self._report_single(result.detailed, decision, block)

        logger.info(f"Comparison complete: {len(decisions)} decisions "
                    f"(+{summary.additions}, -{summary.deletions})",
                    additions=summary.additions, deletions=summary.deletions)
        return result

    def _classify(self, left_block: ContentBlock, right_block: ContentBlock,
                  summary: ComparisonSummary):
        try:
            return self.classifier.classify(left_block, right_block, summary)
        except DiffOracleError as e:
            logger.warning(f"Word-level diff failed for left[{left_block.position}], "
                           f"right[{right_block.position}]: {e}")
            return self.classifier.mark_modified(left_block, right_block, summary)

    def _report_match(
        self,
        report: DetailedReport,
        decision: AlignmentDecision,
        left_ann: AnnotatedBlock,
        inline_html: Optional[str]
    ):
        """Add a report row for a matched pair."""
        block = left_ann.block
        text = html.escape(block.plain_text)
        if left_ann.highlight is Highlight.NONE:
            line = DetailedLine(
                v1=str(decision.left_index + 1),
                v2=str(decision.right_index + 1),
                status='UNCHANGED',
                diff_html=text,
                kind=block.kind
            )
        else:
            line = DetailedLine(
                v1=str(decision.left_index + 1),
                v2=str(decision.right_index + 1),
                status='MODIFIED',
                diff_html=inline_html if inline_html is not None else text,
                format_changes=[f"{KIND_LABELS[block.kind]} modified" if block.kind is not BlockKind.TEXT
                                else "Content modified"],
                kind=block.kind
            )
        self._add_report_line(report, line)

    def _report_single(self, report: DetailedReport, decision: AlignmentDecision, block: ContentBlock):
        """Add a report row for an inserted or deleted block."""
        label = KIND_LABELS[block.kind]
        text = html.escape(block.plain_text)
        if decision.kind is DecisionKind.INSERTION:
            line = DetailedLine(
                v1="",
                v2=str(decision.right_index + 1),
                status='ADDED',
                diff_html=f'<span class="{INLINE_ADDED_CLASS}">{text}</span>',
                format_changes=[f"{label} added"],
                kind=block.kind
            )
        else:
            line = DetailedLine(
                v1=str(decision.left_index + 1),
                v2="",
                status='REMOVED',
                diff_html=f'<span class="{INLINE_REMOVED_CLASS}">{text}</span>',
                format_changes=[f"{label} removed"],
                kind=block.kind
            )
        self._add_report_line(report, line)

    def _add_report_line(self, report: DetailedReport, line: DetailedLine):
        report.lines.append(line)
        if line.kind is BlockKind.TABLE:
            report.tables.append(line)
        elif line.kind is BlockKind.IMAGE:
            report.images.append(line)

    @handle_errors()
    def compare_html(self, left_html: str, right_html: str) -> HtmlComparison:
        """
        Compare two HTML documents and render both annotated panels.

        Args:
            left_html: Original document markup
            right_html: Modified document markup

        Returns:
            HtmlComparison with rendered panels, summary and report

        Raises:
            ValidationError: if a document exceeds the configured size limit
        """
        left_html = left_html or ""
        right_html = right_html or ""
        self._check_size(left_html, 'left_html')
        self._check_size(right_html, 'right_html')

        StructuredLogger.new_correlation_id()
        with logger.log_operation('compare_html', left_length=len(left_html),
                                  right_length=len(right_html)):
            left_blocks = extract_blocks(left_html)
            right_blocks = extract_blocks(right_html)
            if self._same_content(left_html, right_html, left_blocks, right_blocks):
                logger.info("Documents are identical")
                return HtmlComparison(left_html=left_html, right_html=right_html, identical=True)

            logger.debug(f"Comparing {len(left_blocks)} vs {len(right_blocks)} blocks")

            result = self.compare_blocks(left_blocks, right_blocks)
            return HtmlComparison(
                left_html=render_blocks(result.left),
                right_html=render_blocks(result.right),
                summary=result.summary,
                detailed=result.detailed
            )

    @staticmethod
    def _same_content(
        left_html: str,
        right_html: str,
        left_blocks: List[ContentBlock],
        right_blocks: List[ContentBlock]
    ) -> bool:
        """Plain text agrees and every table/image carries the same structure."""
        if extract_plain_text(left_html).strip() != extract_plain_text(right_html).strip():
            return False
        return [b.structure for b in left_blocks] == [b.structure for b in right_blocks]

    def _check_size(self, markup: str, field: str):
        size = len(markup.encode('utf-8'))
        if size > self.config.max_document_bytes:
            raise ValidationError(
                f"Document exceeds {self.config.max_document_bytes} bytes ({size})",
                field=field
            )

    def compare_texts(self, left_text: str, right_text: str) -> TextComparison:
        """
        Character-level comparison of two plain strings.

        Each insert and delete span counts once in the summary.

        Args:
            left_text: Original text
            right_text: Modified text

        Returns:
            TextComparison with per-side spans
        """
        comparison = TextComparison()
        for span in self.oracle.diff(left_text or "", right_text or ""):
            if span.op is DiffOp.INSERT:
                comparison.right.append(TextSpan('insert', span.text))
                comparison.summary.record_addition()
            elif span.op is DiffOp.DELETE:
                comparison.left.append(TextSpan('delete', span.text))
                comparison.summary.record_deletion()
            else:
                comparison.left.append(TextSpan('equal', span.text))
                comparison.right.append(TextSpan('equal', span.text))
        return comparison


def highlight_differences(spans: List[TextSpan]) -> str:
    """Render text spans with diff-insert / diff-delete markup."""
    parts = []
    for span in spans:
        escaped = html.escape(span.content)
        if span.type == 'insert':
            parts.append(f'<span class="diff-insert">{escaped}</span>')
        elif span.type == 'delete':
            parts.append(f'<span class="diff-delete">{escaped}</span>')
        else:
            parts.append(escaped)
    return ''.join(parts)


# Convenience functions
def compare_blocks(
    left: Sequence[ContentBlock],
    right: Sequence[ContentBlock]
) -> ComparisonResult:
    """Compare two block sequences with a default-configured differ."""
    return DocumentDiffer().compare_blocks(left, right)


def compare_html_documents(left_html: str, right_html: str) -> HtmlComparison:
    """Compare two HTML documents with a default-configured differ."""
    return DocumentDiffer().compare_html(left_html, right_html)


def compare_texts(left_text: str, right_text: str) -> TextComparison:
    """Compare two plain strings with a default-configured differ."""
    return DocumentDiffer().compare_texts(left_text, right_text)
