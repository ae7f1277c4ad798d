"""
Revision Compare Models v1.0.0
==============================
Data classes for blocks, alignment decisions and comparison results.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Dict, Optional, Any, Tuple


class BlockKind(Enum):
    """Structural kind of a content block."""
    TEXT = "text"
    TABLE = "table"
    IMAGE = "image"


class DecisionKind(Enum):
    """Verdict for one step of the alignment."""
    MATCH = "match"
    INSERTION = "insertion"
    DELETION = "deletion"


class Highlight(Enum):
    """Annotation tag attached to a block on one side of the view."""
    NONE = "none"
    ADDED = "added"
    REMOVED = "removed"
    MODIFIED = "modified"
    PLACEHOLDER_ADDED = "empty-space-added"
    PLACEHOLDER_REMOVED = "empty-space-removed"

    @property
    def is_placeholder(self) -> bool:
        return self in (Highlight.PLACEHOLDER_ADDED, Highlight.PLACEHOLDER_REMOVED)


@dataclass(frozen=True)
class ContentBlock:
    """
    One unit of document structure.

    Attributes:
        kind: Structural kind (headings, paragraphs and list items are TEXT)
        plain_text: Whitespace-trimmed text content
        markup: Inner serialized markup, opaque to the aligner
        position: 0-based index in the block's own document
        tag_name: Source element name ('p', 'h2', 'table', ...)
        structure: Per-kind payload for structural equality
                   (table rows of cell texts, image src/alt)
        attributes: Source element attributes as (name, value) pairs
    """
    kind: BlockKind
    plain_text: str
    markup: str = ""
    position: int = 0
    tag_name: str = "p"
    structure: Optional[Any] = None
    attributes: Tuple[Tuple[str, str], ...] = ()

    @property
    def is_table(self) -> bool:
        return self.kind is BlockKind.TABLE

    @property
    def is_image(self) -> bool:
        return self.kind is BlockKind.IMAGE

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'kind': self.kind.value,
            'plain_text': self.plain_text,
            'markup': self.markup,
            'position': self.position,
            'tag_name': self.tag_name,
        }


@dataclass(frozen=True)
class AlignmentDecision:
    """
    One step of the alignment output.

    MATCH carries both indices, INSERTION only the right index,
    DELETION only the left index.
    """
    kind: DecisionKind
    left_index: Optional[int] = None
    right_index: Optional[int] = None

    @classmethod
    def match(cls, left_index: int, right_index: int) -> 'AlignmentDecision':
        return cls(DecisionKind.MATCH, left_index, right_index)

    @classmethod
    def insertion(cls, right_index: int) -> 'AlignmentDecision':
        return cls(DecisionKind.INSERTION, None, right_index)

    @classmethod
    def deletion(cls, left_index: int) -> 'AlignmentDecision':
        return cls(DecisionKind.DELETION, left_index, None)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'type': self.kind.value,
            'left_index': self.left_index,
            'right_index': self.right_index,
        }


@dataclass
class AnnotatedBlock:
    """
    Output unit for one side of the comparison.

    Either wraps a ContentBlock (highlight NONE/ADDED/REMOVED/MODIFIED,
    with an optional rendered diff payload), or is a placeholder standing
    in for the opposite side's block (block is None).

    Attributes:
        highlight: Annotation tag
        block: Wrapped block, None for placeholders
        payload: Rendered markup with inline highlight spans
        placeholder_kind: Kind of the opposite block (placeholders only)
        placeholder_tag: Element name of the opposite block (placeholders only)
        preview: Truncated text of the opposite block (placeholders only)
    """
    highlight: Highlight
    block: Optional[ContentBlock] = None
    payload: Optional[str] = None
    placeholder_kind: Optional[BlockKind] = None
    placeholder_tag: Optional[str] = None
    preview: str = ""

    @classmethod
    def wrap(cls, block: ContentBlock, highlight: Highlight,
             payload: Optional[str] = None) -> 'AnnotatedBlock':
        return cls(highlight=highlight, block=block, payload=payload)

    @classmethod
    def placeholder_for(cls, source: ContentBlock, highlight: Highlight,
                        preview: str) -> 'AnnotatedBlock':
        return cls(
            highlight=highlight,
            placeholder_kind=source.kind,
            placeholder_tag=source.tag_name,
            preview=preview,
        )

    @property
    def is_placeholder(self) -> bool:
        return self.block is None

    @property
    def kind(self) -> BlockKind:
        if self.block is not None:
            return self.block.kind
        return self.placeholder_kind or BlockKind.TEXT

    @property
    def tag_name(self) -> str:
        if self.block is not None:
            return self.block.tag_name
        return self.placeholder_tag or 'p'

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data = {
            'highlight': self.highlight.value,
            'kind': self.kind.value,
            'tag_name': self.tag_name,
            'is_placeholder': self.is_placeholder,
        }
        if self.block is not None:
            data['block'] = self.block.to_dict()
        if self.payload is not None:
            data['payload'] = self.payload
        if self.is_placeholder:
            data['preview'] = self.preview
        return data


@dataclass
class ComparisonSummary:
    """
    Running totals for one comparison run.

    A modified pair counts as one addition and one deletion;
    changes is always derived from the two counters.
    """
    additions: int = 0
    deletions: int = 0

    @property
    def changes(self) -> int:
        return self.additions + self.deletions

    def record_addition(self):
        self.additions += 1

    def record_deletion(self):
        self.deletions += 1

    def record_modification(self):
        self.additions += 1
        self.deletions += 1

    def to_dict(self) -> Dict[str, int]:
        """Convert to dictionary for JSON serialization."""
        return {
            'additions': self.additions,
            'deletions': self.deletions,
            'changes': self.changes
        }


@dataclass
class DetailedLine:
    """
    A row of the detailed change report.

    Attributes:
        v1: 1-based position in the original document ('' when added)
        v2: 1-based position in the modified document ('' when removed)
        status: 'UNCHANGED', 'MODIFIED', 'ADDED' or 'REMOVED'
        diff_html: Inline diff markup for the row
        format_changes: Human-readable change notes
        kind: Block kind of the row
    """
    v1: str
    v2: str
    status: str
    diff_html: str = ""
    format_changes: List[str] = field(default_factory=list)
    kind: BlockKind = BlockKind.TEXT

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'v1': self.v1,
            'v2': self.v2,
            'status': self.status,
            'diffHtml': self.diff_html,
            'formatChanges': list(self.format_changes),
        }


@dataclass
class DetailedReport:
    """Per-decision change report, split by block kind for tables and images."""
    lines: List[DetailedLine] = field(default_factory=list)
    tables: List[DetailedLine] = field(default_factory=list)
    images: List[DetailedLine] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'lines': [line.to_dict() for line in self.lines],
            'tables': [line.to_dict() for line in self.tables],
            'images': [line.to_dict() for line in self.images],
        }


@dataclass
class ComparisonResult:
    """
    Complete block comparison result.

    Attributes:
        decisions: Alignment decisions in output order
        left: Annotated blocks for the original side
        right: Annotated blocks for the modified side
        summary: Addition/deletion totals
        detailed: Per-decision report
    """
    decisions: List[AlignmentDecision] = field(default_factory=list)
    left: List[AnnotatedBlock] = field(default_factory=list)
    right: List[AnnotatedBlock] = field(default_factory=list)
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)
    detailed: DetailedReport = field(default_factory=DetailedReport)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'decisions': [d.to_dict() for d in self.decisions],
            'left': [b.to_dict() for b in self.left],
            'right': [b.to_dict() for b in self.right],
            'summary': self.summary.to_dict(),
            'detailed': self.detailed.to_dict()
        }


@dataclass
class HtmlComparison:
    """
    Result of comparing two HTML documents.

    Attributes:
        left_html: Rendered original side
        right_html: Rendered modified side
        summary: Addition/deletion totals
        detailed: Per-decision report
        identical: True when the plain texts matched and no alignment ran
    """
    left_html: str
    right_html: str
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)
    detailed: DetailedReport = field(default_factory=DetailedReport)
    identical: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'left_html': self.left_html,
            'right_html': self.right_html,
            'summary': self.summary.to_dict(),
            'detailed': self.detailed.to_dict(),
            'identical': self.identical
        }


@dataclass
class TextSpan:
    """A span of a plain text comparison ('equal', 'insert' or 'delete')."""
    type: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        return {'type': self.type, 'content': self.content}


@dataclass
class TextComparison:
    """Character-level comparison of two plain strings, split by side."""
    left: List[TextSpan] = field(default_factory=list)
    right: List[TextSpan] = field(default_factory=list)
    summary: ComparisonSummary = field(default_factory=ComparisonSummary)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'left': [s.to_dict() for s in self.left],
            'right': [s.to_dict() for s in self.right],
            'summary': self.summary.to_dict()
        }
