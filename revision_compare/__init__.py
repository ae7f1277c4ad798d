"""
Revision Compare v1.0.0
=======================
Side-by-side "track changes" comparison of two revisions of a
structured document.

Features:
- Block alignment with bounded lookahead (insertions, deletions, shifts)
- Unchanged / modified / added / removed classification per block
- Word-level diff highlighting inside modified text blocks
- Placeholders that keep both panels row-aligned
- Table and image structural comparison
- Addition / deletion summary
"""

from .aligner import BlockAligner, align_blocks
from .classifier import PairClassifier
from .differ import (
    DocumentDiffer,
    compare_blocks,
    compare_html_documents,
    compare_texts,
    highlight_differences
)
from .extractor import extract_blocks
from .models import (
    AlignmentDecision,
    AnnotatedBlock,
    BlockKind,
    ComparisonResult,
    ComparisonSummary,
    ContentBlock,
    DecisionKind,
    Highlight,
    HtmlComparison
)
from .placeholders import PlaceholderSynthesizer
from .renderer import render_blocks
from .similarity import find_best_match, similarity, texts_equal

__version__ = "1.0.0"
__all__ = [
    'BlockAligner',
    'align_blocks',
    'PairClassifier',
    'PlaceholderSynthesizer',
    'DocumentDiffer',
    'compare_blocks',
    'compare_html_documents',
    'compare_texts',
    'highlight_differences',
    'extract_blocks',
    'render_blocks',
    'find_best_match',
    'similarity',
    'texts_equal',
    'AlignmentDecision',
    'AnnotatedBlock',
    'BlockKind',
    'ComparisonResult',
    'ComparisonSummary',
    'ContentBlock',
    'DecisionKind',
    'Highlight',
    'HtmlComparison'
]
