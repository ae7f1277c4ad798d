"""
Tests for Pair Classifier, Placeholder Synthesizer and structural predicates
============================================================================
"""

from conftest import image_block, table_block, text_block
from revision_compare.classifier import (
    LEFT, RIGHT, PairClassifier, render_inline, render_side, truncate_preview
)
from revision_compare.models import BlockKind, ComparisonSummary, ContentBlock, Highlight
from revision_compare.placeholders import PlaceholderSynthesizer
from revision_compare.structural import images_equal, tables_equal
from revision_compare.text_diff import DiffOp, DiffSpan


class TestStructuralPredicates:
    """Tests for table and image equality."""

    def test_tables_equal(self, sample_table):
        """Identical rows and cells compare equal."""
        assert tables_equal(sample_table, table_block([("Name", "Value"), ("Alpha", "1")]))

    def test_cell_whitespace_ignored(self, sample_table):
        """Cell text is trimmed before comparison."""
        assert tables_equal(sample_table, table_block([(" Name ", "Value"), ("Alpha", "1 ")]))

    def test_changed_cell(self, sample_table):
        """A single changed cell makes tables unequal."""
        assert not tables_equal(sample_table, table_block([("Name", "Value"), ("Alpha", "2")]))

    def test_row_count_differs(self, sample_table):
        """An extra row makes tables unequal."""
        assert not tables_equal(sample_table, table_block([("Name", "Value")]))

    def test_cell_count_differs(self, sample_table):
        """An extra cell makes tables unequal."""
        assert not tables_equal(sample_table, table_block([("Name", "Value", "Unit"), ("Alpha", "1")]))

    def test_missing_blocks(self, sample_table):
        """Missing blocks or structure compare unequal without raising."""
        assert not tables_equal(None, sample_table)
        assert not tables_equal(sample_table, None)
        assert not tables_equal(sample_table, text_block("Name Value Alpha 1"))
        assert not images_equal(None, None)

    def test_malformed_structure(self, sample_table):
        """Unexpected structure payloads compare unequal without raising."""
        odd_image = ContentBlock(BlockKind.IMAGE, '', tag_name='img', structure=('a.png', 'A'))
        assert not images_equal(odd_image, image_block("a.png", "A"))
        assert not images_equal(image_block("a.png", "A"), odd_image)
        odd_table = ContentBlock(BlockKind.TABLE, '', tag_name='table', structure=42)
        assert not tables_equal(odd_table, sample_table)
        ragged = ContentBlock(BlockKind.TABLE, '', tag_name='table', structure=(None, None))
        assert not tables_equal(ragged, sample_table)

    def test_images(self):
        """Images compare on src and alt."""
        assert images_equal(image_block("a.png", "A"), image_block("a.png", "A"))
        assert not images_equal(image_block("a.png", "A"), image_block("b.png", "A"))
        assert not images_equal(image_block("a.png", "A"), image_block("a.png", "Logo"))


class TestRendering:
    """Tests for word-level diff rendering."""

    SPANS = [
        DiffSpan(DiffOp.EQUAL, "The quick "),
        DiffSpan(DiffOp.DELETE, "brown"),
        DiffSpan(DiffOp.INSERT, "red"),
        DiffSpan(DiffOp.EQUAL, " fox & dog"),
    ]

    def test_left_side(self):
        """Left shows its own deletions and a placeholder for insertions."""
        rendered = render_side(self.SPANS, LEFT, 40)
        assert rendered == (
            'The quick <span class="git-inline-removed">brown</span>'
            '<span class="git-inline-placeholder placeholder-added">[+red]</span>'
            ' fox &amp; dog'
        )

    def test_right_side(self):
        """Right shows its own insertions and a placeholder for deletions."""
        rendered = render_side(self.SPANS, RIGHT, 40)
        assert rendered == (
            'The quick <span class="git-inline-placeholder placeholder-removed">[-brown]</span>'
            '<span class="git-inline-added">red</span>'
            ' fox &amp; dog'
        )

    def test_placeholder_is_truncated(self):
        """Only a preview of the other side's text is shown."""
        spans = [DiffSpan(DiffOp.INSERT, "x" * 100)]
        rendered = render_side(spans, LEFT, 10)
        assert "[+" + "x" * 10 + "...]" in rendered
        assert "x" * 11 not in rendered

    def test_inline(self):
        """The combined inline diff shows both sides."""
        assert render_inline(self.SPANS) == (
            'The quick <span class="git-inline-removed">brown</span>'
            '<span class="git-inline-added">red</span> fox &amp; dog'
        )

    def test_truncate_preview(self):
        """Previews are trimmed and cut with an ellipsis."""
        assert truncate_preview("  short  ", 80) == "short"
        assert truncate_preview("abcdef", 3) == "abc..."
        assert truncate_preview(None, 3) == ""


class TestPairClassifier:
    """Tests for matched pair classification."""

    def test_equal_text_unchanged(self):
        """Normalized-equal text is unchanged and not counted."""
        summary = ComparisonSummary()
        pair = PairClassifier().classify(text_block("Hello  World"), text_block("hello world"), summary)
        assert pair.left.highlight is Highlight.NONE
        assert pair.right.highlight is Highlight.NONE
        assert summary.changes == 0

    def test_modified_text(self):
        """Changed text is modified on both sides with payloads."""
        summary = ComparisonSummary()
        pair = PairClassifier().classify(
            text_block("The quick brown fox"), text_block("The quick red fox"), summary
        )
        assert pair.left.highlight is Highlight.MODIFIED
        assert pair.right.highlight is Highlight.MODIFIED
        assert 'git-inline-removed' in pair.left.payload
        assert 'git-inline-added' in pair.right.payload
        assert 'git-inline-added' not in pair.left.payload
        assert pair.inline_html is not None
        assert summary.to_dict() == {'additions': 1, 'deletions': 1, 'changes': 2}

    def test_equal_tables(self, sample_table):
        """Structurally equal tables are unchanged."""
        summary = ComparisonSummary()
        pair = PairClassifier().classify(sample_table, table_block([("Name", "Value"), ("Alpha", "1")]),
                                         summary)
        assert pair.left.highlight is Highlight.NONE
        assert summary.changes == 0

    def test_changed_table(self, sample_table):
        """A changed table is modified without a text payload."""
        summary = ComparisonSummary()
        pair = PairClassifier().classify(sample_table, table_block([("Name", "Value"), ("Alpha", "2")]),
                                         summary)
        assert pair.left.highlight is Highlight.MODIFIED
        assert pair.right.highlight is Highlight.MODIFIED
        assert pair.left.payload is None
        assert summary.to_dict() == {'additions': 1, 'deletions': 1, 'changes': 2}

    def test_changed_image(self):
        """A changed image is modified."""
        summary = ComparisonSummary()
        pair = PairClassifier().classify(image_block("a.png"), image_block("b.png"), summary)
        assert pair.right.highlight is Highlight.MODIFIED
        assert summary.changes == 2

    def test_kind_mismatch(self, sample_table):
        """Different kinds are modified without a content diff."""
        summary = ComparisonSummary()
        pair = PairClassifier().classify(sample_table, text_block("Name Value Alpha 1"), summary)
        assert pair.left.highlight is Highlight.MODIFIED
        assert pair.right.highlight is Highlight.MODIFIED
        assert pair.left.payload is None and pair.right.payload is None
        assert summary.changes == 2

    def test_injected_predicate(self, sample_table):
        """Predicates can be replaced per kind."""
        summary = ComparisonSummary()
        classifier = PairClassifier(predicates={BlockKind.TABLE: lambda a, b: True})
        pair = classifier.classify(sample_table, table_block([("Other",)]), summary)
        assert pair.left.highlight is Highlight.NONE


class TestPlaceholderSynthesizer:
    """Tests for insertion and deletion annotations."""

    def test_insertion(self):
        """An inserted block gets a placeholder on the left."""
        summary = ComparisonSummary()
        left, right = PlaceholderSynthesizer(preview_length=5).insertion(
            text_block("New paragraph", tag='li'), summary
        )
        assert left.is_placeholder
        assert left.highlight is Highlight.PLACEHOLDER_ADDED
        assert left.preview == "New p..."
        assert left.tag_name == 'li'
        assert right.highlight is Highlight.ADDED
        assert summary.to_dict() == {'additions': 1, 'deletions': 0, 'changes': 1}

    def test_deletion_keeps_kind(self, sample_table):
        """A removed table leaves a table-kind placeholder on the right."""
        summary = ComparisonSummary()
        left, right = PlaceholderSynthesizer().deletion(sample_table, summary)
        assert left.highlight is Highlight.REMOVED
        assert right.is_placeholder
        assert right.kind is BlockKind.TABLE
        assert right.highlight is Highlight.PLACEHOLDER_REMOVED
        assert summary.to_dict() == {'additions': 0, 'deletions': 1, 'changes': 1}


class TestComparisonSummary:
    """Tests for the summary accumulator."""

    def test_changes_derived(self):
        """changes is always the sum of additions and deletions."""
        summary = ComparisonSummary()
        summary.record_addition()
        summary.record_modification()
        summary.record_deletion()
        assert summary.additions == 2
        assert summary.deletions == 2
        assert summary.changes == 4
