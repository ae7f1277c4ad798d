"""
HTML Renderer v1.0.0
====================
Turns an annotated block sequence back into markup for one panel of
the side-by-side view.
"""

import html
from typing import Iterable, List

from .models import AnnotatedBlock, BlockKind, Highlight

VOID_TAGS = frozenset(('img', 'br', 'hr'))

LINE_CLASSES = {
    Highlight.ADDED: 'git-line-added',
    Highlight.REMOVED: 'git-line-removed',
    Highlight.MODIFIED: 'git-line-modified',
}

KIND_CLASS_PREFIX = {
    BlockKind.TABLE: 'git-table',
    BlockKind.IMAGE: 'git-image',
}

PLACEHOLDER_MIN_HEIGHT = {
    BlockKind.TEXT: '2.5em',
    BlockKind.TABLE: '120px',
    BlockKind.IMAGE: '180px',
}

PLACEHOLDER_ICONS = {
    BlockKind.TEXT: {Highlight.PLACEHOLDER_ADDED: '+', Highlight.PLACEHOLDER_REMOVED: '−'},
    BlockKind.TABLE: {Highlight.PLACEHOLDER_ADDED: '\U0001F4CA', Highlight.PLACEHOLDER_REMOVED: '\U0001F4CA'},
    BlockKind.IMAGE: {Highlight.PLACEHOLDER_ADDED: '\U0001F5BC', Highlight.PLACEHOLDER_REMOVED: '\U0001F5BC'},
}

PLACEHOLDER_TITLES = {
    Highlight.PLACEHOLDER_ADDED: {
        BlockKind.TEXT: 'Content added in modified document',
        BlockKind.TABLE: 'Table added in modified document',
        BlockKind.IMAGE: 'Image added in modified document',
    },
    Highlight.PLACEHOLDER_REMOVED: {
        BlockKind.TEXT: 'Content removed from original document',
        BlockKind.TABLE: 'Table removed from original document',
        BlockKind.IMAGE: 'Image removed from original document',
    },
}

STRUCTURAL_PREVIEWS = {
    BlockKind.TABLE: 'Table with content...',
    BlockKind.IMAGE: 'Image content...',
}


def _attributes(pairs: Iterable, extra_classes: List[str], style: str = '') -> str:
    attrs = []
    classes = list(extra_classes)
    for name, value in pairs:
        if name == 'class':
            classes.insert(0, value)
            continue
        if name == 'style' and style:
            style = f"{value.rstrip(';')}; {style}"
            continue
        attrs.append(f'{name}="{html.escape(value)}"')
    if classes:
        attrs.append(f'class="{html.escape(" ".join(classes))}"')
    if style:
        attrs.append(f'style="{html.escape(style)}"')
    return (' ' + ' '.join(attrs)) if attrs else ''


def render_placeholder(annotated: AnnotatedBlock) -> str:
    """Render a placeholder standing in for a block on the other side."""
    kind = annotated.kind
    added = annotated.highlight is Highlight.PLACEHOLDER_ADDED
    state = 'added' if added else 'removed'

    # Tables and images cannot hold the placeholder body
    tag = annotated.tag_name if kind is BlockKind.TEXT else 'div'
    if tag in VOID_TAGS:
        tag = 'p'

    preview = STRUCTURAL_PREVIEWS.get(kind) or html.escape(annotated.preview)
    body = (
        f'<div class="placeholder-content placeholder-{state}-content">'
        f'<span class="placeholder-icon">{PLACEHOLDER_ICONS[kind][annotated.highlight]}</span>'
        f'<div class="placeholder-details">'
        f'<div class="placeholder-title">{PLACEHOLDER_TITLES[annotated.highlight][kind]}</div>'
        f'<div class="placeholder-preview">{preview}</div>'
        f'</div></div>'
    )
    attrs = _attributes(
        (),
        ['git-line-placeholder', f'placeholder-{state}'],
        f'min-height: {PLACEHOLDER_MIN_HEIGHT[kind]}',
    )
    return f'<{tag}{attrs}>{body}</{tag}>'


def render_block(annotated: AnnotatedBlock) -> str:
    """Render one annotated block (or placeholder) as markup."""
    if annotated.is_placeholder:
        return render_placeholder(annotated)

    block = annotated.block
    classes = []
    line_class = LINE_CLASSES.get(annotated.highlight)
    if line_class:
        classes.append(line_class)
        prefix = KIND_CLASS_PREFIX.get(block.kind)
        if prefix:
            classes.append(f'{prefix}-{annotated.highlight.value}')

    attrs = _attributes(block.attributes, classes)
    if block.tag_name in VOID_TAGS:
        return f'<{block.tag_name}{attrs}>'

    content = annotated.payload if annotated.payload is not None else block.markup
    return f'<{block.tag_name}{attrs}>{content}</{block.tag_name}>'


def render_blocks(blocks: Iterable[AnnotatedBlock]) -> str:
    """Render a whole panel."""
    return ''.join(render_block(annotated) for annotated in blocks)
