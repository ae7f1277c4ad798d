"""
HTML Block Extractor v1.0.0
===========================
Splits an HTML fragment into an ordered list of content blocks.

Paragraphs, headings, list items and leaf divs become TEXT blocks;
tables and images/figures are represented once, as TABLE or IMAGE
blocks whose inner structure is kept for structural equality.
An image inside a text block belongs to that block; a text block
holding nothing but one image is itself an IMAGE block.
"""

import html
from typing import List, Optional, Tuple

import lxml.html
from lxml import etree

from .config_logging import get_logger
from .models import BlockKind, ContentBlock

logger = get_logger('revision_compare.extractor')

BLOCK_TAGS = ('p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'li', 'div', 'table', 'img', 'figure')
CONTAINED_BLOCK_TAGS = ('p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'li', 'div', 'table', 'figure')
STRUCTURAL_TAGS = ('table', 'img', 'figure')
TEXT_BLOCK_TAGS = ('p', 'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'li', 'div')


def parse_fragment(markup: str) -> Optional[etree._Element]:
    """
    Parse an HTML fragment under a synthetic <div> root.

    Returns:
        Root element, or None for empty or unparseable input
    """
    if not markup or not markup.strip():
        return None
    try:
        return lxml.html.fragment_fromstring(markup, create_parent='div')
    except (etree.ParserError, etree.XMLSyntaxError, ValueError) as e:
        logger.warning(f"Could not parse HTML fragment: {e}", markup_length=len(markup))
        return None


def extract_plain_text(markup: str) -> str:
    """Text content of an HTML fragment."""
    root = parse_fragment(markup)
    if root is None:
        return ""
    return root.text_content()


def inner_html(element: etree._Element) -> str:
    """Serialize an element's children, without the element's own tag."""
    parts = [html.escape(element.text or '', quote=False)]
    for child in element:
        parts.append(lxml.html.tostring(child, encoding='unicode'))
    return ''.join(parts)


def _table_structure(table: etree._Element) -> Tuple[Tuple[str, ...], ...]:
    rows = []
    for row in table.iter('tr'):
        rows.append(tuple(
            cell.text_content().strip() for cell in row if cell.tag in ('td', 'th')
        ))
    return tuple(rows)


def _image_structure(element: etree._Element) -> dict:
    image = element if element.tag == 'img' else next(element.iter('img'), None)
    if image is None:
        return {'src': '', 'alt': ''}
    return {'src': image.get('src', ''), 'alt': image.get('alt', '')}


def _is_nested(element: etree._Element) -> bool:
    """Elements inside a table or figure belong to that block."""
    for ancestor in element.iterancestors():
        if ancestor.tag in ('table', 'figure'):
            return True
    return False


def _holds_blocks(element: etree._Element) -> bool:
    return next(element.iterdescendants(*CONTAINED_BLOCK_TAGS), None) is not None


def _owned_by_text_block(element: etree._Element) -> bool:
    """Images inside an emitted text block render with that block."""
    for ancestor in element.iterancestors(*TEXT_BLOCK_TAGS):
        # the synthetic root is never a block
        if ancestor.getparent() is not None and not _holds_blocks(ancestor):
            return True
    return False


def _is_lone_image(element: etree._Element) -> bool:
    """A text block with no text and exactly one image, e.g. <p><img></p>."""
    if element.text_content().strip():
        return False
    images = list(element.iter('img'))
    return len(images) == 1


def extract_blocks(markup: str) -> List[ContentBlock]:
    """
    Extract content blocks from an HTML fragment.

    Args:
        markup: HTML fragment

    Returns:
        Blocks in document order with contiguous positions from 0;
        an empty list for empty or unparseable input
    """
    root = parse_fragment(markup)
    if root is None:
        return []

    blocks: List[ContentBlock] = []
    for element in root.iterdescendants(*BLOCK_TAGS):
        tag = element.tag
        if _is_nested(element):
            continue
        if tag not in STRUCTURAL_TAGS and _holds_blocks(element):
            continue
        if tag == 'img' and _owned_by_text_block(element):
            continue

        if tag == 'table':
            kind = BlockKind.TABLE
            structure = _table_structure(element)
        elif tag in ('img', 'figure') or _is_lone_image(element):
            kind = BlockKind.IMAGE
            structure = _image_structure(element)
        else:
            kind = BlockKind.TEXT
            structure = None

        blocks.append(ContentBlock(
            kind=kind,
            plain_text=element.text_content().strip(),
            markup=inner_html(element),
            position=len(blocks),
            tag_name=tag,
            structure=structure,
            attributes=tuple(element.attrib.items()),
        ))

    logger.debug(f"Extracted {len(blocks)} blocks", block_count=len(blocks))
    return blocks
