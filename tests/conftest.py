"""
Shared fixtures for Revision Compare tests.
"""

from typing import List

import pytest

from revision_compare.config_logging import reset_config
from revision_compare.models import BlockKind, ContentBlock


def text_block(text: str, position: int = 0, tag: str = 'p') -> ContentBlock:
    """Build a text block."""
    return ContentBlock(BlockKind.TEXT, text, markup=text, position=position, tag_name=tag)


def table_block(rows, position: int = 0) -> ContentBlock:
    """Build a table block from rows of cell texts."""
    rows = tuple(tuple(cells) for cells in rows)
    plain = ' '.join(' '.join(cells) for cells in rows)
    return ContentBlock(BlockKind.TABLE, plain, position=position, tag_name='table', structure=rows)


def image_block(src: str, alt: str = '', position: int = 0) -> ContentBlock:
    """Build an image block."""
    return ContentBlock(
        BlockKind.IMAGE, '', position=position, tag_name='img',
        structure={'src': src, 'alt': alt},
        attributes=(('src', src), ('alt', alt)),
    )


def text_blocks(*texts: str) -> List[ContentBlock]:
    """Build a sequence of text blocks with contiguous positions."""
    return [text_block(text, position=i) for i, text in enumerate(texts)]


@pytest.fixture(autouse=True)
def fresh_config():
    """Each test sees configuration freshly read from the environment."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def sample_table() -> ContentBlock:
    return table_block([("Name", "Value"), ("Alpha", "1")])
