"""Group positioned glyph marks into words."""

from collections.abc import Iterable

from ..logger import logger
from .geometry import overlap
from .models import GlyphMark, Markup, Word

# Marks further apart than this are distinct words, not neighbouring glyphs
WORD_GAP_THRESHOLD = 0.1


def segment_words(
    marks: Iterable[GlyphMark], markup: Markup | None = None
) -> list[Word]:
    """Merge a stream of glyph marks into words.

    Marks are consumed in extraction order. A mark whose ``overlap`` with the
    previous mark exceeds ``WORD_GAP_THRESHOLD`` closes the current word and
    starts a new one. Words whose text is only whitespace are dropped.

    Args:
        marks: Glyph marks for one page, in extraction order.
        markup: Optional accumulator that receives the mark and word boxes.

    Returns:
        Words in the order they were encountered (not reading order).
    """
    marks = list(marks)
    words: list[Word] = []
    current: list[GlyphMark] = []
    last: GlyphMark | None = None

    for mark in marks:
        if last is not None and overlap(mark.box, last.box) > WORD_GAP_THRESHOLD:
            _close_word(current, words)
            current = []
        current.append(mark)
        last = mark

    _close_word(current, words)

    if markup is not None:
        markup.add("marks", [mark.box for mark in marks])
        markup.add("words", [word.box for word in words])

    logger.debug("segmented words", marks=len(marks), words=len(words))
    return words


def _close_word(current: list[GlyphMark], words: list[Word]) -> None:
    if not current:
        return
    word = Word(marks=tuple(current))
    if word.text.strip():
        words.append(word)
