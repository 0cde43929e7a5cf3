"""Tests for glyph-to-word segmentation."""

from schedule_sync.extraction.geometry import Box
from schedule_sync.extraction.models import GlyphMark, Markup
from schedule_sync.extraction.segmenter import segment_words


def _marks(text: str, left: float, bottom: float = 100, char_width: float = 5) -> list[GlyphMark]:
    return [
        GlyphMark(
            text=char,
            box=Box(
                left + i * char_width, bottom, left + (i + 1) * char_width, bottom + 10
            ),
        )
        for i, char in enumerate(text)
    ]


class TestSegmentWords:
    def test_adjacent_marks_form_one_word(self):
        words = segment_words(_marks("8:30am", 0))
        assert [w.text for w in words] == ["8:30am"]

    def test_gap_splits_words(self):
        marks = _marks("Ney,Conor", 0) + _marks("4:00pm", 200)
        words = segment_words(marks)
        assert [w.text for w in words] == ["Ney,Conor", "4:00pm"]

    def test_word_box_is_union_of_marks(self):
        words = segment_words(_marks("abc", 10))
        assert words[0].box == Box(10, 100, 25, 110)

    def test_whitespace_words_are_dropped(self):
        marks = _marks("a", 0) + _marks(" ", 50) + _marks("b", 100)
        words = segment_words(marks)
        assert [w.text for w in words] == ["a", "b"]

    def test_extraction_order_is_kept(self):
        # Right-hand word arrives first
        marks = _marks("right", 300) + _marks("left", 0)
        words = segment_words(marks)
        assert [w.text for w in words] == ["right", "left"]

    def test_empty_input(self):
        assert segment_words([]) == []

    def test_idempotent(self):
        """Re-segmenting the marks of each word reproduces the same words."""
        marks = _marks("Ney,Conor", 0) + _marks("8:30am", 200) + _marks("oncall", 400)
        words = segment_words(marks)
        again = [
            segment_words(word.marks)[0].text for word in words
        ]
        assert again == [w.text for w in words]

    def test_markup_receives_marks_and_words(self):
        markup = Markup()
        marks = _marks("ab", 0) + _marks("cd", 100)
        segment_words(marks, markup)
        assert len(markup.boxes("marks")) == 4
        assert len(markup.boxes("words")) == 2
