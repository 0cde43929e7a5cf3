"""Tests for reading labels and dates from the page text."""

import pytest

from schedule_sync.extraction.header import (
    ExtractionError,
    extract_header,
    find_date_row,
    normalize_cell,
)

WEEK_TEXT = (
    "Monday 10/9/2023\n"
    "Tuesday 10/10/2023\n"
    "Wednesday 10/11/2023\n"
    "Thursday 10/12/2023\n"
    "Friday 10/13/2023\n"
    "Saturday 10/14/2023\n"
    "Sunday 10/15/2023\n"
)


class TestExtractHeader:
    def test_labels_and_dates(self):
        text = "Ney,Conor\nDoe,Jane\n\n" + WEEK_TEXT
        labels, dates = extract_header(text)
        assert labels == ["Ney,Conor", "Doe,Jane"]
        assert dates == [
            "",
            "10/9/2023",
            "10/10/2023",
            "10/11/2023",
            "10/12/2023",
            "10/13/2023",
            "10/14/2023",
            "10/15/2023",
        ]

    def test_leading_blank_lines_skipped(self):
        text = "\n\n  \nNey,Conor\n\n" + WEEK_TEXT
        labels, dates = extract_header(text)
        assert labels == ["Ney,Conor"]
        assert len(dates) == 8

    def test_one_block_per_label(self):
        """Labels in separate text blocks still form one label run."""
        text = "Ney,Conor\n\nDoe,Jane\n\nSmith,Alex\n\n" + WEEK_TEXT.replace("\n", "\n\n")
        labels, dates = extract_header(text)
        assert labels == ["Ney,Conor", "Doe,Jane", "Smith,Alex"]
        assert len(dates) == 8

    def test_date_run_stops_at_first_line_without_date(self):
        text = "Ney,Conor\n\n" + WEEK_TEXT + "\n8:30am\n\nNotes 10/20/2023\n"
        _, dates = extract_header(text)
        assert dates[-1] == "10/15/2023"

    def test_weekday_on_its_own_line(self):
        # "Monday\n10/9/2023\nTuesday\n10/10/2023..."
        text = "Ney,Conor\n" + WEEK_TEXT.replace(" ", "\n") + "Total\n"
        labels, dates = extract_header(text)
        assert labels == ["Ney,Conor"]
        assert dates[1:] == [line.split()[1] for line in WEEK_TEXT.splitlines()]

    def test_header_on_one_line(self):
        text = "Ney,Conor\n" + " ".join(WEEK_TEXT.splitlines()) + "\n8:30am"
        _, dates = extract_header(text)
        assert len(dates) == 8

    def test_wrong_date_count_raises(self):
        text = "Ney,Conor\n\n" + "\n".join(WEEK_TEXT.splitlines()[:6])
        with pytest.raises(ExtractionError, match="Expected 8 dates, got: 7"):
            extract_header(text)

    def test_empty_text_raises(self):
        with pytest.raises(ExtractionError):
            extract_header("")


class TestNormalizeCell:
    def test_collapses_whitespace(self):
        assert normalize_cell("  3:45 \t pm\n") == "3:45 pm"

    def test_nfkc(self):
        # Non-breaking space and full-width digits
        assert normalize_cell("8:30\u00a0am") == "8:30 am"
        assert normalize_cell("\uff18:30am") == "8:30am"


class TestFindDateRow:
    def test_first_row_with_a_date(self):
        rows = [["Server Schedule", ""], ["", "Monday 10/9/2023"], ["", "10/10/2023"]]
        assert find_date_row(rows) == 1

    def test_none_without_dates(self):
        assert find_date_row([["a", "b"]]) is None
