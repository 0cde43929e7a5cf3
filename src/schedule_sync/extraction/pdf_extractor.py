"""Schedule table extraction from PDF glyph positions using PyMuPDF."""

import time
from pathlib import Path

import fitz  # PyMuPDF

from ..logger import logger
from .clustering import cluster_columns, cluster_lines
from .geometry import Box
from .header import ExtractionError, extract_header
from .models import MARKUP_KINDS, GlyphMark, Markup, TableExtraction
from .segmenter import segment_words
from .table import assemble_grid, build_schedule_table

# The weekly schedule always fits on the first page
SCHEDULE_PAGE = 1

MARKUP_COLORS = {
    "marks": (0.0, 0.0, 1.0),
    "words": (0.0, 0.6, 0.0),
    "lines": (1.0, 0.5, 0.0),
    "columns": (1.0, 0.0, 0.0),
}


def _open_document(source: str | Path | bytes) -> fitz.Document:
    """Open a PDF from a path or from raw bytes.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist.
        ExtractionError: If PyMuPDF cannot open the document.
    """
    try:
        if isinstance(source, (bytes, bytearray)):
            return fitz.open(stream=bytes(source), filetype="pdf")
        file_path = Path(source)
        if not file_path.exists():
            raise FileNotFoundError(f"PDF file not found: {file_path}")
        return fitz.open(file_path)
    except (RuntimeError, ValueError) as e:
        raise ExtractionError(f"Could not open PDF: {e}") from e


def page_glyph_marks(page: fitz.Page) -> list[GlyphMark]:
    """Every character on ``page`` as a glyph mark, in extraction order.

    PyMuPDF reports rectangles with the origin at the top-left; boxes are
    flipped into PDF user space so that larger ``bottom`` means higher up.
    """
    height = page.rect.height
    marks = []
    raw = page.get_text("rawdict")
    for block in raw.get("blocks", []):
        if block.get("type") != 0:  # Skip image blocks
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                for char in span.get("chars", []):
                    x0, y0, x1, y1 = char["bbox"]
                    marks.append(
                        GlyphMark(
                            text=char["c"],
                            box=Box(
                                left=min(x0, x1),
                                bottom=height - max(y0, y1),
                                right=max(x0, x1),
                                top=height - min(y0, y1),
                            ),
                        )
                    )
    return marks


def page_text(page: fitz.Page) -> str:
    """Page text with a blank line between text blocks, in content order."""
    texts = [
        block[4].strip()
        for block in page.get_text("blocks")
        if block[6] == 0 and block[4].strip()
    ]
    return "\n\n".join(texts)


def table_from_page_content(marks: list[GlyphMark], text: str) -> TableExtraction:
    """Run segmentation and table assembly over one page's content.

    Args:
        marks: Glyph marks of the page in extraction order.
        text: Page text used for the label and date header.

    Returns:
        TableExtraction holding the labelled table and the page's markup.
    """
    labels, dates = extract_header(text)

    markup = Markup(page_number=SCHEDULE_PAGE)
    words = segment_words(marks, markup)
    lines = cluster_lines(words, markup)
    columns = cluster_columns(lines, markup)
    grid = assemble_grid(lines, columns)
    table = build_schedule_table(labels, dates, grid)

    logger.info(
        "schedule table assembled",
        marks=len(marks),
        words=len(words),
        lines=len(lines),
        columns=len(columns),
        rows=len(table),
    )
    return TableExtraction(table=table, markup=markup, labels=labels, dates=dates)


def extract_schedule_table(source: str | Path | bytes) -> TableExtraction:
    """Extract the weekly schedule table from a PDF.

    Args:
        source: Path to the PDF, or the PDF's raw bytes.

    Returns:
        TableExtraction with the header-labelled table and segmentation markup.

    Raises:
        FileNotFoundError: If a path is given and does not exist.
        ExtractionError: If the PDF cannot be read or the table is malformed.
    """
    start = time.perf_counter()
    doc = _open_document(source)
    try:
        if doc.page_count < SCHEDULE_PAGE:
            raise ExtractionError("PDF has no pages")
        page = doc[SCHEDULE_PAGE - 1]
        marks = page_glyph_marks(page)
        text = page_text(page)
    finally:
        doc.close()

    extraction = table_from_page_content(marks, text)

    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "pdf schedule extracted",
        rows=len(extraction.table),
        duration_ms=round(duration_ms, 2),
    )
    return extraction


def save_markup(
    source: str | Path | bytes,
    markup: Markup,
    out_path: str | Path,
    kinds: tuple[str, ...] = ("all",),
) -> Path:
    """Draw the segmentation rectangles onto a copy of the PDF.

    Args:
        source: The PDF the markup was collected from.
        markup: Accumulated rectangles from ``extract_schedule_table``.
        out_path: Where to save the marked-up copy.
        kinds: Markup kinds to draw, or ``("all",)``.

    Returns:
        The path written.
    """
    selected = MARKUP_KINDS if "all" in kinds else kinds
    unknown = [kind for kind in selected if kind not in MARKUP_KINDS]
    if unknown:
        raise ValueError(f"Unknown markup kinds: {unknown}")

    out_path = Path(out_path)
    doc = _open_document(source)
    try:
        page = doc[markup.page_number - 1]
        height = page.rect.height
        for kind in selected:
            for box in markup.boxes(kind):
                rect = fitz.Rect(box.left, height - box.top, box.right, height - box.bottom)
                page.draw_rect(rect, color=MARKUP_COLORS[kind], width=0.5)
        doc.save(out_path)
    finally:
        doc.close()

    logger.info("markup saved", out_path=str(out_path), kinds=list(selected))
    return out_path
