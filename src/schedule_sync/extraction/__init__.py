from .geometry import Box, area, column_overlap, line_overlap, overlap, union
from .models import Column, GlyphMark, Line, Markup, TableExtraction, Word
from .segmenter import segment_words
from .clustering import cluster_columns, cluster_lines
from .header import ExtractionError, extract_header, normalize_cell
from .table import (
    TableShapeError,
    assemble_grid,
    build_schedule_table,
    from_csv,
    to_csv,
)
from .pdf_extractor import (
    extract_schedule_table,
    save_markup,
    table_from_page_content,
)

__all__ = [
    # Geometry
    "Box",
    "area",
    "union",
    "overlap",
    "line_overlap",
    "column_overlap",
    # Models
    "GlyphMark",
    "Word",
    "Line",
    "Column",
    "Markup",
    "TableExtraction",
    # Segmentation
    "segment_words",
    "cluster_lines",
    "cluster_columns",
    # Table
    "assemble_grid",
    "build_schedule_table",
    "to_csv",
    "from_csv",
    "extract_header",
    "normalize_cell",
    # PDF
    "extract_schedule_table",
    "table_from_page_content",
    "save_markup",
    # Errors
    "ExtractionError",
    "TableShapeError",
]
