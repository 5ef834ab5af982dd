"""
Text layer: word-level records -> merged text lines.

Words come either from the PDF's embedded text (pdftotext) or from OCR over
the rasterized pages (tesseract). Both emit the same TSV shape.
"""

from .merge import lines_for_page, merge_text_lines, parse_tsv_words

__all__ = ["lines_for_page", "merge_text_lines", "parse_tsv_words"]
