"""
PDF -> per-page raster images plus layout geometry.

This package is the only one that renders PDFs. It performs no text
extraction and no barcode detection.
"""

from .module import rasterize_pages, read_document_info, select_pages

__all__ = ["rasterize_pages", "read_document_info", "select_pages"]
