"""
Extract barcodes from PDF documents, label them from nearby text and
regenerate clean copies.
"""

__version__ = "0.1.0"
