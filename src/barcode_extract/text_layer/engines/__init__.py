from .base import TextLayerEngine
from .pdftotext_cli import PdftotextTsvEngine
from .tesseract_cli import TesseractTsvEngine

__all__ = ["PdftotextTsvEngine", "TesseractTsvEngine", "TextLayerEngine"]
