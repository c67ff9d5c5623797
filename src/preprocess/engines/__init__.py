from .base import ImageEngine, PdfRasterizer
from .pillow_engine import PillowImageEngine
from .pypdfium2_engine import Pypdfium2Rasterizer

__all__ = ["ImageEngine", "PdfRasterizer", "PillowImageEngine", "Pypdfium2Rasterizer"]
