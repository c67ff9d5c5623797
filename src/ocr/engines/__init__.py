from .base import TextRecognizer
from .tesseract_cli import TesseractCliRecognizer

__all__ = ["TesseractCliRecognizer", "TextRecognizer"]
