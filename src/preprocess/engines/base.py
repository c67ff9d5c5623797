from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path


class ImageEngine(ABC):
    """
    Image manipulation backend.

    Engines work on materialized files and always write PNG. They perform no
    OCR and no content-dependent processing.
    """

    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def size(self, *, image_file: Path) -> tuple[int, int]:
        raise NotImplementedError

    @abstractmethod
    def resize(self, *, image_file: Path, out_file: Path, width: int) -> tuple[int, int]:
        """
        Scale to `width`, keeping the aspect ratio. Returns the written (width, height).
        """

        raise NotImplementedError

    @abstractmethod
    def crop(self, *, image_file: Path, out_file: Path, box: tuple[int, int, int, int]) -> tuple[int, int]:
        raise NotImplementedError

    @abstractmethod
    def reencode(self, *, image_file: Path, out_file: Path) -> tuple[int, int]:
        """
        Lossless PNG re-encode at maximum compression.
        """

        raise NotImplementedError


class PdfRasterizer(ABC):
    @abstractmethod
    def backend_id(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def render_first_page(self, *, pdf_file: Path, out_file: Path, dpi: int) -> tuple[int, int]:
        raise NotImplementedError
