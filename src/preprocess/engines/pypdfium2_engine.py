from __future__ import annotations

from pathlib import Path

from .base import PdfRasterizer


class Pypdfium2Rasterizer(PdfRasterizer):
    def backend_id(self) -> str:
        return "pypdfium2"

    def _require_pdfium(self):
        try:
            import pypdfium2 as pdfium  # type: ignore

            return pdfium
        except ImportError as e:
            raise RuntimeError("Missing dependency: pypdfium2 is required for PDF checklists.") from e

    def render_first_page(self, *, pdf_file: Path, out_file: Path, dpi: int) -> tuple[int, int]:
        pdfium = self._require_pdfium()
        doc = pdfium.PdfDocument(str(pdf_file))
        try:
            if len(doc) < 1:
                raise ValueError("PDF has no pages")
            page = doc[0]
            bitmap = page.render(scale=dpi / 72.0)  # PDF points are 1/72 inch
            pil_img = bitmap.to_pil().convert("RGB")
        finally:
            doc.close()

        out_file.parent.mkdir(parents=True, exist_ok=True)
        pil_img.save(out_file, format="PNG")
        w, h = pil_img.size
        return int(w), int(h)
