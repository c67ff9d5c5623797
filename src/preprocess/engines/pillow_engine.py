from __future__ import annotations

from pathlib import Path

from .base import ImageEngine

# zlib level 9; PNG is lossless whatever the level.
PNG_COMPRESS_LEVEL = 9


class PillowImageEngine(ImageEngine):
    def backend_id(self) -> str:
        return "pillow"

    def _require_pil(self):
        try:
            from PIL import Image  # type: ignore

            return Image
        except ImportError as e:
            raise RuntimeError("Missing dependency: Pillow is required for image preprocessing.") from e

    def _save_png(self, img, out_file: Path) -> tuple[int, int]:
        out_file.parent.mkdir(parents=True, exist_ok=True)
        if img.mode not in ("RGB", "RGBA", "L"):
            img = img.convert("RGB")
        img.save(out_file, format="PNG", compress_level=PNG_COMPRESS_LEVEL)
        w, h = img.size
        return int(w), int(h)

    def size(self, *, image_file: Path) -> tuple[int, int]:
        Image = self._require_pil()
        with Image.open(image_file) as img:
            w, h = img.size
        return int(w), int(h)

    def resize(self, *, image_file: Path, out_file: Path, width: int) -> tuple[int, int]:
        if width <= 0:
            raise ValueError(f"width must be positive, got {width}")
        Image = self._require_pil()
        with Image.open(image_file) as img:
            img.load()
            src_w, src_h = img.size
            if src_w <= 0 or src_h <= 0:
                raise ValueError(f"Degenerate image size {src_w}x{src_h}")
            height = max(1, int(round(src_h * width / src_w)))
            resized = img.resize((width, height), Image.Resampling.LANCZOS)
        return self._save_png(resized, out_file)

    def crop(self, *, image_file: Path, out_file: Path, box: tuple[int, int, int, int]) -> tuple[int, int]:
        x0, y0, x1, y1 = box
        if x1 <= x0 or y1 <= y0:
            raise ValueError(f"Empty crop box: {box}")
        Image = self._require_pil()
        with Image.open(image_file) as img:
            img.load()
            part = img.crop(box)
        return self._save_png(part, out_file)

    def reencode(self, *, image_file: Path, out_file: Path) -> tuple[int, int]:
        Image = self._require_pil()
        with Image.open(image_file) as img:
            img.load()
            copy = img.copy()
        return self._save_png(copy, out_file)
