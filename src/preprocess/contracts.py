from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from pathlib import Path
from typing import Any


class CaptureSource(str, Enum):
    """
    How the checklist image was obtained. Camera captures are upscaled harder.
    """

    CAMERA = "camera"
    FILE = "file"


class QuadrantPosition(str, Enum):
    TOP_LEFT = "top_left"
    TOP_RIGHT = "top_right"
    BOTTOM_LEFT = "bottom_left"
    BOTTOM_RIGHT = "bottom_right"


@dataclass(frozen=True, slots=True)
class PreprocessError:
    code: str
    message: str
    detail: dict[str, Any] | None = None


@dataclass(frozen=True, slots=True)
class PreprocessResult:
    """
    Stage 0 output.

    `fell_back` is True when resizing/re-encoding failed and `image_file` is the
    untouched source; the failure is kept in `errors` but `ok` stays True.
    `ok` is False only when there is no image to continue with at all.
    """

    ok: bool
    capture_source: CaptureSource
    source_file: str
    raster_file: str | None  # pre-resize image (the rendered page for PDFs)
    image_file: str | None
    width_px: int
    height_px: int
    fell_back: bool
    errors: list[PreprocessError]
    meta: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True, slots=True)
class QuadrantImage:
    position: QuadrantPosition
    image_file: str
    box: tuple[int, int, int, int]  # (x0, y0, x1, y1) in source pixels, exclusive end

    def to_dict(self) -> dict[str, Any]:
        return {"position": self.position.value, "image_file": self.image_file, "box": list(self.box)}


@dataclass(frozen=True, slots=True)
class PreprocessConfig:
    """
    Stage 0 configuration.

    - `out_dir` must be passed explicitly; nothing is written elsewhere
    - no environment variable reads in this package
    """

    out_dir: Path
    camera_target_width: int = 3200
    file_target_width: int = 2400
    pdf_dpi: int = 200

    def __post_init__(self) -> None:
        if not isinstance(self.out_dir, Path):
            raise TypeError("out_dir must be a pathlib.Path")
        if self.camera_target_width <= 0 or self.file_target_width <= 0:
            raise ValueError("target widths must be positive integers")
        if self.pdf_dpi <= 0:
            raise ValueError("pdf_dpi must be a positive integer")

    def target_width(self, source: CaptureSource) -> int:
        if source == CaptureSource.CAMERA:
            return self.camera_target_width
        return self.file_target_width
