from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from grouping.config import RowGroupingConfig
from ocr.contracts import OcrConfig
from preprocess.contracts import PreprocessConfig

QUADRANT_COUNT = 4


@dataclass(frozen=True, slots=True)
class PipelineConfig:
    """
    End-to-end run configuration. All paths are explicit; nothing is read from
    the environment.
    """

    work_dir: Path
    ocr: OcrConfig = field(default_factory=OcrConfig)
    grouping: RowGroupingConfig = field(default_factory=RowGroupingConfig)
    camera_target_width: int = 3200
    file_target_width: int = 2400
    pdf_dpi: int = 200
    max_workers: int = QUADRANT_COUNT

    def __post_init__(self) -> None:
        if not isinstance(self.work_dir, Path):
            raise TypeError("work_dir must be a pathlib.Path")
        if self.max_workers < 1:
            raise ValueError("max_workers must be >= 1")
        self.grouping.validate()

    def preprocess_config(self) -> PreprocessConfig:
        return PreprocessConfig(
            out_dir=self.work_dir,
            camera_target_width=self.camera_target_width,
            file_target_width=self.file_target_width,
            pdf_dpi=self.pdf_dpi,
        )

    @property
    def quadrant_dir(self) -> Path:
        return self.work_dir / "quadrants"
