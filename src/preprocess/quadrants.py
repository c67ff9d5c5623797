from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from contracts.curriculum import Slot
from curricula.rules import YearDetectionRules

from .contracts import QuadrantImage, QuadrantPosition
from .engines.base import ImageEngine

logger = logging.getLogger(__name__)

# Reading order of the four cells; also the order results are joined in.
QUADRANT_ORDER: tuple[QuadrantPosition, ...] = (
    QuadrantPosition.TOP_LEFT,
    QuadrantPosition.TOP_RIGHT,
    QuadrantPosition.BOTTOM_LEFT,
    QuadrantPosition.BOTTOM_RIGHT,
)


class YearRange(str, Enum):
    EARLY = "early"
    LATE = "late"


@dataclass(frozen=True, slots=True)
class YearDetection:
    year_range: YearRange
    early_count: int
    late_count: int


def quadrant_boxes(width: int, height: int) -> dict[QuadrantPosition, tuple[int, int, int, int]]:
    """
    Crop boxes split at the integer midpoints; right and bottom halves take
    the odd remainder pixel.
    """

    if width < 2 or height < 2:
        raise ValueError(f"Image too small to split into quadrants: {width}x{height}")
    mx = width // 2
    my = height // 2
    return {
        QuadrantPosition.TOP_LEFT: (0, 0, mx, my),
        QuadrantPosition.TOP_RIGHT: (mx, 0, width, my),
        QuadrantPosition.BOTTOM_LEFT: (0, my, mx, height),
        QuadrantPosition.BOTTOM_RIGHT: (mx, my, width, height),
    }


def split_into_quadrants(*, image_file: Path, out_dir: Path, engine: ImageEngine) -> list[QuadrantImage]:
    """
    Materialize the four quadrants of `image_file` as PNGs under `out_dir`.

    Engine failures propagate to the caller.
    """

    width, height = engine.size(image_file=image_file)
    boxes = quadrant_boxes(width, height)
    out_dir.mkdir(parents=True, exist_ok=True)

    out: list[QuadrantImage] = []
    for pos in QUADRANT_ORDER:
        out_file = out_dir / f"quadrant_{pos.value}.png"
        engine.crop(image_file=image_file, out_file=out_file, box=boxes[pos])
        out.append(QuadrantImage(position=pos, image_file=str(out_file), box=boxes[pos]))
    logger.debug("split %s (%dx%d) into %d quadrants", image_file.name, width, height, len(out))
    return out


def _code_pattern(prefix: str, numbers: tuple[int, ...]) -> re.Pattern[str]:
    alts = "|".join(str(n) for n in sorted(numbers, key=lambda n: -len(str(n))))
    return re.compile(rf"{re.escape(prefix)}\s*(?:{alts})(?!\d)", re.IGNORECASE)


def detect_year_range(text: str, rules: YearDetectionRules) -> YearDetection:
    """
    Count course codes of the early and late number sets in `text`.

    The late range wins only on a strict majority; ties (including no codes
    at all) resolve to the early range.
    """

    early = len(_code_pattern(rules.prefix, rules.early_numbers).findall(text)) if rules.early_numbers else 0
    late = len(_code_pattern(rules.prefix, rules.late_numbers).findall(text)) if rules.late_numbers else 0
    year_range = YearRange.LATE if late > early else YearRange.EARLY
    logger.info("year detection: early=%d late=%d -> %s", early, late, year_range.value)
    return YearDetection(year_range=year_range, early_count=early, late_count=late)


def assign_quadrant_slots(year_range: YearRange, rules: YearDetectionRules) -> dict[QuadrantPosition, Slot]:
    y1, y2 = rules.late_years if year_range == YearRange.LATE else rules.early_years
    s1, s2 = rules.semesters
    return {
        QuadrantPosition.TOP_LEFT: (y1, s1),
        QuadrantPosition.TOP_RIGHT: (y1, s2),
        QuadrantPosition.BOTTOM_LEFT: (y2, s1),
        QuadrantPosition.BOTTOM_RIGHT: (y2, s2),
    }
