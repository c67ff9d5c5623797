from __future__ import annotations

import logging
from dataclasses import dataclass, field

from contracts.grouping import PositionedTextElement, Row
from contracts.ocr import RecognitionResult

from .config import RowAssignment, RowGroupingConfig

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class _RowBuilder:
    y: int
    elements: list[PositionedTextElement] = field(default_factory=list)


def flatten_elements(result: RecognitionResult) -> list[PositionedTextElement]:
    """
    Flatten blocks -> lines -> elements into positioned text, in recognizer order.

    Elements without a frame or with blank text carry no position/content and are skipped.
    """

    out: list[PositionedTextElement] = []
    for block in result.blocks:
        for line in block.lines:
            for el in line.elements:
                text = el.text.strip()
                if text == "" or el.frame is None:
                    continue
                out.append(PositionedTextElement(text=text, x=el.frame.left, y=el.frame.top))
    return out


def _pick_row(builders: list[_RowBuilder], y: int, config: RowGroupingConfig) -> _RowBuilder | None:
    if config.assignment == RowAssignment.FIRST_FIT:
        for b in builders:
            if abs(b.y - y) < config.row_y_tolerance:
                return b
        return None

    best: _RowBuilder | None = None
    best_dy: float | None = None
    for b in builders:
        dy = abs(b.y - y)
        if dy >= config.row_y_tolerance:
            continue
        if best_dy is None or dy < best_dy:
            best = b
            best_dy = dy
    return best


def reconstruct_rows(elements: list[PositionedTextElement], config: RowGroupingConfig) -> list[Row]:
    """
    Cluster elements into rows by vertical proximity.

    Each element is assigned to an existing row whose anchor y is within
    tolerance, else it opens a new row anchored at its own y. Anchors never move.
    Rows are sorted by y, elements within a row by x (both stable sorts, so
    ties keep recognizer order).
    """

    config.validate()

    builders: list[_RowBuilder] = []
    for el in elements:
        row = _pick_row(builders, el.y, config)
        if row is None:
            row = _RowBuilder(y=el.y)
            builders.append(row)
        row.elements.append(el)

    ordered = sorted(builders, key=lambda b: b.y)
    rows = [Row(y=b.y, elements=sorted(b.elements, key=lambda e: e.x)) for b in ordered]

    logger.debug("reconstructed %d rows from %d elements", len(rows), len(elements))
    return rows


def rows_from_recognition(result: RecognitionResult, config: RowGroupingConfig) -> list[Row]:
    return reconstruct_rows(flatten_elements(result), config)
