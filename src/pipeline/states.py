from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from contracts.curriculum import ReconciliationResult, Slot, slot_label
from preprocess.contracts import CaptureSource, PreprocessResult, QuadrantPosition
from preprocess.quadrants import YearDetection

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    IDLE = "idle"
    SELECTING_FILE = "selecting_file"
    PREPROCESSING = "preprocessing"
    DETECTING_YEAR = "detecting_year"
    SPLITTING = "splitting"
    RECOGNIZING = "recognizing"
    EXTRACTING = "extracting"
    RECONCILING = "reconciling"
    REVIEW = "review"
    NO_SUBJECTS_FOUND = "no_subjects_found"
    PROCESSING_ERROR = "processing_error"


TERMINAL_STATES = frozenset(
    {PipelineState.REVIEW, PipelineState.NO_SUBJECTS_FOUND, PipelineState.PROCESSING_ERROR}
)

_WORKING_STATES = (
    PipelineState.PREPROCESSING,
    PipelineState.DETECTING_YEAR,
    PipelineState.SPLITTING,
    PipelineState.RECOGNIZING,
    PipelineState.EXTRACTING,
    PipelineState.RECONCILING,
)

ALLOWED_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.IDLE: frozenset({PipelineState.SELECTING_FILE}),
    PipelineState.SELECTING_FILE: frozenset({PipelineState.PREPROCESSING, PipelineState.IDLE}),
    PipelineState.PREPROCESSING: frozenset({PipelineState.DETECTING_YEAR, PipelineState.PROCESSING_ERROR}),
    PipelineState.DETECTING_YEAR: frozenset({PipelineState.SPLITTING, PipelineState.PROCESSING_ERROR}),
    PipelineState.SPLITTING: frozenset({PipelineState.RECOGNIZING, PipelineState.PROCESSING_ERROR}),
    PipelineState.RECOGNIZING: frozenset({PipelineState.EXTRACTING, PipelineState.PROCESSING_ERROR}),
    PipelineState.EXTRACTING: frozenset({PipelineState.RECONCILING, PipelineState.PROCESSING_ERROR}),
    PipelineState.RECONCILING: frozenset(
        {PipelineState.REVIEW, PipelineState.NO_SUBJECTS_FOUND, PipelineState.PROCESSING_ERROR}
    ),
    # Every terminal state allows a restart.
    PipelineState.REVIEW: frozenset({PipelineState.IDLE}),
    PipelineState.NO_SUBJECTS_FOUND: frozenset({PipelineState.IDLE}),
    PipelineState.PROCESSING_ERROR: frozenset({PipelineState.IDLE}),
}


class InvalidTransition(RuntimeError):
    pass


@dataclass(slots=True)
class PipelineRun:
    """
    Mutable record of one extraction run: visited states plus stage outputs.
    """

    capture: CaptureSource
    source_file: str
    history: list[PipelineState] = field(default_factory=lambda: [PipelineState.IDLE])
    preprocess: PreprocessResult | None = None
    year_detection: YearDetection | None = None
    quadrant_slots: dict[QuadrantPosition, Slot] = field(default_factory=dict)
    quadrant_counts: dict[QuadrantPosition, int] = field(default_factory=dict)
    result: ReconciliationResult | None = None

    @property
    def state(self) -> PipelineState:
        return self.history[-1]

    @property
    def is_terminal(self) -> bool:
        return self.state in TERMINAL_STATES

    def transition(self, new_state: PipelineState) -> None:
        if new_state not in ALLOWED_TRANSITIONS[self.state]:
            raise InvalidTransition(f"{self.state.value} -> {new_state.value} is not allowed")
        logger.info("state: %s -> %s", self.state.value, new_state.value)
        self.history.append(new_state)

    def fail(self) -> None:
        """Move to `processing_error` from any working state."""
        if self.state in _WORKING_STATES:
            self.transition(PipelineState.PROCESSING_ERROR)

    def summary(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "state": self.state.value,
            "capture": self.capture.value,
            "source_file": self.source_file,
            "history": [s.value for s in self.history],
            "quadrants": {
                pos.value: {"slot": slot_label(slot), "subjects": self.quadrant_counts.get(pos, 0)}
                for pos, slot in self.quadrant_slots.items()
            },
        }
        if self.preprocess is not None:
            out["fell_back"] = self.preprocess.fell_back
        if self.year_detection is not None:
            out["year_range"] = self.year_detection.year_range.value
        if self.result is not None:
            out["subjects"] = len(self.result.subjects)
            out["fixes"] = len(self.result.fixes)
            out["warnings"] = len(self.result.warnings)
            out["accuracy"] = self.result.report.accuracy
        return out
