from __future__ import annotations

from typing import TYPE_CHECKING, Any

from contracts.curriculum import ExtractedSubject
from preprocess.contracts import CaptureSource
from reconcile.validation import ValidationRejection

if TYPE_CHECKING:
    from .states import PipelineRun

REMEDIATION: dict[CaptureSource, str] = {
    CaptureSource.CAMERA: (
        "Could not find any subjects in the photo. Hold the camera steady, use good lighting, "
        "place the checklist flat, fill the frame with the page and avoid shadows or glare."
    ),
    CaptureSource.FILE: (
        "Could not find any subjects in the image. Try a clearer scan, better lighting, "
        "and make sure the entire page is captured."
    ),
}


class PipelineError(Exception):
    pass


class EmptyResult(PipelineError):
    """The run completed but reconciliation produced no subjects."""

    def __init__(self, capture: CaptureSource, *, run: "PipelineRun | None" = None) -> None:
        self.capture = capture
        self.remediation = REMEDIATION[capture]
        self.run = run
        super().__init__(self.remediation)


class ProcessingException(PipelineError):
    """
    A stage failed; the run is aborted and partial quadrant results are discarded.

    `detail` carries the raw error information from the failing stage.
    """

    def __init__(
        self,
        stage: str,
        message: str,
        *,
        detail: dict[str, Any] | None = None,
        run: "PipelineRun | None" = None,
    ) -> None:
        self.stage = stage
        self.message = message
        self.detail = detail or {}
        self.run = run
        super().__init__(f"{stage}: {message}")

    def to_dict(self) -> dict[str, Any]:
        return {"stage": self.stage, "message": self.message, "detail": self.detail}


class PersistenceFailure(PipelineError):
    """
    Saving failed. The extracted subjects are kept on the exception so only the
    save needs to be retried.
    """

    def __init__(self, subjects: list[ExtractedSubject], cause: BaseException, attempts: int = 1) -> None:
        self.subjects = subjects
        self.cause = cause
        self.attempts = attempts
        super().__init__(f"Extracted {len(subjects)} subjects but failed to save them: {cause!r}")


__all__ = [
    "REMEDIATION",
    "EmptyResult",
    "PersistenceFailure",
    "PipelineError",
    "ProcessingException",
    "ValidationRejection",
]
