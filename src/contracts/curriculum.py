from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# (year_level, semester), e.g. ("1st Year", "2nd Semester")
Slot = tuple[str, str]

DEFAULT_STATUS = "upcoming"


def slot_label(slot: Slot) -> str:
    return f"{slot[0]} - {slot[1]}"


@dataclass(slots=True)
class ExtractedSubject:
    """
    Draft curriculum record produced by extraction.

    Mutable: the reconciler overwrites code/name/units wholesale when it accepts
    a reference match. After reconciliation `total_units == lec_units + lab_units`.
    """

    subject_code: str
    subject_name: str
    lec_units: int
    lab_units: int
    total_units: int
    year_level: str
    semester: str
    status: str = DEFAULT_STATUS
    grade: str | None = None
    instructor: str | None = None

    @property
    def slot(self) -> Slot:
        return (self.year_level, self.semester)

    def units_str(self) -> str:
        return f"{self.lec_units}/{self.lab_units}/{self.total_units}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject_code": self.subject_code,
            "subject_name": self.subject_name,
            "lec_units": self.lec_units,
            "lab_units": self.lab_units,
            "total_units": self.total_units,
            "year_level": self.year_level,
            "semester": self.semester,
            "status": self.status,
            "grade": self.grade,
            "instructor": self.instructor,
        }

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ExtractedSubject":
        return ExtractedSubject(
            subject_code=str(d["subject_code"]),
            subject_name=str(d.get("subject_name", "")),
            lec_units=int(d.get("lec_units") or 0),
            lab_units=int(d.get("lab_units") or 0),
            total_units=int(d.get("total_units") or 0),
            year_level=str(d["year_level"]),
            semester=str(d["semester"]),
            status=str(d.get("status") or DEFAULT_STATUS),
            grade=(None if d.get("grade") is None else str(d["grade"])),
            instructor=(None if d.get("instructor") is None else str(d["instructor"])),
        )


@dataclass(frozen=True, slots=True)
class ReferenceSubject:
    code: str
    name: str
    lec: int
    lab: int
    total: int

    def units_str(self) -> str:
        return f"{self.lec}/{self.lab}/{self.total}"

    def matches(self, subject: ExtractedSubject) -> bool:
        """Exact equality on code, title and all three unit fields."""
        return (
            subject.subject_code == self.code
            and subject.subject_name == self.name
            and subject.lec_units == self.lec
            and subject.lab_units == self.lab
            and subject.total_units == self.total
        )

    def to_subject(self, slot: Slot) -> ExtractedSubject:
        return ExtractedSubject(
            subject_code=self.code,
            subject_name=self.name,
            lec_units=self.lec,
            lab_units=self.lab,
            total_units=self.total,
            year_level=slot[0],
            semester=slot[1],
        )

    def to_dict(self) -> dict[str, Any]:
        return {"code": self.code, "name": self.name, "lec": self.lec, "lab": self.lab, "total": self.total}

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ReferenceSubject":
        return ReferenceSubject(
            code=str(d["code"]),
            name=str(d["name"]),
            lec=int(d["lec"]),
            lab=int(d["lab"]),
            total=int(d["total"]),
        )


@dataclass(frozen=True, slots=True)
class AccuracyReport:
    accuracy: int  # percent, 0..100
    correct: int
    total: int
    missing: dict[str, list[str]] = field(default_factory=dict)  # slot label -> missing codes

    def missing_count(self) -> int:
        return sum(len(v) for v in self.missing.values())

    def to_dict(self) -> dict[str, Any]:
        return {
            "accuracy": self.accuracy,
            "correct": self.correct,
            "total": self.total,
            "missing": {k: list(v) for k, v in self.missing.items()},
        }


@dataclass(slots=True)
class ReconciliationResult:
    subjects: list[ExtractedSubject]
    fixes: list[str]
    warnings: list[str]
    report: AccuracyReport

    def to_dict(self) -> dict[str, Any]:
        return {
            "subjects": [s.to_dict() for s in self.subjects],
            "fixes": list(self.fixes),
            "warnings": list(self.warnings),
            "report": self.report.to_dict(),
        }
