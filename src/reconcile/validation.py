from __future__ import annotations

from contracts.curriculum import ExtractedSubject, slot_label
from curricula.loader import MAX_COMPONENT_UNITS, CurriculumConfig
from curricula.rules import ExtractionRules
from extraction.patterns import FALLBACK_TITLE
from extraction.titles import has_probable_ocr_errors

MIN_CODE_LEN = 2
MIN_NAME_LEN = 3
# Titles shorter than this are flagged unless they belong to an elective.
SHORT_TITLE_LEN = 10
GENERIC_TITLE_LEN = 5


class ValidationRejection(Exception):
    """A manually entered subject was rejected; `rule` names the failed check."""

    def __init__(self, rule: str, message: str) -> None:
        super().__init__(message)
        self.rule = rule
        self.message = message

    def to_dict(self) -> dict[str, str]:
        return {"rule": self.rule, "message": self.message}


def validate_manual_entry(
    curriculum: CurriculumConfig,
    code: str,
    name: str,
    lec: int,
    lab: int,
    year: str,
    semester: str,
) -> ExtractedSubject:
    """
    Check a subject typed in on the review screen against the reference table.

    Returns the draft record when accepted; raises ValidationRejection otherwise.
    """

    code = code.strip()
    name = name.strip()
    total = lec + lab

    if len(code) < MIN_CODE_LEN:
        raise ValidationRejection("code_too_short", f"Subject code must be at least {MIN_CODE_LEN} characters")
    if len(name) < MIN_NAME_LEN:
        raise ValidationRejection("name_too_short", f"Subject name must be at least {MIN_NAME_LEN} characters")
    if total <= 0:
        raise ValidationRejection("zero_units", "Total units must be greater than 0")
    if lec < 0 or lab < 0 or max(lec, lab, total) > MAX_COMPONENT_UNITS:
        raise ValidationRejection(
            "units_out_of_range",
            f"Units cannot exceed {MAX_COMPONENT_UNITS}. This is not a valid subject in this curriculum.",
        )

    slot = (year, semester)
    refs = curriculum.reference_for(slot)
    if not refs:
        raise ValidationRejection("unknown_slot", f"Invalid year or semester: {slot_label(slot)}")

    code_l = code.lower()
    name_l = name.lower()
    by_code = next((r for r in refs if r.code.lower() == code_l), None)
    by_name = next((r for r in refs if name_l in r.name.lower() or r.name.lower() in name_l), None)

    if by_code is None:
        home = curriculum.slot_of_code(code)
        if home is not None and home != slot:
            raise ValidationRejection(
                "wrong_slot",
                f"{code} exists but should be in {slot_label(home)}, not {slot_label(slot)}.",
            )
        if by_name is None:
            raise ValidationRejection(
                "not_in_curriculum",
                f"This subject is not found in {slot_label(slot)} of the {curriculum.program_id} curriculum.",
            )

    if by_code is not None and (by_code.lec, by_code.lab, by_code.total) != (lec, lab, total):
        raise ValidationRejection(
            "units_mismatch",
            f"{by_code.code} should have {by_code.units_str()} units, not {lec}/{lab}/{total}.",
        )

    return ExtractedSubject(
        subject_code=by_code.code if by_code is not None else code,
        subject_name=name,
        lec_units=lec,
        lab_units=lab,
        total_units=total,
        year_level=year,
        semester=semester,
    )


def review_issues(subject: ExtractedSubject, rules: ExtractionRules | None = None) -> list[str]:
    """Non-blocking flags shown next to a draft record before it is saved."""

    issues: list[str] = []
    code = subject.subject_code
    title = subject.subject_name

    if code == FALLBACK_TITLE or len(code) < MIN_CODE_LEN:
        issues.append("Invalid code")
    if title == FALLBACK_TITLE or len(title) < GENERIC_TITLE_LEN:
        issues.append("Generic/incomplete title")
    if has_probable_ocr_errors(title):
        issues.append("OCR typos in title")
    if len(title) < SHORT_TITLE_LEN and "Elec" not in code and title != "Ethics":
        issues.append("Title too short")
    if "..." in title:
        issues.append("Title truncated")
    if subject.lec_units > MAX_COMPONENT_UNITS or subject.lab_units > MAX_COMPONENT_UNITS:
        issues.append("Unusual units")
    if subject.total_units != subject.lec_units + subject.lab_units:
        issues.append("Unit calculation error")
    if subject.total_units == 0:
        issues.append("Zero units")
    if subject.total_units > MAX_COMPONENT_UNITS:
        issues.append("Total units exceed 5")

    if rules is not None:
        prefix = code.split(" ", 1)[0]
        canonical = rules.canonical_prefix(prefix)
        if canonical != prefix.upper():
            issues.append(f"Should be {canonical}")
    return issues
