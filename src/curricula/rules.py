from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from contracts.curriculum import ReferenceSubject, Slot


@dataclass(frozen=True, slots=True)
class YearDetectionRules:
    """
    Decides whether a page holds the early or the late two-year block by
    counting `<prefix> <number>` occurrences from each number set.
    """

    prefix: str
    early_numbers: tuple[int, ...]
    late_numbers: tuple[int, ...]
    early_years: tuple[str, str]
    late_years: tuple[str, str]
    semesters: tuple[str, str]

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "YearDetectionRules":
        early_years = tuple(str(x) for x in d["early_years"])
        late_years = tuple(str(x) for x in d["late_years"])
        semesters = tuple(str(x) for x in d["semesters"])
        if len(early_years) != 2 or len(late_years) != 2 or len(semesters) != 2:
            raise ValueError("year_detection needs exactly two years per range and two semesters")
        return YearDetectionRules(
            prefix=str(d["prefix"]),
            early_numbers=tuple(int(x) for x in d["early_numbers"]),
            late_numbers=tuple(int(x) for x in d["late_numbers"]),
            early_years=(early_years[0], early_years[1]),
            late_years=(late_years[0], late_years[1]),
            semesters=(semesters[0], semesters[1]),
        )


@dataclass(frozen=True, slots=True)
class ElectiveFamily:
    prefix: str  # leading token, matched case-insensitively ("CS", "GEC", "MATH")
    code_label: str  # emitted code prefix ("CS Elec", "Math Elec")
    min_number: int
    max_number: int | None
    default_number: int
    title: str  # generic fallback title

    def accepts(self, n: int) -> bool:
        if n < self.min_number:
            return False
        return self.max_number is None or n <= self.max_number

    def code(self, number: str) -> str:
        return f"{self.code_label} {number}"

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ElectiveFamily":
        return ElectiveFamily(
            prefix=str(d["prefix"]).upper(),
            code_label=str(d["code_label"]),
            min_number=int(d.get("min_number", 0)),
            max_number=(None if d.get("max_number") is None else int(d["max_number"])),
            default_number=int(d["default_number"]),
            title=str(d["title"]),
        )


@dataclass(frozen=True, slots=True)
class ExtractionRules:
    # Department prefix given to single-letter code artifacts ("C 104" -> "CS 104").
    primary_prefix: str = "CS"
    default_units: tuple[int, int, int] = (3, 0, 3)
    elective_families: tuple[ElectiveFamily, ...] = ()
    # variant spelling (upper-case) -> canonical prefix
    spelling_variants: dict[str, str] = field(default_factory=dict)

    def canonical_prefix(self, prefix: str) -> str:
        p = prefix.upper()
        return self.spelling_variants.get(p, p)

    def is_variant_family(self, prefix: str) -> bool:
        p = prefix.upper()
        return p in self.spelling_variants or p in self.spelling_variants.values()

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "ExtractionRules":
        units = [int(x) for x in (d.get("default_units") or [3, 0, 3])]
        if len(units) != 3:
            raise ValueError("default_units must hold (lec, lab, total)")
        variants: dict[str, str] = {}
        for canonical, spellings in (d.get("spelling_variants") or {}).items():
            for s in spellings:
                variants[str(s).upper()] = str(canonical).upper()
        return ExtractionRules(
            primary_prefix=str(d.get("primary_prefix", "CS")),
            default_units=(units[0], units[1], units[2]),
            elective_families=tuple(ElectiveFamily.from_dict(x) for x in (d.get("elective_families") or [])),
            spelling_variants=variants,
        )


class RescueKind(str, Enum):
    ELECTIVE_SCAN = "elective_scan"
    KEYWORD_CODE = "keyword_code"


@dataclass(frozen=True, slots=True)
class RescueRule:
    """
    One declarative rescue rule.

    elective_scan: rows mentioning `<prefix> Elec|Elective` anywhere; the number
    within `lookahead` tokens after the keyword must match `number_pattern`.

    keyword_code: restricted to `slot`; a row containing `number` and matching
    `keywords_pattern` yields `subject` verbatim.
    """

    kind: RescueKind
    prefix: str | None = None
    code_label: str | None = None
    number_pattern: re.Pattern[str] | None = None
    title: str | None = None
    lookahead: int = 4
    slot: Slot | None = None
    number: str | None = None
    keywords_pattern: re.Pattern[str] | None = None
    subject: ReferenceSubject | None = None

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "RescueRule":
        kind = RescueKind(str(d["kind"]))
        if kind == RescueKind.ELECTIVE_SCAN:
            return RescueRule(
                kind=kind,
                prefix=str(d["prefix"]),
                code_label=str(d["code_label"]),
                number_pattern=re.compile(str(d["number_pattern"])),
                title=str(d["title"]),
                lookahead=int(d.get("lookahead", 4)),
            )
        return RescueRule(
            kind=kind,
            slot=(str(d["year_level"]), str(d["semester"])),
            number=str(d["number"]),
            keywords_pattern=re.compile(str(d["keywords_pattern"]), re.IGNORECASE),
            subject=ReferenceSubject.from_dict(d["subject"]),
        )
