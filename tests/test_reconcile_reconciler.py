from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from contracts.curriculum import ExtractedSubject, ReconciliationResult, Slot
from curricula.loader import load_builtin_curriculum
from reconcile.artifacts import write_reconciliation_json_artifact
from reconcile.reconciler import calculate_accuracy, is_garbage_code, reconcile

CURRICULUM = load_builtin_curriculum()

Y1S1: Slot = ("1st Year", "1st Semester")
Y2S2: Slot = ("2nd Year", "2nd Semester")
Y3S1: Slot = ("3rd Year", "1st Semester")
Y4S2: Slot = ("4th Year", "2nd Semester")


def _subj(code: str, name: str, lec: int, lab: int, total: int, slot: Slot = Y1S1) -> ExtractedSubject:
    return ExtractedSubject(
        subject_code=code,
        subject_name=name,
        lec_units=lec,
        lab_units=lab,
        total_units=total,
        year_level=slot[0],
        semester=slot[1],
    )


def _assert_consistent(test: unittest.TestCase, result: ReconciliationResult) -> None:
    present = {s.subject_code for s in result.subjects}
    for codes in result.report.missing.values():
        test.assertFalse(present & set(codes))
    for s in result.subjects:
        test.assertEqual(s.total_units, s.lec_units + s.lab_units, s.subject_code)


class TestGarbage(unittest.TestCase):
    def test_patterns(self) -> None:
        for code in ("TOTAL", "total", "Y", "12", "REVISION 2", "EVSION", "", "  "):
            self.assertTrue(is_garbage_code(code), code)
        for code in ("CS 101", "GEC Elec 21", "PATHFIT 1"):
            self.assertFalse(is_garbage_code(code), code)


class TestReconcile(unittest.TestCase):
    def test_fuzzy_correction_overwrites_wholesale(self) -> None:
        s = _subj("C5 101", "Intro to Computing", 3, 0, 3)
        result = reconcile([s], CURRICULUM)

        self.assertEqual(len(result.subjects), 1)
        out = result.subjects[0]
        self.assertEqual(
            (out.subject_code, out.subject_name, out.units_str()),
            ("CS 101", "Introduction to Computing", "2/1/3"),
        )
        self.assertEqual(len(result.fixes), 3)
        self.assertTrue(all(f.startswith("[80% match] CS 101") for f in result.fixes))

        self.assertEqual((result.report.correct, result.report.total, result.report.accuracy), (1, 7, 14))
        self.assertEqual(len(result.report.missing["1st Year - 1st Semester"]), 6)
        self.assertIn("Missing: CS 102 - Computer Programming 1 (1st Year - 1st Semester)", result.warnings)
        _assert_consistent(self, result)

    def test_garbage_removed(self) -> None:
        subjects = [
            _subj("TOTAL", "", 0, 0, 21),
            _subj("Y", "Subject", 3, 0, 3),
            _subj("12", "Subject", 3, 0, 3),
            _subj("REVISION 2", "Subject", 3, 0, 3),
            _subj("CS 101", "Introduction to Computing", 2, 1, 3),
        ]
        result = reconcile(subjects, CURRICULUM)

        self.assertEqual([s.subject_code for s in result.subjects], ["CS 101"])
        garbage_fixes = [f for f in result.fixes if f.startswith("Removed garbage subject")]
        self.assertEqual(len(garbage_fixes), 4)
        self.assertIn('Removed garbage subject: "TOTAL"', garbage_fixes)

    def test_empty_input(self) -> None:
        result = reconcile([], CURRICULUM)
        self.assertEqual(result.subjects, [])
        self.assertEqual(result.fixes, [])
        self.assertEqual((result.report.accuracy, result.report.total), (0, 0))

    def test_unmatched_subject_kept_with_warning_and_units_repaired(self) -> None:
        subjects = [_subj("ZZ 999", "Underwater Basket Weaving", 3, 0, 4), _subj("ZZ 998", "Another Thing", 4, 0, 2)]
        result = reconcile(subjects, CURRICULUM)

        by_code = {s.subject_code: s for s in result.subjects}
        self.assertEqual(by_code["ZZ 999"].units_str(), "3/1/4")
        self.assertEqual(by_code["ZZ 998"].units_str(), "4/0/4")
        self.assertIn("ZZ 999: units 3/0/4 -> 3/1/4 (lec + lab = total)", result.fixes)
        self.assertIn("No reference match: ZZ 999 (1st Year - 1st Semester)", result.warnings)
        _assert_consistent(self, result)

    def test_duplicates_after_correction(self) -> None:
        subjects = [
            _subj("CS 101", "Introduction to Computing", 2, 1, 3),
            _subj("CS 1O1", "Introduction to Computing", 2, 1, 3),
        ]
        result = reconcile(subjects, CURRICULUM)

        self.assertEqual([s.subject_code for s in result.subjects], ["CS 101"])
        self.assertIn("Removed duplicate CS 101 (1st Year - 1st Semester)", result.fixes)

    def test_critical_subject_injected_into_represented_slot(self) -> None:
        subjects = [_subj("CS 114", "Operating Systems", 2, 1, 3, Y3S1)]
        result = reconcile(subjects, CURRICULUM)

        codes = [s.subject_code for s in result.subjects]
        self.assertEqual(codes, ["CS 114", "CS Elec 1"])
        self.assertIn("[RESCUE] Added missing CS Elec 1 (3rd Year - 1st Semester)", result.fixes)
        self.assertEqual((result.report.correct, result.report.total, result.report.accuracy), (2, 6, 33))
        _assert_consistent(self, result)

    def test_half_up_accuracy(self) -> None:
        result = reconcile([_subj("CS 105", "Information Management", 2, 1, 3, Y2S2)], CURRICULUM)
        self.assertEqual((result.report.correct, result.report.total, result.report.accuracy), (1, 8, 13))

    def test_exact_elective_left_untouched(self) -> None:
        s = _subj("GEC Elec 21", "Human Reproduction", 3, 0, 3, Y4S2)
        result = reconcile([s], CURRICULUM)

        self.assertEqual(
            (s.subject_code, s.subject_name, s.units_str()), ("GEC Elec 21", "Human Reproduction", "3/0/3")
        )
        self.assertFalse(any("GEC Elec 21" in f and "match]" in f for f in result.fixes))
        self.assertEqual(
            [s.subject_code for s in result.subjects], ["GEC Elec 21", "GEC Elec 2", "CS 125"]
        )
        _assert_consistent(self, result)

    def test_idempotent(self) -> None:
        subjects = [
            _subj("C5 101", "Intro to Computing", 3, 0, 3),
            _subj("GEC 11", "Understanding the Self", 3, 0, 3),
            _subj("CS 114", "Operating Systems", 2, 1, 3, Y3S1),
        ]
        first = reconcile(subjects, CURRICULUM)
        again = reconcile([ExtractedSubject.from_dict(s.to_dict()) for s in first.subjects], CURRICULUM)

        self.assertEqual([s.to_dict() for s in again.subjects], [s.to_dict() for s in first.subjects])
        self.assertEqual(again.fixes, [])
        self.assertEqual(again.report, first.report)


class TestAccuracy(unittest.TestCase):
    def test_only_represented_slots_count(self) -> None:
        report = calculate_accuracy([_subj("CS 101", "Introduction to Computing", 2, 1, 3)], CURRICULUM)
        self.assertEqual((report.correct, report.total), (1, 7))
        self.assertEqual(list(report.missing), ["1st Year - 1st Semester"])

    def test_wrong_title_is_not_correct(self) -> None:
        report = calculate_accuracy([_subj("CS 101", "Intro", 2, 1, 3)], CURRICULUM)
        self.assertEqual(report.correct, 0)
        self.assertNotIn("CS 101", report.missing["1st Year - 1st Semester"])


class TestArtifact(unittest.TestCase):
    def test_written_json(self) -> None:
        result = reconcile([_subj("CS 101", "Introduction to Computing", 2, 1, 3)], CURRICULUM)
        with tempfile.TemporaryDirectory() as td:
            out = Path(td) / "nested" / "reconciliation.json"
            write_reconciliation_json_artifact(result=result, out_file=out, program_id="bscs")
            text = out.read_text(encoding="utf-8")

        self.assertTrue(text.endswith("\n"))
        payload = json.loads(text)
        self.assertEqual(payload["program_id"], "bscs")
        self.assertEqual(payload["report"]["accuracy"], 14)
        self.assertEqual(payload["subjects"][0]["subject_code"], "CS 101")


if __name__ == "__main__":
    unittest.main()
