from __future__ import annotations

import unittest

from contracts.grouping import PositionedTextElement, Row
from curricula.loader import load_builtin_curriculum
from curricula.rules import ElectiveFamily, RescueKind, RescueRule
from extraction.module import extract_quadrant
from extraction.rescue import apply_rescue_rules
from extraction.subjects import build_title, classify_row, extract_subjects, extract_units

CURRICULUM = load_builtin_curriculum()
RULES = CURRICULUM.extraction

Y1S1 = ("1st Year", "1st Semester")
Y1S2 = ("1st Year", "2nd Semester")
Y3S1 = ("3rd Year", "1st Semester")


def _row(y: int, *texts: str) -> Row:
    return Row(y=y, elements=[PositionedTextElement(text=t, x=10 + 40 * i, y=y) for i, t in enumerate(texts)])


def _rows(*token_lists: list[str]) -> list[Row]:
    return [_row(100 + 60 * i, *tokens) for i, tokens in enumerate(token_lists)]


class TestClassifyRow(unittest.TestCase):
    def test_generic_prefix_and_number(self) -> None:
        m = classify_row(["CS", "101", "Introduction"], RULES)
        assert m is not None
        self.assertEqual((m.code, m.title_start, m.is_elective), ("CS 101", 2, False))

    def test_course_number_length_is_not_capped(self) -> None:
        m = classify_row(["CS", "12345", "Capstone"], RULES)
        assert m is not None
        self.assertEqual((m.code, m.title_start), ("CS 12345", 2))
        self.assertIsNone(classify_row(["CS", "12a", "Capstone"], RULES))

    def test_lone_letter_maps_to_primary_prefix(self) -> None:
        m = classify_row(["C", "104", "Data"], RULES)
        assert m is not None
        self.assertEqual(m.code, "CS 104")
        self.assertIsNone(classify_row(["C", "204", "Data"], RULES))

    def test_elective_families(self) -> None:
        cases = {
            ("GEC", "Elec", "21", "Human"): "GEC Elec 21",
            ("CS", "Elective", "Machine", "Learning"): "CS Elec 1",
            ("Math", "Elec", "101", "Linear"): "Math Elec 101",
            ("CS", "Elec", "9", "3"): "CS Elec 3",
        }
        for tokens, code in cases.items():
            m = classify_row(list(tokens), RULES)
            assert m is not None, tokens
            self.assertEqual(m.code, code, tokens)
            self.assertTrue(m.is_elective)

    def test_spelling_variant_is_canonicalized(self) -> None:
        m = classify_row(["PATHEIT", "1", "Movement"], RULES)
        assert m is not None
        self.assertEqual(m.code, "PATHFIT 1")

        m = classify_row(["PATHEIT", "Dance", "3", "Sports"], RULES)
        assert m is not None
        self.assertEqual((m.code, m.title_start), ("PATHFIT 3", 3))

    def test_rejected_shapes(self) -> None:
        self.assertIsNone(classify_row(["TOTAL", "21"], RULES))
        self.assertIsNone(classify_row(["YEAR", "1"], RULES))
        self.assertIsNone(classify_row(["Introduction", "to"], RULES))
        self.assertIsNone(classify_row(["CS"], RULES))


class TestExtractUnits(unittest.TestCase):
    def test_three_number_run(self) -> None:
        self.assertEqual(extract_units(["CS", "101", "Intro", "2", "1", "3"], 2, (3, 0, 3)), ((2, 1, 3), 3))

    def test_two_number_run_means_no_lab(self) -> None:
        self.assertEqual(extract_units(["GEC", "11", "Self", "3", "3"], 2, (3, 0, 3)), ((3, 0, 3), 3))

    def test_large_numbers_break_runs(self) -> None:
        self.assertEqual(extract_units(["CS", "122", "Practicum", "240", "3", "3"], 2, (3, 0, 3)), ((3, 0, 3), 4))

    def test_default_when_no_run(self) -> None:
        self.assertEqual(extract_units(["CS", "101", "Intro", "2"], 2, (3, 0, 3)), ((3, 0, 3), None))


class TestBuildTitle(unittest.TestCase):
    def test_truncates_long_titles(self) -> None:
        texts = ["CS", "101"] + ["Word"] * 60
        title = build_title(texts, 2, len(texts), None)
        self.assertEqual(len(title), 200)
        self.assertTrue(title.endswith("..."))

    def test_fallback_titles(self) -> None:
        self.assertEqual(build_title(["CS", "101", "3"], 2, 3, None), "Subject")
        fam = ElectiveFamily(
            prefix="CS", code_label="CS Elec", min_number=1, max_number=5, default_number=1, title="CS Elective"
        )
        self.assertEqual(build_title(["CS", "Elec", "3"], 3, 3, fam), "CS Elective")

    def test_filler_and_junk_dropped(self) -> None:
        title = build_title(["CS", "101", "Intro|", "to", "Computing", "Grade", "x"], 2, 7, None)
        self.assertEqual(title, "Intro to Computing")


class TestExtractSubjects(unittest.TestCase):
    def test_basic_rows(self) -> None:
        rows = _rows(
            ["CS", "101", "Introduction", "to", "Computing", "2", "1", "3"],
            ["CS", "102", "Computer", "Programming", "1", "2", "1", "3"],
        )
        subjects = extract_subjects(rows, Y1S1, RULES)

        self.assertEqual([s.subject_code for s in subjects], ["CS 101", "CS 102"])
        self.assertEqual(subjects[0].subject_name, "Introduction to Computing")
        self.assertEqual(subjects[1].subject_name, "Computer Programming")
        self.assertEqual(subjects[1].units_str(), "2/1/3")
        self.assertTrue(all(s.slot == Y1S1 for s in subjects))
        self.assertTrue(all(s.status == "upcoming" for s in subjects))

    def test_header_rows_never_produce_subjects(self) -> None:
        rows = _rows(
            ["Course", "No.", "Descriptive", "Title"],
            ["Lec", "Lab", "Units"],
            ["YEAR", "1"],
            ["Total", "21"],
            ["First", "Semester"],
        )
        self.assertEqual(extract_subjects(rows, Y1S1, RULES), [])

    def test_wrapped_title_is_merged(self) -> None:
        rows = _rows(
            ["CS", "111", "Design", "and", "Analysis"],
            ["of", "Algorithms", "2", "1", "3"],
        )
        subjects = extract_subjects(rows, Y1S1, RULES)

        self.assertEqual(len(subjects), 1)
        self.assertEqual(subjects[0].subject_name, "Design and Analysis of Algorithms")
        self.assertEqual(subjects[0].units_str(), "2/1/3")

    def test_next_subject_row_is_not_merged(self) -> None:
        rows = _rows(
            ["CS", "101", "Introduction", "to", "Computing"],
            ["CS", "102", "Computer", "Programming", "2", "1", "3"],
        )
        subjects = extract_subjects(rows, Y1S1, RULES)

        self.assertEqual([s.subject_code for s in subjects], ["CS 101", "CS 102"])
        self.assertEqual(subjects[0].units_str(), "3/0/3")

    def test_gec_elective_without_units_gets_default_units(self) -> None:
        subjects = extract_subjects(_rows(["GEC", "Elec", "21", "Human", "Reproduction"]), Y1S1, RULES)

        self.assertEqual(len(subjects), 1)
        s = subjects[0]
        self.assertEqual((s.subject_code, s.subject_name), ("GEC Elec 21", "Human Reproduction"))
        self.assertEqual((s.lec_units, s.lab_units, s.total_units), (3, 0, 3))

    def test_gec_elective_single_trailing_unit_uses_default_units(self) -> None:
        subjects = extract_subjects(_rows(["GEC", "Elec", "21", "Human", "Reproduction", "3"]), Y1S1, RULES)

        self.assertEqual(len(subjects), 1)
        s = subjects[0]
        self.assertEqual((s.subject_code, s.subject_name), ("GEC Elec 21", "Human Reproduction"))
        self.assertEqual((s.lec_units, s.lab_units, s.total_units), (3, 0, 3))

    def test_variant_family_row(self) -> None:
        subjects = extract_subjects(
            _rows(["PATHEIT", "1", "Movement", "Competency", "Training", "2", "2"]), Y1S1, RULES
        )
        self.assertEqual(subjects[0].subject_code, "PATHFIT 1")
        self.assertEqual(subjects[0].subject_name, "Movement Competency Training")
        self.assertEqual(subjects[0].units_str(), "2/0/2")


class TestRescuePass(unittest.TestCase):
    def test_elective_mentioned_mid_row(self) -> None:
        rows = _rows(["Free", "CS", "Elective", "2", "2", "1", "3"])
        added = apply_rescue_rules(rows, Y3S1, CURRICULUM.rescue_rules, set())

        self.assertEqual([s.subject_code for s in added], ["CS Elec 2"])
        self.assertEqual(added[0].subject_name, "CS Elective 2")
        self.assertEqual(added[0].units_str(), "3/0/3")

    def test_existing_codes_are_not_duplicated_or_mutated(self) -> None:
        rows = _rows(["Free", "CS", "Elective", "2"])
        existing = {"CS Elec 2"}

        self.assertEqual(apply_rescue_rules(rows, Y3S1, CURRICULUM.rescue_rules, existing), [])
        self.assertEqual(existing, {"CS Elec 2"})

    def test_gec_elective_number_pattern(self) -> None:
        rows = _rows(["GEC", "Elec", "22", "Great", "Books"], ["GEC", "Elec", "7", "Other"])
        added = apply_rescue_rules(rows, Y3S1, CURRICULUM.rescue_rules, set())
        self.assertEqual([s.subject_code for s in added], ["GEC Elec 22"])

    def test_keyword_rule_limited_to_its_slot(self) -> None:
        rows = _rows(["107", "Digital", "Sys"])

        added = apply_rescue_rules(rows, Y1S2, CURRICULUM.rescue_rules, set())
        self.assertEqual(len(added), 1)
        self.assertEqual(
            (added[0].subject_code, added[0].subject_name, added[0].units_str()),
            ("CS 107", "Digital System Design", "2/1/3"),
        )

        self.assertEqual(apply_rescue_rules(rows, Y1S1, CURRICULUM.rescue_rules, set()), [])
        self.assertEqual(apply_rescue_rules(rows, Y1S2, CURRICULUM.rescue_rules, {"CS 107"}), [])

    def test_incomplete_rule_raises(self) -> None:
        rows = _rows(["Free", "CS", "Elective", "2"])
        for rule in (
            RescueRule(kind=RescueKind.ELECTIVE_SCAN, prefix="CS"),
            RescueRule(kind=RescueKind.KEYWORD_CODE, slot=Y1S2, number="107"),
        ):
            with self.assertRaisesRegex(ValueError, "Incomplete .* rescue rule"):
                apply_rescue_rules(rows, Y1S2, (rule,), set())


class TestExtractQuadrant(unittest.TestCase):
    def test_strict_then_rescue(self) -> None:
        rows = _rows(
            ["CS", "114", "Operating", "Systems", "2", "1", "3"],
            ["Free", "CS", "Elective", "1"],
        )
        subjects = extract_quadrant(rows, Y3S1, CURRICULUM)
        self.assertEqual([s.subject_code for s in subjects], ["CS 114", "CS Elec 1"])
        self.assertEqual(subjects[0].subject_name, "Operating Systems")


if __name__ == "__main__":
    unittest.main()
