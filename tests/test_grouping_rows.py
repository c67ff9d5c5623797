from __future__ import annotations

import unittest

from contracts.grouping import PositionedTextElement
from contracts.ocr import Frame, RecognitionResult, RecognizedBlock, RecognizedElement, RecognizedLine
from grouping.config import RowAssignment, RowGroupingConfig
from grouping.rows import flatten_elements, reconstruct_rows, rows_from_recognition


def _el(text: str, x: int, y: int) -> PositionedTextElement:
    return PositionedTextElement(text=text, x=x, y=y)


class TestReconstructRows(unittest.TestCase):
    def test_first_fit_groups_within_tolerance_and_sorts_by_x(self) -> None:
        rows = reconstruct_rows(
            [_el("Intro", 50, 100), _el("CS", 10, 110), _el("101", 30, 130)],
            RowGroupingConfig(),
        )

        self.assertEqual([r.y for r in rows], [100, 130])
        self.assertEqual(rows[0].texts(), ["CS", "Intro"])
        self.assertEqual(rows[1].texts(), ["101"])

    def test_tolerance_is_strict(self) -> None:
        rows = reconstruct_rows([_el("a", 0, 100), _el("b", 0, 125)], RowGroupingConfig(row_y_tolerance=25))
        self.assertEqual(len(rows), 2)

        rows = reconstruct_rows([_el("a", 0, 100), _el("b", 0, 124)], RowGroupingConfig(row_y_tolerance=25))
        self.assertEqual(len(rows), 1)

    def test_anchor_does_not_drift(self) -> None:
        rows = reconstruct_rows([_el("a", 0, 100), _el("b", 0, 120), _el("c", 0, 140)], RowGroupingConfig())

        self.assertEqual([r.y for r in rows], [100, 140])
        self.assertEqual(rows[0].texts(), ["a", "b"])

    def test_rows_sorted_by_y_regardless_of_input_order(self) -> None:
        rows = reconstruct_rows([_el("late", 0, 200), _el("early", 0, 100)], RowGroupingConfig())
        self.assertEqual([r.joined_text() for r in rows], ["early", "late"])

    def test_equal_x_keeps_recognizer_order(self) -> None:
        rows = reconstruct_rows([_el("first", 5, 100), _el("second", 5, 101)], RowGroupingConfig())
        self.assertEqual(rows[0].texts(), ["first", "second"])

    def test_nearest_assignment_prefers_closest_anchor(self) -> None:
        elements = [_el("top", 0, 100), _el("bottom", 0, 130), _el("mid", 10, 118)]

        first_fit = reconstruct_rows(elements, RowGroupingConfig())
        nearest = reconstruct_rows(elements, RowGroupingConfig(assignment=RowAssignment.NEAREST))

        self.assertEqual(first_fit[0].texts(), ["top", "mid"])
        self.assertEqual(nearest[1].texts(), ["bottom", "mid"])

    def test_invalid_tolerance_rejected(self) -> None:
        with self.assertRaises(ValueError):
            reconstruct_rows([], RowGroupingConfig(row_y_tolerance=0))


class TestFlattenElements(unittest.TestCase):
    def test_skips_blank_and_frameless_elements(self) -> None:
        result = RecognitionResult(
            text="CS 101",
            blocks=[
                RecognizedBlock(
                    lines=[
                        RecognizedLine(
                            elements=[
                                RecognizedElement(text=" CS ", frame=Frame(left=10, top=20, width=30, height=12)),
                                RecognizedElement(text="   ", frame=Frame(left=50, top=20, width=5, height=12)),
                                RecognizedElement(text="101", frame=None),
                                RecognizedElement(text="101", frame=Frame(left=60, top=22, width=30, height=12)),
                            ]
                        )
                    ]
                )
            ],
        )

        flat = flatten_elements(result)
        self.assertEqual([(e.text, e.x, e.y) for e in flat], [("CS", 10, 20), ("101", 60, 22)])

        rows = rows_from_recognition(result, RowGroupingConfig())
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0].joined_text(), "CS 101")


if __name__ == "__main__":
    unittest.main()
