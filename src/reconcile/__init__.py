"""
Stage 4: Reconciliation against a reference curriculum.

The only stage with cross-quadrant knowledge. Takes every draft record of a
run and:
- drops garbage codes and duplicates
- replaces fuzzy-matched records wholesale with their reference entry
- repairs unit sums of unmatched records
- injects critical subjects missing from represented slots
- reports missing codes and accuracy

Also hosts the checks applied to records entered by hand on the review screen.
"""

from .artifacts import serialize_reconciliation, write_reconciliation_json_artifact
from .fuzzy import MATCH_THRESHOLD, best_match, normalize_code, score_codes
from .reconciler import calculate_accuracy, is_garbage_code, reconcile
from .validation import ValidationRejection, review_issues, validate_manual_entry


__all__ = [
    "MATCH_THRESHOLD",
    "ValidationRejection",
    "best_match",
    "calculate_accuracy",
    "is_garbage_code",
    "normalize_code",
    "reconcile",
    "review_issues",
    "score_codes",
    "serialize_reconciliation",
    "validate_manual_entry",
    "write_reconciliation_json_artifact",
]
