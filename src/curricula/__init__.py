"""
Reference curriculum configuration.

One JSON document per degree program holds the ground-truth subject table
(year -> semester -> subjects) and the curriculum-specific rule tables used by
extraction, rescue and year detection. Stage code never hard-codes course codes.
"""

from .loader import (
    CurriculumConfig,
    CurriculumConfigError,
    MAX_COMPONENT_UNITS,
    curriculum_from_dict,
    load_builtin_curriculum,
    load_curriculum,
)
from .rules import ElectiveFamily, ExtractionRules, RescueKind, RescueRule, YearDetectionRules

__all__ = [
    "CurriculumConfig",
    "CurriculumConfigError",
    "MAX_COMPONENT_UNITS",
    "curriculum_from_dict",
    "load_builtin_curriculum",
    "load_curriculum",
    "ElectiveFamily",
    "ExtractionRules",
    "RescueKind",
    "RescueRule",
    "YearDetectionRules",
]
