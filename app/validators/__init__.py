"""
app/validators package marker.
"""

from app.validators.categorical_matcher import CategoricalMatcher, CategoryMatch, MatchStrategy
from app.validators.field_validator import FieldValidationResult, FieldValidator
from app.validators.record_validator import RecordValidator

__all__ = [
    "CategoricalMatcher",
    "CategoryMatch",
    "FieldValidationResult",
    "FieldValidator",
    "MatchStrategy",
    "RecordValidator",
]
