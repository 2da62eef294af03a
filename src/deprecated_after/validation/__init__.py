from .engine import evaluate_record, validate
from .model import ELEMENT_KINDS, AnnotationRecord, ValidationResult, ViolationReport

__all__ = [
    "AnnotationRecord",
    "ELEMENT_KINDS",
    "ValidationResult",
    "ViolationReport",
    "evaluate_record",
    "validate",
]
