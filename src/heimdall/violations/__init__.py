"""
violations package

Decides whether a scanned image shows a safety violation:
- event_schema.py -> explicit models for the vision result and the verdict
- adapter.py      -> vision service payload <-> schema <-> response/audit dicts
- rules.py        -> the head-cover evaluator
"""

from .event_schema import DetectionResult, EvaluationOutcome
from .rules import evaluate

__all__ = ["DetectionResult", "EvaluationOutcome", "evaluate"]
