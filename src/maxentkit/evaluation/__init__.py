"""
Model evaluation.
"""

from maxentkit.evaluation.comparison import ComparisonResult, compare_algorithms
from maxentkit.evaluation.metrics import ClassificationMetrics, evaluate_model

__all__ = [
    "ClassificationMetrics",
    "ComparisonResult",
    "compare_algorithms",
    "evaluate_model",
]
