from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from prgate_core.coverage.aggregate import AggregationResult
from prgate_core.errors import ValidationError


@dataclass(frozen=True)
class GateDecision:
    passed: bool
    percentage: Decimal | None
    threshold: float


def evaluate(result: AggregationResult, threshold: float) -> GateDecision:
    """Pass when there is nothing to measure or the percentage meets the threshold.

    The boundary is inclusive. A change that touches no instrumented source
    always passes: the gate covers new and modified code only.
    """
    if threshold < 0:
        raise ValidationError(f"threshold must be a non-negative number, got {threshold:g}.")
    if result.percentage is None:
        return GateDecision(passed=True, percentage=None, threshold=threshold)
    passed = result.percentage >= Decimal(str(threshold))
    return GateDecision(passed=passed, percentage=result.percentage, threshold=threshold)
