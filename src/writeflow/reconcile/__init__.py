"""Suggestion reconciliation engine."""

from writeflow.reconcile.applier import (
    AppliedEdit,
    BatchResult,
    apply_all,
    apply_one,
)
from writeflow.reconcile.locator import closest_match, locate
from writeflow.reconcile.reconciler import reconcile
from writeflow.reconcile.validator import validate

__all__ = [
    "AppliedEdit",
    "BatchResult",
    "apply_all",
    "apply_one",
    "closest_match",
    "locate",
    "reconcile",
    "validate",
]
