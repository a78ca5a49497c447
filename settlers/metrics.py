"""Prometheus metrics for saving, loading and resuming games.

Counters are labeled by operation and outcome so a dashboard can show
failed loads separately from refused resumes.
"""

from __future__ import annotations

from typing import Final

from prometheus_client import Counter


SAVEGAME_OPERATIONS: Final[Counter] = Counter(
    "settlers_savegame_operations_total",
    (
        "Total savegame operations, labeled by operation "
        "(save, load, resume) and outcome (ok, error)."
    ),
    labelnames=("operation", "outcome"),
)

RESUME_CONSTRAINT_FAILURES: Final[Counter] = Counter(
    "settlers_resume_constraint_failures_total",
    "Total resumes refused by a constraint, labeled by constraint name.",
    labelnames=("constraint",),
)


def record_savegame_operation(operation: str, ok: bool) -> None:
    """Increment the operations counter for one save, load or resume."""
    SAVEGAME_OPERATIONS.labels(operation=operation, outcome="ok" if ok else "error").inc()
