"""
Summary tabulation over variance lines.
"""

from typing import Iterable

from po_reconciliation.schemas.output import VarianceLine, VarianceStatus, VarianceSummary


STATUS_COUNTERS = {
    VarianceStatus.MATCH: "matched",
    VarianceStatus.SHORT: "short",
    VarianceStatus.OVER: "over",
    VarianceStatus.MISSING: "missing",
    VarianceStatus.EXTRA: "extra",
}


def tabulate(lines: Iterable[VarianceLine]) -> VarianceSummary:
    """Count lines per status in a single pass."""
    summary = VarianceSummary()
    for line in lines:
        counter = STATUS_COUNTERS[VarianceStatus(line.status)]
        setattr(summary, counter, getattr(summary, counter) + 1)
    return summary
