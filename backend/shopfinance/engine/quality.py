"""Non-fatal data-quality diagnostics collected while aggregating."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum


class DataIssue(str, Enum):
    MISSING_TIMESTAMP = "missing_timestamp"
    UNPARSEABLE_TIMESTAMP = "unparseable_timestamp"
    UNPARSEABLE_EXPENSE_DATE = "unparseable_expense_date"
    INVALID_RECORD = "invalid_record"


@dataclass
class DataQualityReport:
    """Counts of records excluded from aggregation, keyed by issue.

    A malformed record never aborts a report; it is dropped and counted here.
    Each record is counted once per report even when several periods see it.
    """
    counts: Counter = field(default_factory=Counter)
    samples: dict[DataIssue, list[str]] = field(default_factory=dict)
    _seen: set[tuple[DataIssue, int]] = field(default_factory=set, repr=False)

    max_samples = 5

    def record(self, issue: DataIssue, record_id: int, ref: str = "") -> bool:
        """Count ``issue`` for the record identified by ``record_id``.

        Returns False when that record was already counted for this issue.
        """
        key = (issue, record_id)
        if key in self._seen:
            return False
        self._seen.add(key)
        self.counts[issue] += 1
        refs = self.samples.setdefault(issue, [])
        if ref and len(refs) < self.max_samples:
            refs.append(ref)
        return True

    def add(self, issue: DataIssue, count: int) -> None:
        """Count ``count`` anonymous records, e.g. ones rejected before reaching the engine."""
        if count > 0:
            self.counts[issue] += count

    def count(self, issue: DataIssue) -> int:
        return self.counts[issue]

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def copy(self) -> DataQualityReport:
        return DataQualityReport(
            counts=Counter(self.counts),
            samples={issue: list(refs) for issue, refs in self.samples.items()},
            _seen=set(self._seen),
        )

    def as_dict(self) -> dict[str, int]:
        return {issue.value: self.counts[issue] for issue in DataIssue}
