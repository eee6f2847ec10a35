from dataclasses import dataclass, field
from typing import Iterable, List

from mediaparse.models import ArticleRecord
from mediaparse.outcomes import Empty, Failure, PageOutcome, Success


@dataclass
class RunResult:
    """Records and human-readable diagnostics of one batch, in arrival order."""

    records: List[ArticleRecord] = field(default_factory=list)
    diagnostics: List[str] = field(default_factory=list)
    empty: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return len(self.records) + self.empty + self.failed


def aggregate(outcomes: Iterable[PageOutcome]) -> RunResult:
    """Drain ``outcomes`` and split them into records and diagnostics."""
    result = RunResult()
    for outcome in outcomes:
        if isinstance(outcome, Success):
            result.records.append(outcome.record)
        elif isinstance(outcome, Empty):
            result.empty += 1
            result.diagnostics.append(outcome.describe())
        elif isinstance(outcome, Failure):
            result.failed += 1
            result.diagnostics.append(outcome.describe())
        else:
            raise TypeError(f"Unknown outcome type: {type(outcome).__name__}")
    return result
