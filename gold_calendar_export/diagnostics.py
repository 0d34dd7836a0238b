"""
Per-call collection of recoverable anomalies.

The extractor never raises for a bad field, row or heading; it records what
it skipped or guessed here so callers and tests can inspect it.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

logger = logging.getLogger(__name__)

EMPTY_DAYS = "empty-days"
TIME_CORRECTED = "time-corrected"
ROW_SKIPPED = "row-skipped"
FIELD_FAILED = "field-failed"
HEADING_UNPARSED = "heading-unparsed"
NO_SESSION_ROWS = "no-session-rows"


@dataclass(frozen=True)
class Anomaly:
    kind: str
    message: str


@dataclass
class Diagnostics:
    anomalies: List[Anomaly] = field(default_factory=list)

    def record(self, kind: str, message: str) -> None:
        logger.info("%s: %s", kind, message)
        self.anomalies.append(Anomaly(kind, message))

    def count(self, kind: str) -> int:
        return sum(1 for a in self.anomalies if a.kind == kind)

    def kinds(self) -> List[str]:
        return [a.kind for a in self.anomalies]

    def __len__(self) -> int:
        return len(self.anomalies)
