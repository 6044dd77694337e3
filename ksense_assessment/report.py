import logging
from dataclasses import dataclass, field
from typing import List, Tuple

from ksense_assessment.scoring import Assessment, classify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RiskReport:
    high_risk: Tuple[str, ...] = ()
    fever: Tuple[str, ...] = ()
    data_quality_issues: Tuple[str, ...] = ()

    def to_payload(self) -> dict:
        return {
            "high_risk_patients": list(self.high_risk),
            "fever_patients": list(self.fever),
            "data_quality_issues": list(self.data_quality_issues),
        }

    def counts(self) -> dict:
        return {k: len(v) for k, v in self.to_payload().items()}


@dataclass
class RiskAccumulator:
    """Patient IDs routed so far, in the order the records were seen."""

    high_risk: List[str] = field(default_factory=list)
    fever: List[str] = field(default_factory=list)
    data_quality_issues: List[str] = field(default_factory=list)
    processed: int = 0

    def add(self, assessment: Assessment) -> "RiskAccumulator":
        pid = assessment.patient_id
        if assessment.data_quality_issue:
            self.data_quality_issues.append(pid)
        if assessment.fever:
            self.fever.append(pid)
        if assessment.high_risk:
            self.high_risk.append(pid)
        self.processed += 1
        return self

    def finalize(self) -> RiskReport:
        return RiskReport(
            high_risk=tuple(self.high_risk),
            fever=tuple(self.fever),
            data_quality_issues=tuple(self.data_quality_issues),
        )


def assess_records(records, accumulator=None) -> RiskAccumulator:
    acc = accumulator if accumulator is not None else RiskAccumulator()
    for record in records:
        acc.add(classify(record))
    logger.debug("Assessed %d records", acc.processed)
    return acc
