"""Patient risk assessment against the KSense patients API."""

from ksense_assessment.client import fetch_with_retry, get_json, post_json
from ksense_assessment.errors import (
    ApiStatusError,
    MalformedResponseError,
    RetriesExhaustedError,
)
from ksense_assessment.pagination import PaginationResult, collect_all_records
from ksense_assessment.report import RiskAccumulator, RiskReport, assess_records
from ksense_assessment.scoring import Assessment, classify
from ksense_assessment.submit import submit_assessment

__version__ = "0.1.0"

__all__ = [
    "ApiStatusError",
    "Assessment",
    "MalformedResponseError",
    "PaginationResult",
    "RetriesExhaustedError",
    "RiskAccumulator",
    "RiskReport",
    "assess_records",
    "classify",
    "collect_all_records",
    "fetch_with_retry",
    "get_json",
    "post_json",
    "submit_assessment",
]
