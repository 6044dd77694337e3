import json
import logging

import requests

from ksense_assessment.pagination import collect_all_records
from ksense_assessment.report import assess_records
from ksense_assessment.submit import submit_assessment

logger = logging.getLogger(__name__)


def run(api_key, session):
    print("Fetching patients...")
    collected = collect_all_records(api_key, session=session)
    print(f"Got {len(collected.records)} patients from {collected.pages} pages")

    print("Scoring")
    report = assess_records(collected.records).finalize()
    print("Counts:", report.counts())
    print("payload", json.dumps(report.to_payload(), indent=2))

    print("Submitting")
    resp = submit_assessment(session, api_key, report)
    print("Submission successful!")
    print(json.dumps(resp, indent=2))
    return report


def main(prompt=input):
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(name)-30s | %(levelname)-7s | %(message)s",
        datefmt="%H:%M:%S",
    )
    try:
        api_key = prompt("Enter API key: ").strip()
    except (EOFError, KeyboardInterrupt):
        print("Error: no API key entered")
        return 1
    if not api_key:
        print("Error: an API key is required")
        return 1

    try:
        with requests.Session() as session:
            run(api_key, session)
    except (requests.RequestException, ValueError) as exc:
        logger.debug("Run aborted", exc_info=True)
        print("Error:", exc)
        return 1
    return 0
