import logging

from ksense_assessment.client import post_json

logger = logging.getLogger(__name__)


def submit_assessment(session, api_key, report, **kwargs):
    payload = report.to_payload()
    logger.info("Submitting assessment: %s", report.counts())
    return post_json(session, "/submit-assessment", api_key, payload, **kwargs)
