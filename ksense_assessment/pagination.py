import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from ksense_assessment import config
from ksense_assessment.client import get_json
from ksense_assessment.errors import MalformedResponseError

logger = logging.getLogger(__name__)


@dataclass
class PaginationResult:
    records: List[dict] = field(default_factory=list)
    total: Optional[int] = None  # as declared by the first page
    pages: int = 0

    @property
    def count_matches(self) -> bool:
        return self.total is None or len(self.records) == self.total


def _read_page(body, page):
    if not isinstance(body, dict):
        raise MalformedResponseError(f"page {page}: expected a JSON object, got {type(body).__name__}")
    data = body.get("data")
    pagination = body.get("pagination")
    if not isinstance(data, list):
        raise MalformedResponseError(f"page {page}: missing or invalid 'data'")
    if not isinstance(pagination, dict):
        raise MalformedResponseError(f"page {page}: missing or invalid 'pagination'")
    return data, pagination


def fetch_page(session, api_key, page, limit=config.PAGE_LIMIT, **kwargs):
    try:
        body = get_json(session, f"/patients?page={page}&limit={limit}", api_key, **kwargs)
    except ValueError as exc:
        raise MalformedResponseError(f"page {page}: body is not valid JSON") from exc
    return _read_page(body, page)


def collect_all_records(api_key, session=None, limit=config.PAGE_LIMIT, **kwargs) -> PaginationResult:
    """Walk the patients endpoint page by page until ``hasNext`` is false.

    Pages are fetched one at a time starting from 1. There is no page cap:
    a server that always reports ``hasNext`` keeps this loop going.
    The first page's ``total`` is authoritative; a disagreement with the
    number of records collected is logged, not raised.
    """
    if session is None:
        with requests.Session() as s:
            return collect_all_records(api_key, session=s, limit=limit, **kwargs)

    result = PaginationResult()
    page = 1
    has_next = True
    while has_next:
        data, pagination = fetch_page(session, api_key, page, limit=limit, **kwargs)
        result.records.extend(data)
        if page == 1:
            result.total = pagination.get("total")
        logger.info("Processing page %d, patients: %d", page, len(data))
        has_next = bool(pagination.get("hasNext"))
        result.pages = page
        page += 1

    if not result.count_matches:
        logger.warning("Processed %d records, expected %s", len(result.records), result.total)
    return result
