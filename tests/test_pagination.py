import logging
from unittest.mock import MagicMock

import pytest

from ksense_assessment.errors import ApiStatusError, MalformedResponseError, RetriesExhaustedError
from ksense_assessment.pagination import collect_all_records
from ksense_assessment.report import assess_records
from tests.mocks import make_page, make_response, make_session, requested_urls


def patients(*ids):
    return [{"patient_id": i, "blood_pressure": "120/80", "temperature": 98.6, "age": 40} for i in ids]


class TestCollectAllRecords:
    def test_walks_pages_in_order_until_has_next_false(self):
        session = make_session(
            make_page(patients("A", "B"), 5, True),
            make_page(patients("C", "D"), 5, True),
            make_page(patients("E"), 5, False),
            make_page(patients("X"), 5, False),
        )

        result = collect_all_records("key", session=session, sleep=MagicMock())

        assert [r["patient_id"] for r in result.records] == ["A", "B", "C", "D", "E"]
        assert result.pages == 3
        assert result.count_matches
        urls = requested_urls(session)
        assert len(urls) == 3
        for page, url in enumerate(urls, start=1):
            assert url.endswith(f"/patients?page={page}&limit=10")

    def test_first_page_total_is_authoritative(self):
        session = make_session(
            make_page(patients("A"), 2, True),
            make_page(patients("B"), 99, False),
        )

        result = collect_all_records("key", session=session)

        assert result.total == 2
        assert result.count_matches

    def test_count_mismatch_warns_but_still_reports(self, caplog):
        session = make_session(
            make_page(patients("A", "B"), 10, True),
            make_page(patients("C"), 10, False),
        )

        with caplog.at_level(logging.WARNING, logger="ksense_assessment.pagination"):
            result = collect_all_records("key", session=session)

        assert not result.count_matches
        assert "Processed 3 records, expected 10" in caplog.text
        report = assess_records(result.records).finalize()
        assert report.high_risk == ()
        assert report.data_quality_issues == ()

    def test_missing_has_next_ends_the_walk(self):
        session = make_session(make_response(body={"data": patients("A"), "pagination": {"total": 1}}))
        result = collect_all_records("key", session=session)
        assert result.pages == 1

    def test_retries_a_page_then_continues(self):
        session = make_session(
            make_page(patients("A"), 2, True),
            make_response(503),
            make_page(patients("B"), 2, False),
        )
        sleep = MagicMock()

        result = collect_all_records("key", session=session, sleep=sleep, jitter=lambda: 0.0)

        assert len(result.records) == 2
        sleep.assert_called_once_with(1.0)
        assert requested_urls(session)[1] == requested_urls(session)[2]

    def test_overflowing_retry_hint_uses_backoff(self):
        session = make_session(
            make_response(503, headers={"Retry-After": "1e400"}),
            make_page(patients("A"), 1, False),
        )
        sleep = MagicMock()

        result = collect_all_records("key", session=session, sleep=sleep, jitter=lambda: 0.0)

        assert len(result.records) == 1
        sleep.assert_called_once_with(1.0)

    def test_sends_api_key_on_every_page(self):
        session = make_session(make_page([], 0, True), make_page([], 0, False))
        collect_all_records("secret", session=session)
        for c in session.request.call_args_list:
            assert c.kwargs["headers"] == {"x-api-key": "secret"}


class TestFailures:
    @pytest.mark.parametrize(
        "body",
        [
            {"pagination": {"total": 1, "hasNext": False}},
            {"data": [], "total": 1},
            {"data": None, "pagination": {"total": 0, "hasNext": False}},
            ["not", "an", "object"],
        ],
    )
    def test_malformed_envelope(self, body):
        session = make_session(make_response(body=body))
        with pytest.raises(MalformedResponseError):
            collect_all_records("key", session=session)

    def test_body_not_json(self):
        resp = make_response()
        resp.json.side_effect = ValueError("Expecting value")
        with pytest.raises(MalformedResponseError):
            collect_all_records("key", session=make_session(resp))

    def test_terminal_status_aborts(self):
        session = make_session(make_page(patients("A"), 2, True), make_response(401))
        with pytest.raises(ApiStatusError):
            collect_all_records("key", session=session)
        assert session.request.call_count == 2

    def test_exhausted_retries_abort(self):
        session = make_session(*[make_response(500) for _ in range(3)])
        with pytest.raises(RetriesExhaustedError):
            collect_all_records("key", session=session, max_retries=2, sleep=MagicMock())
